"""
Reposition the 2nd and 2nd-to-last knots so the spline's end accelerations
take prescribed values.
"""

import logging

import numpy as np

from iterspline.config import BOUNDARY_ACCELERATION_TOLERANCE, MAX_BOUNDARY_CORRECTIONS

from .cubic_spline import fit_cubic_spline

logger = logging.getLogger(__name__)


def _end_sensitivity(
    positions: np.ndarray,
    durations: np.ndarray,
    initial_velocity: float,
    final_velocity: float,
    base: np.ndarray,
) -> np.ndarray:
    """
    2x2 matrix of end-acceleration change per unit move of knots 1 and N-2.

    Column 0 is the response to knot 1, column 1 the response to knot N-2.
    """
    n = positions.shape[0]
    jacobian = np.empty((2, 2))
    for col, knot in enumerate((1, n - 2)):
        saved = positions[knot]
        positions[knot] = saved + 1.0
        _, acc = fit_cubic_spline(positions, durations, initial_velocity, final_velocity)
        positions[knot] = saved
        jacobian[:, col] = (acc[0] - base[0], acc[n - 1] - base[1])
    return jacobian


def adjust_two_positions(
    positions: np.ndarray,
    durations: np.ndarray,
    initial_velocity: float,
    final_velocity: float,
    initial_acceleration: float,
    final_acceleration: float,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Move ``positions[1]`` and ``positions[-2]`` in place to match end accelerations.

    For fixed durations the spline is linear in its knot positions, so the two
    end accelerations are a joint affine function of the two moved knots. One
    base fit plus one fit per knot gives that function exactly and the 2x2
    system is solved for both knots at once. Further steps only remove
    floating-point residue.

    If the end accelerations do not respond to the two knots (singular system)
    the knots keep their positions. A residual left above
    ``BOUNDARY_ACCELERATION_TOLERANCE`` is logged as a warning.

    Returns:
        (velocities, accelerations) of the spline through the moved knots
    """
    n = positions.shape[0]
    if n < 4:
        raise ValueError("at least four positions are required to move two knots")

    target = np.array([initial_acceleration, final_acceleration], dtype=float)
    vel, acc = fit_cubic_spline(positions, durations, initial_velocity, final_velocity)
    residual = target - acc[[0, n - 1]]

    for _ in range(MAX_BOUNDARY_CORRECTIONS):
        if np.max(np.abs(residual)) <= BOUNDARY_ACCELERATION_TOLERANCE:
            return vel, acc
        jacobian = _end_sensitivity(
            positions, durations, initial_velocity, final_velocity, acc[[0, n - 1]]
        )
        if np.linalg.det(jacobian) == 0.0:
            logger.debug(f"End accelerations insensitive to knots 1 and {n - 2}, keeping them")
            break
        step = np.linalg.solve(jacobian, residual)
        positions[1] += step[0]
        positions[n - 2] += step[1]
        vel, acc = fit_cubic_spline(positions, durations, initial_velocity, final_velocity)
        residual = target - acc[[0, n - 1]]

    if np.max(np.abs(residual)) > BOUNDARY_ACCELERATION_TOLERANCE:
        logger.warning(
            f"End accelerations {acc[0]:.9g}/{acc[n - 1]:.9g} miss targets "
            f"{initial_acceleration:.9g}/{final_acceleration:.9g}"
        )
    return vel, acc
