"""
Segment duration seeding and bound-driven time scaling for a single joint.
"""

import numpy as np

from iterspline.config import DURATION_EPSILON

from .cubic_spline import fit_cubic_spline, segment_jerks


def init_times(positions: np.ndarray, durations: np.ndarray, max_velocity: float) -> bool:
    """
    Raise each segment duration to at least the time needed at max velocity.

    Durations are shared across joints, so this only ever grows entries and
    leaves longer durations chosen for other joints untouched.

    Returns:
        True if any duration was raised
    """
    min_dt = np.abs(np.diff(np.asarray(positions, dtype=float))) / max_velocity + DURATION_EPSILON
    raise_mask = durations < min_dt
    durations[raise_mask] = min_dt[raise_mask]
    return bool(np.any(raise_mask))


def fit_spline_and_adjust_times(
    positions: np.ndarray,
    durations: np.ndarray,
    initial_velocity: float,
    final_velocity: float,
    max_velocity: float,
    max_acceleration: float,
    max_jerk: float,
    time_factor: float,
) -> tuple[bool, np.ndarray, np.ndarray]:
    """
    Fit a spline, then stretch every segment that breaks a bound.

    A segment is stretched by ``time_factor`` when the velocity or acceleration
    at either of its knots is out of bounds. Only segments whose knots are
    within velocity and acceleration bounds are then checked for jerk, which
    is constant over a segment.

    Args:
        positions: Knot positions (N,)
        durations: Shared segment durations (N-1,), scaled in place
        initial_velocity: Clamped velocity at knot 0
        final_velocity: Clamped velocity at knot N-1
        max_velocity: Joint velocity limit
        max_acceleration: Joint acceleration limit
        max_jerk: Joint jerk limit
        time_factor: Multiplicative stretch (> 1.0)

    Returns:
        (changed, velocities, accelerations) where velocities/accelerations
        come from the fit made before any stretching
    """
    velocities, accelerations = fit_cubic_spline(
        positions, durations, initial_velocity, final_velocity
    )

    vel_over = np.abs(velocities) > max_velocity
    acc_over = np.abs(accelerations) > max_acceleration
    knot_over = vel_over | acc_over
    stretch = knot_over[:-1] | knot_over[1:]

    # A segment is stretched at most once per call
    jerk_over = ~stretch & (np.abs(segment_jerks(accelerations, durations)) > max_jerk)
    stretch |= jerk_over

    durations[stretch] *= time_factor
    return bool(np.any(stretch)), velocities, accelerations
