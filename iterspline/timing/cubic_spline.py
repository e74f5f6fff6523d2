"""
Clamped cubic spline fit over a timed series of points.

A cubic spline keeps position, velocity and acceleration continuous at every
interior knot. 'Clamped' means the velocity at the two end knots is given.
Fitting it is a tridiagonal linear system in the knot accelerations::

    dt[i-1]*a[i-1] + 2*(dt[i-1]+dt[i])*a[i] + dt[i]*a[i+1]
        = 6*((x[i+1]-x[i])/dt[i] - (x[i]-x[i-1])/dt[i-1])

with the first and last rows replaced by the clamped end conditions::

    2*dt[0]*a[0] + dt[0]*a[1]           = 6*((x[1]-x[0])/dt[0] - v0)
    dt[-1]*a[-2] + 2*dt[-1]*a[-1]       = 6*(vf - (x[-1]-x[-2])/dt[-1])

The system is solved in O(N) with a forward elimination sweep followed by
back-substitution; velocities are then recovered segment by segment.
"""

from collections.abc import Sequence

import numpy as np


def fit_cubic_spline(
    positions: Sequence[float] | np.ndarray,
    durations: Sequence[float] | np.ndarray,
    initial_velocity: float,
    final_velocity: float,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Fit a clamped cubic spline and return knot velocities and accelerations.

    Args:
        positions: Knot positions, shape (N,), N >= 2
        durations: Time between consecutive knots, shape (N-1,), all > 0
        initial_velocity: Velocity imposed at knot 0
        final_velocity: Velocity imposed at knot N-1

    Returns:
        (velocities, accelerations), each of shape (N,)
    """
    x = np.asarray(positions, dtype=float)
    dt = np.asarray(durations, dtype=float)
    n = x.shape[0]
    if n < 2:
        raise ValueError("at least two positions are required")
    if dt.shape != (n - 1,):
        raise ValueError(f"durations must have shape ({n - 1},), got {dt.shape}")
    if np.any(dt <= 0.0):
        raise ValueError("segment durations must be strictly positive")

    c = np.empty(n)
    d = np.empty(n)

    # Forward sweep
    c[0] = 0.5
    d[0] = 3.0 * ((x[1] - x[0]) / dt[0] - initial_velocity) / dt[0]
    for i in range(1, n - 1):
        dt2 = dt[i - 1] + dt[i]
        a = dt[i - 1] / dt2
        denom = 2.0 - a * c[i - 1]
        c[i] = (1.0 - a) / denom
        rhs = 6.0 * ((x[i + 1] - x[i]) / dt[i] - (x[i] - x[i - 1]) / dt[i - 1]) / dt2
        d[i] = (rhs - a * d[i - 1]) / denom
    rhs = 6.0 * (final_velocity - (x[n - 1] - x[n - 2]) / dt[n - 2])
    d[n - 1] = (rhs - dt[n - 2] * d[n - 2]) / (dt[n - 2] * (2.0 - c[n - 2]))

    # Back-substitution
    accelerations = np.empty(n)
    accelerations[n - 1] = d[n - 1]
    for i in range(n - 2, -1, -1):
        accelerations[i] = d[i] - c[i] * accelerations[i + 1]

    velocities = np.empty(n)
    velocities[0] = initial_velocity
    for i in range(1, n - 1):
        velocities[i] = (x[i + 1] - x[i]) / dt[i] - (
            2.0 * accelerations[i] + accelerations[i + 1]
        ) * dt[i] / 6.0
    velocities[n - 1] = final_velocity

    return velocities, accelerations


def segment_jerks(
    accelerations: Sequence[float] | np.ndarray, durations: Sequence[float] | np.ndarray
) -> np.ndarray:
    """Constant jerk of each spline segment, shape (N-1,)."""
    return np.diff(np.asarray(accelerations, dtype=float)) / np.asarray(durations, dtype=float)
