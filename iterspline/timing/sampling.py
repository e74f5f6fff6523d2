"""
Dense evaluation of timed trajectories.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy.interpolate import CubicSpline

from iterspline.config import SAMPLE_RATE_HZ
from iterspline.robot.trajectory import RobotTrajectory


@dataclass
class SampledTrajectory:
    """Trajectory evaluated on a uniform time grid; arrays are (samples, joints)."""

    times: np.ndarray
    positions: np.ndarray
    velocities: np.ndarray
    accelerations: np.ndarray


def build_splines(trajectory: RobotTrajectory) -> CubicSpline:
    """
    Clamped cubic spline through all joints of a timed trajectory.

    The end velocities of the first and last waypoints are imposed; interior
    continuity matches the spline the time-parameterization fitted.
    """
    if trajectory.waypoint_count < 2:
        raise ValueError("at least two waypoints are required")
    times = trajectory.waypoint_times()
    if np.any(np.diff(times) <= 0.0):
        raise ValueError("trajectory is not time-parameterized (non-positive durations)")
    first, last = trajectory.waypoints[0], trajectory.waypoints[-1]
    bc = ((1, first.velocities), (1, last.velocities))
    return CubicSpline(times, trajectory.positions(), axis=0, bc_type=bc)


def sample_trajectory(
    trajectory: RobotTrajectory, sample_rate: float | None = None
) -> SampledTrajectory:
    """
    Evaluate a timed trajectory at ``sample_rate`` Hz, including both ends.
    """
    sr = SAMPLE_RATE_HZ if sample_rate is None else float(sample_rate)
    if sr <= 0:
        raise ValueError("sample_rate must be positive")
    spline = build_splines(trajectory)
    total = trajectory.total_duration()
    # One sample per period plus the end point; never fewer than the two ends
    t = np.linspace(0.0, total, max(2, int(round(total * sr)) + 1))
    return SampledTrajectory(
        times=t,
        positions=spline(t),
        velocities=spline(t, 1),
        accelerations=spline(t, 2),
    )
