"""
Pytest configuration and shared fixtures for the iterspline test suite.

Provides builders for joint groups and waypoint trajectories, plus helpers
that check the kinematic bounds of a timed trajectory.
"""

import os
import sys
from collections.abc import Callable, Sequence

import numpy as np
import pytest

# Add the parent directory to Python path so we can import the package
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from iterspline.robot import JointModelGroup, RobotTrajectory, VariableBounds, Waypoint
from iterspline.timing import segment_jerks


def build_group(limits: Sequence[tuple[float, float, float]], name: str = "arm") -> JointModelGroup:
    """Group with one joint per (max_velocity, max_acceleration, max_jerk) triple."""
    names = [f"joint_{i + 1}" for i in range(len(limits))]
    bounds = {
        n: VariableBounds(
            max_velocity=v,
            velocity_bounded=True,
            max_acceleration=a,
            acceleration_bounded=True,
            max_jerk=j,
            jerk_bounded=True,
        )
        for n, (v, a, j) in zip(names, limits)
    }
    return JointModelGroup(name=name, variable_names=names, bounds=bounds)


def build_trajectory(
    group: JointModelGroup | None,
    positions,
    initial_velocity=None,
    final_velocity=None,
    initial_acceleration=None,
    final_acceleration=None,
) -> RobotTrajectory:
    """Trajectory from a (waypoints, joints) position array and optional end conditions."""
    positions = np.asarray(positions, dtype=float)
    if positions.ndim == 1:
        positions = positions.reshape(-1, 1)
    waypoints = [Waypoint(positions=row) for row in positions]
    if waypoints:
        if initial_velocity is not None:
            waypoints[0].velocities[:] = initial_velocity
        if initial_acceleration is not None:
            waypoints[0].accelerations[:] = initial_acceleration
        if final_velocity is not None:
            waypoints[-1].velocities[:] = final_velocity
        if final_acceleration is not None:
            waypoints[-1].accelerations[:] = final_acceleration
    return RobotTrajectory(group, waypoints)


def assert_within_limits(
    trajectory: RobotTrajectory,
    limits: Sequence[tuple[float, float, float]],
    tol: float = 1e-9,
) -> None:
    """Check knot velocities/accelerations and segment jerks of every joint."""
    vel = trajectory.velocities()
    acc = trajectory.accelerations()
    durations = trajectory.durations()
    for j, (v_max, a_max, j_max) in enumerate(limits):
        assert np.all(np.abs(vel[:, j]) <= v_max * (1 + tol)), f"velocity of joint {j}"
        assert np.all(np.abs(acc[:, j]) <= a_max * (1 + tol)), f"acceleration of joint {j}"
        jerks = segment_jerks(acc[:, j], durations)
        assert np.all(np.abs(jerks) <= j_max * (1 + tol)), f"jerk of joint {j}"


@pytest.fixture
def make_group() -> Callable[..., JointModelGroup]:
    return build_group


@pytest.fixture
def make_trajectory() -> Callable[..., RobotTrajectory]:
    return build_trajectory


@pytest.fixture
def check_limits() -> Callable[..., None]:
    return assert_within_limits


@pytest.fixture
def line_trajectory() -> RobotTrajectory:
    """Single joint through 0, 1, 2, 3 starting and ending at rest, limits 1/1/1."""
    return build_trajectory(
        build_group([(1.0, 1.0, 1.0)]),
        [0.0, 1.0, 2.0, 3.0],
        initial_velocity=0.0,
        final_velocity=0.0,
        initial_acceleration=0.0,
        final_acceleration=0.0,
    )


@pytest.fixture
def arm_limits() -> list[tuple[float, float, float]]:
    return [(1.0, 2.0, 8.0), (0.5, 1.0, 4.0), (2.0, 3.0, 9.0)]


@pytest.fixture
def arm_trajectory(arm_limits) -> RobotTrajectory:
    """Three joints with different limits over seven waypoints."""
    positions = [
        [0.0, 0.0, 1.0],
        [0.4, -0.2, 1.1],
        [0.9, -0.5, 1.1],
        [1.3, -0.4, 0.8],
        [1.6, 0.1, 0.6],
        [1.8, 0.3, 0.5],
        [2.0, 0.4, 0.5],
    ]
    group = build_group(arm_limits)
    return build_trajectory(
        group,
        positions,
        initial_velocity=[0.2, 0.0, 0.0],
        final_velocity=[0.0, -0.1, 0.0],
        initial_acceleration=0.0,
        final_acceleration=0.0,
    )
