"""
Waypoint container for joint-space trajectories.
"""

from __future__ import annotations

import copy
from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np

from .model import JointModelGroup


def _as_vector(values: Sequence[float] | np.ndarray | None, size: int) -> np.ndarray:
    if values is None:
        return np.zeros(size)
    arr = np.asarray(values, dtype=float)
    if arr.shape != (size,):
        raise ValueError(f"expected {size} values, got shape {arr.shape}")
    return arr.copy()


@dataclass
class Waypoint:
    """
    One sample along the path: a value per joint for position, velocity and
    acceleration, and the time elapsed since the previous waypoint.

    Missing velocities/accelerations are zero.
    """

    positions: np.ndarray
    velocities: np.ndarray | None = None
    accelerations: np.ndarray | None = None
    duration_from_previous: float = 0.0

    def __post_init__(self):
        self.positions = np.asarray(self.positions, dtype=float).copy()
        size = self.positions.shape[0]
        self.velocities = _as_vector(self.velocities, size)
        self.accelerations = _as_vector(self.accelerations, size)
        self.duration_from_previous = float(self.duration_from_previous)

    @classmethod
    def blend(cls, first: Waypoint, second: Waypoint, weight: float) -> Waypoint:
        """Waypoint at ``weight * first + (1 - weight) * second`` in all derivatives."""
        other = 1.0 - weight
        return cls(
            positions=weight * first.positions + other * second.positions,
            velocities=weight * first.velocities + other * second.velocities,
            accelerations=weight * first.accelerations + other * second.accelerations,
        )


@dataclass
class RobotTrajectory:
    """Ordered waypoints for a joint group."""

    group: JointModelGroup | None
    waypoints: list[Waypoint] = field(default_factory=list)

    @property
    def waypoint_count(self) -> int:
        return len(self.waypoints)

    def empty(self) -> bool:
        return not self.waypoints

    def copy(self) -> RobotTrajectory:
        """Deep copy of the waypoints; the group is shared."""
        return RobotTrajectory(self.group, copy.deepcopy(self.waypoints))

    def add_waypoint(self, waypoint: Waypoint) -> None:
        self.waypoints.append(waypoint)

    def insert_waypoint(self, index: int, waypoint: Waypoint) -> None:
        self.waypoints.insert(index, waypoint)

    def positions(self) -> np.ndarray:
        """Positions as an array of shape (waypoints, joints)."""
        return np.array([wp.positions for wp in self.waypoints], dtype=float)

    def velocities(self) -> np.ndarray:
        return np.array([wp.velocities for wp in self.waypoints], dtype=float)

    def accelerations(self) -> np.ndarray:
        return np.array([wp.accelerations for wp in self.waypoints], dtype=float)

    def durations(self) -> np.ndarray:
        """Segment durations, shape (waypoints - 1,)."""
        return np.array([wp.duration_from_previous for wp in self.waypoints[1:]], dtype=float)

    def waypoint_times(self) -> np.ndarray:
        """Time of each waypoint measured from the first one."""
        return np.concatenate([[0.0], np.cumsum(self.durations())])

    def total_duration(self) -> float:
        return float(np.sum(self.durations()))

    def unwind(self) -> None:
        """
        Remove 2*pi jumps from continuous joints so consecutive positions
        differ by at most pi. The first waypoint keeps its value.
        """
        if self.group is None or len(self.waypoints) < 2:
            return
        for j, name in enumerate(self.group.variable_names):
            if not self.group.get_variable_bounds(name).continuous:
                continue
            column = np.array([wp.positions[j] for wp in self.waypoints])
            unwrapped = np.unwrap(column)
            for wp, value in zip(self.waypoints, unwrapped):
                wp.positions[j] = value
