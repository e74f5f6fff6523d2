"""
Iterative spline time-parameterization of joint-space trajectories.

Assigns a duration to every segment of a waypoint path so that the clamped
cubic spline through each joint's positions respects that joint's velocity,
acceleration and jerk limits, while matching the prescribed velocity and
acceleration at both ends of the path.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from iterspline import config
from iterspline.config import (
    DEFAULT_ADD_POINTS,
    DEFAULT_MATCH_BOUNDARY_ACCELERATION,
    DEFAULT_TIME_FACTOR,
    DURATION_EPSILON,
    INSERTED_POINT_WEIGHT,
    MAX_REFINEMENT_ITERATIONS,
    MIN_WAYPOINTS,
)
from iterspline.robot.model import JointLimits, resolve_joint_limits
from iterspline.robot.trajectory import RobotTrajectory, Waypoint
from iterspline.utils.errors import (
    InsufficientWaypoints,
    InvalidConfiguration,
    MalformedTrajectory,
    MissingGroupContext,
    RefinementDidNotConverge,
    TimeParameterizationError,
)

from .single_joint import SingleJointTrajectory, check_boundary_limits, refine_joint

logger = logging.getLogger(__name__)


@dataclass
class TimeParameterizationResult:
    """Outcome of :meth:`IterativeSplineParameterization.compute_time_stamps`."""

    success: bool
    trajectory: RobotTrajectory | None = None
    error: TimeParameterizationError | None = None

    def __bool__(self) -> bool:
        return self.success


class IterativeSplineParameterization:
    """
    Time-parameterize a trajectory as per-joint clamped cubic splines.

    Segment durations are shared by all joints. They start tiny, are seeded
    from each joint's max velocity, and are then stretched by
    ``max_time_change_per_it`` wherever a joint's spline breaks a bound,
    repeating over all joints until one full pass changes nothing.
    """

    def __init__(
        self,
        max_time_change_per_it: float = DEFAULT_TIME_FACTOR,
        add_points: bool = DEFAULT_ADD_POINTS,
        match_boundary_acceleration: bool = DEFAULT_MATCH_BOUNDARY_ACCELERATION,
        max_iterations: int = MAX_REFINEMENT_ITERATIONS,
    ):
        """
        Args:
            max_time_change_per_it: Factor (> 1.0) an offending segment grows by per retry
            add_points: Insert a synthetic waypoint next to each end of the path
                (only used together with boundary-acceleration matching)
            match_boundary_acceleration: Move the 2nd and 2nd-to-last waypoints
                so the spline starts and ends at the prescribed accelerations
            max_iterations: Cap for every repeat-until-stable loop
        """
        self.max_time_change_per_it = float(max_time_change_per_it)
        self.add_points = bool(add_points)
        self.match_boundary_acceleration = bool(match_boundary_acceleration)
        self.max_iterations = int(max_iterations)

    def compute_time_stamps(
        self,
        trajectory: RobotTrajectory,
        max_velocity_scaling_factor: float = 1.0,
        max_acceleration_scaling_factor: float = 1.0,
    ) -> TimeParameterizationResult:
        """
        Same as :meth:`parameterize`, but failures are logged and reported in
        the returned result instead of raised.
        """
        try:
            timed = self.parameterize(
                trajectory, max_velocity_scaling_factor, max_acceleration_scaling_factor
            )
        except TimeParameterizationError as e:
            logger.error(str(e))
            return TimeParameterizationResult(success=False, error=e)
        return TimeParameterizationResult(success=True, trajectory=timed)

    def parameterize(
        self,
        trajectory: RobotTrajectory,
        max_velocity_scaling_factor: float = 1.0,
        max_acceleration_scaling_factor: float = 1.0,
    ) -> RobotTrajectory:
        """
        Return a timed copy of ``trajectory``; the input is left untouched.

        Every waypoint after the first gets a ``duration_from_previous`` and
        every waypoint gets recomputed velocities and accelerations. With
        ``add_points`` the result holds two more waypoints than the input.

        Raises:
            MissingGroupContext: trajectory has no joint group
            InvalidConfiguration: ``max_time_change_per_it`` <= 1.0 or ``max_iterations`` < 1
            InsufficientWaypoints: fewer than four waypoints
            MalformedTrajectory: a waypoint width differs from the group size
            InfeasibleBoundary: an end velocity/acceleration exceeds a joint limit
            RefinementDidNotConverge: an iteration cap was hit
        """
        if trajectory.empty():
            return trajectory.copy()

        group = trajectory.group
        if group is None:
            raise MissingGroupContext(
                "It looks like the planner did not set the group the plan was computed for"
            )
        if self.max_time_change_per_it <= 1.0:
            raise InvalidConfiguration(
                f"max_time_change_per_it must be greater than 1.0, got {self.max_time_change_per_it}"
            )
        if self.max_iterations < 1:
            raise InvalidConfiguration(
                f"max_iterations must be at least 1, got {self.max_iterations}"
            )
        if trajectory.waypoint_count < MIN_WAYPOINTS:
            raise InsufficientWaypoints(trajectory.waypoint_count, MIN_WAYPOINTS)
        widths = {wp.positions.shape[0] for wp in trajectory.waypoints}
        if widths != {group.variable_count}:
            raise MalformedTrajectory(group.variable_count, sorted(widths))

        limits = resolve_joint_limits(
            group, max_velocity_scaling_factor, max_acceleration_scaling_factor
        )
        result = trajectory.copy()
        result.unwind()

        # Boundary conditions are unaffected by the inserted points
        for joint in _split_joints(result, limits):
            check_boundary_limits(joint)

        if self.add_points and self.match_boundary_acceleration:
            _insert_boundary_points(result)

        joints = _split_joints(result, limits)
        durations = np.full(result.waypoint_count - 1, DURATION_EPSILON)
        passes = self._refine_all(joints, durations)

        _write_back(result, joints, durations)
        logger.debug(
            f"Time-parameterized {len(joints)} joints over {result.waypoint_count} waypoints "
            f"in {passes} passes, total duration {result.total_duration():.6f}s"
        )
        return result

    def _refine_all(self, joints: list[SingleJointTrajectory], durations: np.ndarray) -> int:
        """Refine every joint in turn until a full pass leaves the durations unchanged."""
        for iteration in range(1, self.max_iterations + 1):
            changed = False
            for joint in joints:
                if refine_joint(
                    joint,
                    durations,
                    self.max_time_change_per_it,
                    match_boundary_acceleration=self.match_boundary_acceleration,
                    max_iterations=self.max_iterations,
                ):
                    changed = True
            if config.TRACE_ENABLED:
                logger.trace(f"Pass {iteration}: changed={changed} durations={durations.tolist()}")  # type: ignore[attr-defined]
            if not changed:
                return iteration
        raise RefinementDidNotConverge("cross-joint refinement", self.max_iterations)


def _split_joints(
    trajectory: RobotTrajectory, limits: list[JointLimits]
) -> list[SingleJointTrajectory]:
    """Convert waypoint-major storage into one state record per joint."""
    positions = trajectory.positions()
    velocities = trajectory.velocities()
    accelerations = trajectory.accelerations()
    names = trajectory.group.variable_names if trajectory.group else []

    joints: list[SingleJointTrajectory] = []
    for j, lim in enumerate(limits):
        joints.append(
            SingleJointTrajectory(
                name=names[j],
                positions=positions[:, j].copy(),
                velocities=velocities[:, j].copy(),
                accelerations=accelerations[:, j].copy(),
                initial_velocity=float(velocities[0, j]),
                final_velocity=float(velocities[-1, j]),
                initial_acceleration=float(accelerations[0, j]),
                final_acceleration=float(accelerations[-1, j]),
                max_velocity=lim.max_velocity,
                max_acceleration=lim.max_acceleration,
                max_jerk=lim.max_jerk,
            )
        )
    return joints


def _insert_boundary_points(trajectory: RobotTrajectory) -> None:
    """
    Insert a waypoint just after the first and just before the last one,
    each a 9:1 blend of the end waypoint and its neighbour.
    """
    first, second = trajectory.waypoints[0], trajectory.waypoints[1]
    trajectory.insert_waypoint(1, Waypoint.blend(first, second, INSERTED_POINT_WEIGHT))

    last, before_last = trajectory.waypoints[-1], trajectory.waypoints[-2]
    trajectory.insert_waypoint(
        trajectory.waypoint_count - 1, Waypoint.blend(last, before_last, INSERTED_POINT_WEIGHT)
    )


def _write_back(
    trajectory: RobotTrajectory, joints: list[SingleJointTrajectory], durations: np.ndarray
) -> None:
    for i, wp in enumerate(trajectory.waypoints):
        wp.duration_from_previous = float(durations[i - 1]) if i > 0 else 0.0
        wp.positions = np.array([joint.positions[i] for joint in joints])
        wp.velocities = np.array([joint.velocities[i] for joint in joints])
        wp.accelerations = np.array([joint.accelerations[i] for joint in joints])
