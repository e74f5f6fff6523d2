"""
Per-joint refinement against the shared segment durations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from iterspline import config
from iterspline.config import MAX_REFINEMENT_ITERATIONS
from iterspline.utils.errors import InfeasibleBoundary, RefinementDidNotConverge

from .boundary import adjust_two_positions
from .time_scaling import fit_spline_and_adjust_times, init_times

logger = logging.getLogger(__name__)


@dataclass
class SingleJointTrajectory:
    """
    The path of a single joint: positions, velocities and accelerations at
    every waypoint, the prescribed end conditions and the joint's limits.
    """

    name: str
    positions: np.ndarray
    velocities: np.ndarray
    accelerations: np.ndarray
    initial_velocity: float
    final_velocity: float
    initial_acceleration: float
    final_acceleration: float
    max_velocity: float
    max_acceleration: float
    max_jerk: float

    @property
    def num_points(self) -> int:
        return int(self.positions.shape[0])


def check_boundary_limits(joint: SingleJointTrajectory) -> None:
    """Raise InfeasibleBoundary if a prescribed end condition exceeds the joint limits."""
    checks = (
        ("initial", "velocity", joint.initial_velocity, joint.max_velocity),
        ("final", "velocity", joint.final_velocity, joint.max_velocity),
        ("initial", "acceleration", joint.initial_acceleration, joint.max_acceleration),
        ("final", "acceleration", joint.final_acceleration, joint.max_acceleration),
    )
    for end, quantity, value, limit in checks:
        if abs(value) > limit:
            raise InfeasibleBoundary(joint.name, end, quantity, value, limit)


def _fit_until_stable(
    joint: SingleJointTrajectory,
    durations: np.ndarray,
    time_factor: float,
    max_iterations: int,
    stage: str,
) -> bool:
    """Repeat fit-and-stretch until no segment is stretched. Returns True if any was."""
    any_changed = False
    for iteration in range(max_iterations):
        changed, joint.velocities, joint.accelerations = fit_spline_and_adjust_times(
            joint.positions,
            durations,
            joint.initial_velocity,
            joint.final_velocity,
            joint.max_velocity,
            joint.max_acceleration,
            joint.max_jerk,
            time_factor,
        )
        if not changed:
            if config.TRACE_ENABLED and any_changed:
                logger.trace(f"{joint.name}: {stage} settled after {iteration} stretches")  # type: ignore[attr-defined]
            return any_changed
        any_changed = True
    raise RefinementDidNotConverge(f"{stage} of joint '{joint.name}'", max_iterations)


def refine_joint(
    joint: SingleJointTrajectory,
    durations: np.ndarray,
    time_factor: float,
    match_boundary_acceleration: bool = True,
    max_iterations: int = MAX_REFINEMENT_ITERATIONS,
) -> bool:
    """
    Fit one joint against the shared durations until its bounds hold.

    Steps: validate end conditions, seed durations from max velocity, stretch
    until the spline respects velocity/acceleration/jerk, then (optionally)
    alternate repositioning the two near-end knots with re-stretching until a
    full cycle leaves the durations untouched.

    Args:
        joint: Joint state, updated in place
        durations: Shared segment durations, only ever grown
        time_factor: Stretch applied to an offending segment (> 1.0)
        match_boundary_acceleration: Move knots 1 and N-2 to hit end accelerations
        max_iterations: Cap for each repeat-until-stable loop

    Returns:
        True if any shared duration changed during this call
    """
    check_boundary_limits(joint)
    before = durations.copy()

    init_times(joint.positions, durations, joint.max_velocity)
    _fit_until_stable(joint, durations, time_factor, max_iterations, "initial fit")

    if match_boundary_acceleration:
        for _ in range(max_iterations):
            adjust_two_positions(
                joint.positions,
                durations,
                joint.initial_velocity,
                joint.final_velocity,
                joint.initial_acceleration,
                joint.final_acceleration,
            )
            if not _fit_until_stable(
                joint, durations, time_factor, max_iterations, "boundary-acceleration fit"
            ):
                break
        else:
            raise RefinementDidNotConverge(
                f"boundary-acceleration loop of joint '{joint.name}'", max_iterations
            )

    return bool(np.any(durations != before))
