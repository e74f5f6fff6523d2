"""
Joint group description and kinematic limit resolution.

Defines per-joint bounds for velocity, acceleration and jerk, and the
defaults used when a joint is declared unbounded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from iterspline.config import (
    DEFAULT_ACCELERATION_LIMIT,
    DEFAULT_JERK_LIMIT,
    DEFAULT_VELOCITY_LIMIT,
)

logger = logging.getLogger(__name__)


@dataclass
class VariableBounds:
    """
    Bounds of one joint variable, as declared by the robot model.

    A missing ``min_*`` value mirrors the corresponding ``max_*`` value.
    """

    max_velocity: float = 0.0
    min_velocity: float | None = None
    velocity_bounded: bool = False
    max_acceleration: float = 0.0
    min_acceleration: float | None = None
    acceleration_bounded: bool = False
    max_jerk: float = 0.0
    jerk_bounded: bool = False
    # Revolute joint without position limits; values may wrap around
    continuous: bool = False


@dataclass
class JointModelGroup:
    """Ordered set of joint variables a trajectory is planned for."""

    name: str
    variable_names: list[str]
    bounds: dict[str, VariableBounds] = field(default_factory=dict)

    @property
    def variable_count(self) -> int:
        return len(self.variable_names)

    def get_variable_bounds(self, name: str) -> VariableBounds:
        """Bounds of ``name``; undeclared variables are unbounded."""
        return self.bounds.get(name, VariableBounds())


@dataclass(frozen=True)
class JointLimits:
    """Resolved, already-scaled limits of one joint."""

    max_velocity: float
    max_acceleration: float
    max_jerk: float


def resolve_scaling_factor(name: str, value: float) -> float:
    """
    Return ``value`` if it lies in (0, 1], else 1.0 with a diagnostic.

    A factor of exactly 0.0 is treated as "not specified" and only logged at
    debug level.
    """
    default = 1.0
    if 0.0 < value <= 1.0:
        return float(value)
    if value == 0.0:
        logger.debug(f"A {name} of 0.0 was specified, defaulting to {default:f} instead.")
    else:
        logger.warning(f"Invalid {name} {value:f} specified, defaulting to {default:f} instead.")
    return default


def _tighter(upper: float, lower: float | None) -> float:
    if lower is None:
        return abs(upper)
    return min(abs(upper), abs(lower))


def resolve_joint_limits(
    group: JointModelGroup,
    velocity_scaling_factor: float = 1.0,
    acceleration_scaling_factor: float = 1.0,
) -> list[JointLimits]:
    """
    Resolve velocity/acceleration/jerk limits for every variable of ``group``.

    Bounded limits use the tighter of the min/max magnitudes. Velocity and
    acceleration limits are scaled by their (validated) scaling factors;
    jerk is not scaled.
    """
    vel_scale = resolve_scaling_factor("max_velocity_scaling_factor", velocity_scaling_factor)
    acc_scale = resolve_scaling_factor(
        "max_acceleration_scaling_factor", acceleration_scaling_factor
    )

    limits: list[JointLimits] = []
    for name in group.variable_names:
        bounds = group.get_variable_bounds(name)

        max_velocity = DEFAULT_VELOCITY_LIMIT
        if bounds.velocity_bounded:
            max_velocity = _tighter(bounds.max_velocity, bounds.min_velocity)

        max_acceleration = DEFAULT_ACCELERATION_LIMIT
        if bounds.acceleration_bounded:
            max_acceleration = _tighter(bounds.max_acceleration, bounds.min_acceleration)

        max_jerk = DEFAULT_JERK_LIMIT
        if bounds.jerk_bounded:
            max_jerk = abs(bounds.max_jerk)

        limits.append(
            JointLimits(
                max_velocity=max_velocity * vel_scale,
                max_acceleration=max_acceleration * acc_scale,
                max_jerk=max_jerk,
            )
        )
    return limits
