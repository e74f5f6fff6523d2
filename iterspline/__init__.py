"""
iterspline Python Package

Time-parameterization of multi-joint waypoint paths as per-joint clamped
cubic splines that respect velocity, acceleration and jerk limits.

Key components:
- IterativeSplineParameterization: assigns segment durations to a trajectory
- RobotTrajectory / Waypoint: waypoint container consumed and produced
- JointModelGroup / VariableBounds: source of per-joint limits
- sample_trajectory: dense evaluation of a timed trajectory
"""

from ._version import __version__
from .robot import JointModelGroup, RobotTrajectory, VariableBounds, Waypoint
from .timing import (
    IterativeSplineParameterization,
    TimeParameterizationResult,
    sample_trajectory,
)
from .utils.errors import (
    InfeasibleBoundary,
    InsufficientWaypoints,
    InvalidConfiguration,
    MalformedTrajectory,
    MissingGroupContext,
    RefinementDidNotConverge,
    TimeParameterizationError,
)

__all__ = [
    "__version__",
    "IterativeSplineParameterization",
    "TimeParameterizationResult",
    "RobotTrajectory",
    "Waypoint",
    "JointModelGroup",
    "VariableBounds",
    "sample_trajectory",
    "TimeParameterizationError",
    "MissingGroupContext",
    "InvalidConfiguration",
    "InsufficientWaypoints",
    "InfeasibleBoundary",
    "MalformedTrajectory",
    "RefinementDidNotConverge",
]
