from .model import JointLimits, JointModelGroup, VariableBounds, resolve_joint_limits
from .trajectory import RobotTrajectory, Waypoint

__all__ = [
    "VariableBounds",
    "JointModelGroup",
    "JointLimits",
    "resolve_joint_limits",
    "Waypoint",
    "RobotTrajectory",
]
