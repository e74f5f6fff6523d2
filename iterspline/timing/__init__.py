from .boundary import adjust_two_positions
from .cubic_spline import fit_cubic_spline, segment_jerks
from .parameterization import IterativeSplineParameterization, TimeParameterizationResult
from .sampling import SampledTrajectory, build_splines, sample_trajectory
from .single_joint import SingleJointTrajectory, check_boundary_limits, refine_joint
from .time_scaling import fit_spline_and_adjust_times, init_times

__all__ = [
    "fit_cubic_spline",
    "segment_jerks",
    "init_times",
    "fit_spline_and_adjust_times",
    "adjust_two_positions",
    "SingleJointTrajectory",
    "check_boundary_limits",
    "refine_joint",
    "IterativeSplineParameterization",
    "TimeParameterizationResult",
    "SampledTrajectory",
    "build_splines",
    "sample_trajectory",
]
