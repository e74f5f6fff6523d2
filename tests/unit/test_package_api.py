import importlib
import inspect


def test_top_level_reexports_exist():
    pkg = importlib.import_module("iterspline")

    for name in [
        "IterativeSplineParameterization",
        "RobotTrajectory",
        "Waypoint",
        "JointModelGroup",
        "VariableBounds",
        "TimeParameterizationError",
    ]:
        assert hasattr(pkg, name), f"iterspline missing {name}"
        assert inspect.isclass(getattr(pkg, name)), f"{name} should be a class"

    assert callable(pkg.sample_trajectory)
    assert isinstance(pkg.__version__, str)


def test_error_kinds_share_a_base():
    pkg = importlib.import_module("iterspline")
    for name in [
        "MissingGroupContext",
        "InvalidConfiguration",
        "InsufficientWaypoints",
        "InfeasibleBoundary",
        "RefinementDidNotConverge",
        "MalformedTrajectory",
    ]:
        assert issubclass(getattr(pkg, name), pkg.TimeParameterizationError)
