"""
Custom exception types for the time-parameterization pipeline.
Keep this focused and non-redundant; prefer built-ins where appropriate.
"""


class TimeParameterizationError(RuntimeError):
    """Time-parameterization failure; callers must fix the inputs and retry."""

    def __init__(self, message: str):
        self.original_message = message
        super().__init__(f"Time Parameterization Error: {message}")

    def __str__(self):
        return f"Time Parameterization Error: {self.original_message}"


class MissingGroupContext(TimeParameterizationError):
    """No joint group is attached to the trajectory, so limits cannot be resolved."""


class InvalidConfiguration(TimeParameterizationError):
    """Duration scale factor (or another tunable) is out of range."""


class InsufficientWaypoints(TimeParameterizationError):
    """Fewer waypoints than the spline fit needs."""

    def __init__(self, count: int, required: int):
        self.count = count
        self.required = required
        super().__init__(f"number of waypoints {count}, needs to be at least {required}")


class InfeasibleBoundary(TimeParameterizationError):
    """A prescribed boundary velocity or acceleration already exceeds the joint limit."""

    def __init__(self, joint: str, end: str, quantity: str, value: float, limit: float):
        self.joint = joint
        self.end = end
        self.quantity = quantity
        self.value = value
        self.limit = limit
        super().__init__(
            f"{end.capitalize()} {quantity} {value:f} of joint '{joint}' out of bounds (limit {limit:f})"
        )


class RefinementDidNotConverge(TimeParameterizationError):
    """A repeat-until-stable loop hit its iteration cap."""

    def __init__(self, stage: str, iterations: int):
        self.stage = stage
        self.iterations = iterations
        super().__init__(f"{stage} did not converge within {iterations} iterations")


class MalformedTrajectory(TimeParameterizationError, ValueError):
    """Waypoints do not carry one value per joint of the group."""

    def __init__(self, expected: int, widths: list[int]):
        self.expected = expected
        self.widths = widths
        super().__init__(f"waypoints must carry {expected} joint values, got {widths}")
