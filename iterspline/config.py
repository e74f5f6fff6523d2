"""
Central configuration for iterspline tunables and shared constants.
"""

import logging
import os

TRACE: int = 5
logging.addLevelName(TRACE, "TRACE")
# Add Logger.trace if missing
if not hasattr(logging.Logger, "trace"):

    def _trace(self, msg, *args, **kwargs):
        if self.isEnabledFor(TRACE):
            self._log(TRACE, msg, args, **kwargs)

    logging.Logger.trace = _trace  # type: ignore[attr-defined]
    logging.TRACE = TRACE  # type: ignore[attr-defined]

TRACE_ENABLED = str(os.getenv("ITERSPLINE_TRACE", "0")).lower() in ("1", "true", "yes", "on")

logger = logging.getLogger(__name__)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {name}={raw!r}, using {default}")
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}, using {default}")
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    s = raw.strip().lower()
    if s in ("1", "true", "yes", "on"):
        return True
    if s in ("0", "false", "no", "off"):
        return False
    return default


# Multiplicative growth applied to an offending segment duration per retry (> 1.0)
DEFAULT_TIME_FACTOR: float = _env_float("ITERSPLINE_TIME_FACTOR", 1.1)

# Insert a synthetic waypoint next to each path end before fitting
DEFAULT_ADD_POINTS: bool = _env_bool("ITERSPLINE_ADD_POINTS", True)

# Move the 2nd and 2nd-to-last waypoints to hit the prescribed end accelerations
DEFAULT_MATCH_BOUNDARY_ACCELERATION: bool = _env_bool("ITERSPLINE_MATCH_BOUNDARY_ACCELERATION", True)

# Cap for every repeat-until-stable loop
MAX_REFINEMENT_ITERATIONS: int = _env_int("ITERSPLINE_MAX_ITERATIONS", 1000)

# Smallest segment duration (s); seeds the shared duration array
DURATION_EPSILON: float = 1e-6

# Limits used when the joint model declares a joint unbounded
DEFAULT_VELOCITY_LIMIT: float = 1.0
DEFAULT_ACCELERATION_LIMIT: float = 3.0
DEFAULT_JERK_LIMIT: float = 9.0

# Synthetic waypoints are a 9:1 blend of the end point and its neighbour
INSERTED_POINT_WEIGHT: float = 0.9

# Linear solves allowed when moving the near-end knots, and the end-acceleration
# error at which they stop
MAX_BOUNDARY_CORRECTIONS: int = 5
BOUNDARY_ACCELERATION_TOLERANCE: float = 1e-9

# Minimum number of waypoints the spline fit accepts
MIN_WAYPOINTS: int = 4

# Dense sampling rate for evaluating timed trajectories (Hz)
SAMPLE_RATE_HZ: float = _env_float("ITERSPLINE_SAMPLE_RATE_HZ", 250.0)

LOG_LEVEL_DEFAULT: str = "INFO"
