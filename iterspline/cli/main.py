"""
CLI entry point for the iterspline command.

Reads a JSON trajectory, time-parameterizes it and writes the timed
trajectory back out as JSON.
"""

import argparse
import json
import logging
import sys

from iterspline import config
from iterspline.config import (
    DEFAULT_ADD_POINTS,
    DEFAULT_MATCH_BOUNDARY_ACCELERATION,
    DEFAULT_TIME_FACTOR,
    LOG_LEVEL_DEFAULT,
    MAX_REFINEMENT_ITERATIONS,
    TRACE,
)
from iterspline.io import dump_trajectory, load_trajectory, trajectory_to_dict
from iterspline.timing import IterativeSplineParameterization, sample_trajectory

logger = logging.getLogger("iterspline.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Time-parameterize a joint trajectory with iterative cubic splines"
    )
    parser.add_argument("input", help="JSON trajectory file")
    parser.add_argument("-o", "--output", help="Write the timed trajectory here (default: stdout)")
    parser.add_argument("--time-factor", type=float, default=DEFAULT_TIME_FACTOR,
                        help="Growth factor for offending segment durations (> 1.0)")
    parser.add_argument("--no-add-points", dest="add_points", action="store_false",
                        default=DEFAULT_ADD_POINTS,
                        help="Do not insert synthetic waypoints next to the path ends")
    parser.add_argument("--no-boundary-acceleration", dest="match_boundary_acceleration",
                        action="store_false", default=DEFAULT_MATCH_BOUNDARY_ACCELERATION,
                        help="Do not move waypoints to match the end accelerations")
    parser.add_argument("--velocity-scaling", type=float, default=1.0,
                        help="Scale all velocity limits by this factor in (0, 1]")
    parser.add_argument("--acceleration-scaling", type=float, default=1.0,
                        help="Scale all acceleration limits by this factor in (0, 1]")
    parser.add_argument("--max-iterations", type=int, default=MAX_REFINEMENT_ITERATIONS,
                        help="Cap for every refinement loop")
    parser.add_argument("--sample-rate", type=float,
                        help="Also emit samples of the timed trajectory at this rate (Hz)")

    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Increase verbosity; -v=INFO, -vv=DEBUG, -vvv=TRACE")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="Enable quiet logging (WARNING level)")
    parser.add_argument("--log-level", choices=["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Set specific log level")
    return parser


def _log_level(args: argparse.Namespace) -> int:
    if args.log_level:
        if args.log_level == "TRACE":
            config.TRACE_ENABLED = True
            return TRACE
        return getattr(logging, args.log_level)
    if args.verbose >= 3:
        config.TRACE_ENABLED = True
        return TRACE
    if args.verbose >= 2:
        return logging.DEBUG
    if args.verbose == 1:
        return logging.INFO
    if args.quiet:
        return logging.WARNING
    return getattr(logging, LOG_LEVEL_DEFAULT)


def main(argv: list[str] | None = None) -> int:
    """Main entry point; returns the process exit code."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=_log_level(args),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        trajectory = load_trajectory(args.input)
    except (OSError, ValueError, KeyError, TypeError) as e:
        logger.error(f"Failed to load trajectory from {args.input}: {e}")
        return 1

    parameterization = IterativeSplineParameterization(
        max_time_change_per_it=args.time_factor,
        add_points=args.add_points,
        match_boundary_acceleration=args.match_boundary_acceleration,
        max_iterations=args.max_iterations,
    )
    result = parameterization.compute_time_stamps(
        trajectory, args.velocity_scaling, args.acceleration_scaling
    )
    if not result:
        return 1

    timed = result.trajectory
    extra = {}
    if args.sample_rate is not None and timed.waypoint_count >= 2:
        samples = sample_trajectory(timed, args.sample_rate)
        extra["samples"] = {
            "times": samples.times.tolist(),
            "positions": samples.positions.tolist(),
            "velocities": samples.velocities.tolist(),
            "accelerations": samples.accelerations.tolist(),
        }

    if args.output:
        dump_trajectory(timed, args.output, **extra)
        logger.info(f"Wrote {timed.waypoint_count} waypoints ({timed.total_duration():.3f}s) to {args.output}")
    else:
        json.dump({**trajectory_to_dict(timed), **extra}, sys.stdout, indent=2)
        sys.stdout.write("\n")
    return 0


def main_entry():
    """Entry point for the iterspline command."""
    sys.exit(main())


if __name__ == "__main__":
    main_entry()
