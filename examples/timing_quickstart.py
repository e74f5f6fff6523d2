"""
Time-parameterization quickstart.
- Builds a two-joint group with velocity/acceleration/jerk limits
- Times a five-waypoint path that starts and ends at rest
- Prints the segment durations and samples the result at 50 Hz

Run from the repository root:
    python examples/timing_quickstart.py
"""

from iterspline import (
    IterativeSplineParameterization,
    JointModelGroup,
    RobotTrajectory,
    VariableBounds,
    Waypoint,
    sample_trajectory,
)

LIMITS = VariableBounds(
    max_velocity=1.0,
    velocity_bounded=True,
    max_acceleration=2.0,
    acceleration_bounded=True,
    max_jerk=8.0,
    jerk_bounded=True,
)


def main() -> None:
    group = JointModelGroup("arm", ["shoulder", "elbow"], {"shoulder": LIMITS, "elbow": LIMITS})
    path = [[0.0, 0.0], [0.5, 0.3], [1.0, 0.9], [1.4, 1.0], [1.5, 1.2]]
    trajectory = RobotTrajectory(group, [Waypoint(positions=p) for p in path])

    result = IterativeSplineParameterization().compute_time_stamps(
        trajectory, max_velocity_scaling_factor=0.8
    )
    if not result:
        print("failed:", result.error)
        raise SystemExit(1)

    timed = result.trajectory
    print("durations:", [round(d, 3) for d in timed.durations()])
    print(f"total: {timed.total_duration():.3f}s over {timed.waypoint_count} waypoints")
    samples = sample_trajectory(timed, sample_rate=50.0)
    print("samples:", len(samples.times))
    raise SystemExit(0)


if __name__ == "__main__":
    main()
