import logging

import numpy as np
import pytest

from iterspline.config import DURATION_EPSILON
from iterspline.robot import RobotTrajectory
from iterspline.timing import IterativeSplineParameterization, fit_spline_and_adjust_times
from iterspline.utils.errors import (
    InfeasibleBoundary,
    InsufficientWaypoints,
    InvalidConfiguration,
    MalformedTrajectory,
    MissingGroupContext,
    RefinementDidNotConverge,
)


def test_line_scenario_is_feasible_and_symmetric(line_trajectory, check_limits):
    timed = IterativeSplineParameterization(1.1).parameterize(line_trajectory)

    # Two synthetic points next to the ends
    assert timed.waypoint_count == 6
    times = timed.waypoint_times()
    assert np.all(np.diff(times) > 0.0)
    check_limits(timed, [(1.0, 1.0, 1.0)])

    vel = timed.velocities()[:, 0]
    acc = timed.accelerations()[:, 0]
    assert vel[0] == 0.0 and vel[-1] == 0.0
    assert acc[0] == pytest.approx(0.0, abs=1e-6)
    assert acc[-1] == pytest.approx(0.0, abs=1e-6)

    durations = timed.durations()
    assert durations == pytest.approx(durations[::-1], rel=1e-6)


def test_line_scenario_without_added_points_ramps_at_the_ends(line_trajectory, check_limits):
    isp = IterativeSplineParameterization(1.1, add_points=False)
    timed = isp.parameterize(line_trajectory)

    assert timed.waypoint_count == 4
    check_limits(timed, [(1.0, 1.0, 1.0)])
    acc = timed.accelerations()[:, 0]
    assert acc[0] == pytest.approx(0.0, abs=1e-6)
    assert acc[-1] == pytest.approx(0.0, abs=1e-6)

    durations = timed.durations()
    assert durations[0] == pytest.approx(durations[2], rel=1e-6)
    assert durations[0] > durations[1]


def test_consistent_straight_line_is_not_repositioned(make_group, make_trajectory):
    # Seeded durations are 1 + epsilon, so this end velocity makes the line a
    # zero-acceleration spline from the first fit on
    speed = 1.0 / (1.0 + DURATION_EPSILON)
    group = make_group([(1.0, 1.0, 1.0)])
    positions = [0.0, 1.0, 2.0, 3.0, 4.0, 5.0]
    trajectory = make_trajectory(
        group, positions, initial_velocity=speed, final_velocity=speed,
        initial_acceleration=0.0, final_acceleration=0.0,
    )

    timed = IterativeSplineParameterization(add_points=False).parameterize(trajectory)

    assert np.array_equal(timed.positions()[:, 0], positions)
    assert timed.durations() == pytest.approx(np.full(5, 1.0 + DURATION_EPSILON))
    assert np.allclose(timed.accelerations(), 0.0, atol=1e-9)


def test_repeated_final_point_meets_final_acceleration(make_group, make_trajectory, check_limits):
    group = make_group([(1.0, 1.0, 1.0)])
    trajectory = make_trajectory(
        group, [0.0, 0.5, 1.0, 0.6, 0.5, 0.5],
        initial_velocity=0.0, final_velocity=0.0,
        initial_acceleration=0.0, final_acceleration=0.0,
    )

    timed = IterativeSplineParameterization().parameterize(trajectory)

    check_limits(timed, [(1.0, 1.0, 1.0)])
    acc = timed.accelerations()[:, 0]
    assert acc[0] == pytest.approx(0.0, abs=1e-6)
    assert acc[-1] == pytest.approx(0.0, abs=1e-6)


def test_original_waypoints_keep_their_positions(arm_trajectory):
    timed = IterativeSplineParameterization().parameterize(arm_trajectory)
    n = timed.waypoint_count
    assert n == arm_trajectory.waypoint_count + 2

    kept = [0] + list(range(2, n - 2)) + [n - 1]
    assert np.allclose(timed.positions()[kept], arm_trajectory.positions())


def test_multi_joint_limits_and_boundaries(arm_trajectory, arm_limits, check_limits):
    timed = IterativeSplineParameterization().parameterize(arm_trajectory)

    check_limits(timed, arm_limits)
    assert np.all(timed.durations() > 0.0)
    assert np.array_equal(timed.waypoints[0].velocities, arm_trajectory.waypoints[0].velocities)
    assert np.array_equal(timed.waypoints[-1].velocities, arm_trajectory.waypoints[-1].velocities)
    assert np.allclose(timed.waypoints[0].accelerations, 0.0, atol=1e-6)
    assert np.allclose(timed.waypoints[-1].accelerations, 0.0, atol=1e-6)
    assert timed.waypoints[0].duration_from_previous == 0.0


def test_bound_checker_accepts_result_unchanged(arm_trajectory, arm_limits):
    timed = IterativeSplineParameterization(1.1).parameterize(arm_trajectory)
    positions = timed.positions()
    velocities = timed.velocities()
    for j, (v_max, a_max, j_max) in enumerate(arm_limits):
        durations = timed.durations()
        changed, _, _ = fit_spline_and_adjust_times(
            positions[:, j], durations, velocities[0, j], velocities[-1, j], v_max, a_max, j_max, 1.1
        )
        assert not changed
        assert np.array_equal(durations, timed.durations())


def test_input_trajectory_is_not_modified(arm_trajectory):
    positions = arm_trajectory.positions()
    count = arm_trajectory.waypoint_count
    IterativeSplineParameterization().parameterize(arm_trajectory)
    assert arm_trajectory.waypoint_count == count
    assert np.array_equal(arm_trajectory.positions(), positions)
    assert np.all(arm_trajectory.durations() == 0.0)


def test_halved_velocity_limit_lengthens_total_duration(make_group, make_trajectory):
    # Individual segments may get shorter: knot repositioning and the stretch
    # history differ between the two runs. Only the total is compared.
    group = make_group([(1.0, 3.0, 50.0)])
    trajectory = make_trajectory(group, [0.0, 2.0, 4.0, 6.0, 8.0])
    isp = IterativeSplineParameterization()

    fast = isp.parameterize(trajectory)
    slow = isp.parameterize(trajectory, max_velocity_scaling_factor=0.5)

    assert slow.total_duration() > fast.total_duration()
    assert np.all(np.abs(slow.velocities()) <= 0.5 + 1e-9)


def test_without_added_points_count_is_preserved(arm_trajectory, arm_limits, check_limits):
    timed = IterativeSplineParameterization(add_points=False).parameterize(arm_trajectory)
    assert timed.waypoint_count == arm_trajectory.waypoint_count
    check_limits(timed, arm_limits)


def test_without_boundary_matching_nothing_moves(arm_trajectory, arm_limits, check_limits):
    isp = IterativeSplineParameterization(match_boundary_acceleration=False)
    timed = isp.parameterize(arm_trajectory)
    assert timed.waypoint_count == arm_trajectory.waypoint_count
    assert np.array_equal(timed.positions(), arm_trajectory.positions())
    check_limits(timed, arm_limits)


def test_infeasible_initial_velocity_fails_without_mutation(line_trajectory):
    line_trajectory.waypoints[0].velocities[0] = 1.5
    before = line_trajectory.positions()

    result = IterativeSplineParameterization().compute_time_stamps(line_trajectory)

    assert not result
    assert result.trajectory is None
    assert isinstance(result.error, InfeasibleBoundary)
    assert result.error.end == "initial"
    assert result.error.quantity == "velocity"
    assert result.error.value == 1.5
    assert line_trajectory.waypoint_count == 4
    assert np.array_equal(line_trajectory.positions(), before)


def test_infeasible_final_acceleration_raises(line_trajectory):
    line_trajectory.waypoints[-1].accelerations[0] = -1.2
    with pytest.raises(InfeasibleBoundary) as exc:
        IterativeSplineParameterization().parameterize(line_trajectory)
    assert exc.value.end == "final"
    assert exc.value.quantity == "acceleration"


@pytest.mark.parametrize("factor", [1.0, 0.9, -2.0])
def test_scale_factor_must_exceed_one(line_trajectory, factor):
    result = IterativeSplineParameterization(factor).compute_time_stamps(line_trajectory)
    assert not result
    assert isinstance(result.error, InvalidConfiguration)


def test_too_few_waypoints(make_group, make_trajectory):
    trajectory = make_trajectory(make_group([(1.0, 1.0, 1.0)]), [0.0, 1.0, 2.0])
    with pytest.raises(InsufficientWaypoints) as exc:
        IterativeSplineParameterization().parameterize(trajectory)
    assert exc.value.count == 3


def test_missing_group(make_trajectory):
    result = IterativeSplineParameterization().compute_time_stamps(
        make_trajectory(None, [0.0, 1.0, 2.0, 3.0])
    )
    assert not result
    assert isinstance(result.error, MissingGroupContext)


def test_empty_trajectory_is_trivially_timed(make_group):
    result = IterativeSplineParameterization().compute_time_stamps(
        RobotTrajectory(make_group([(1.0, 1.0, 1.0)]))
    )
    assert result
    assert result.trajectory.empty()


def test_mismatched_waypoint_width_raises(make_group, make_trajectory):
    trajectory = make_trajectory(make_group([(1.0, 1.0, 1.0)] * 2), [0.0, 1.0, 2.0, 3.0])
    with pytest.raises(ValueError):
        IterativeSplineParameterization().parameterize(trajectory)


def test_mismatched_waypoint_width_is_reported(make_group, make_trajectory):
    trajectory = make_trajectory(make_group([(1.0, 1.0, 1.0)] * 2), [0.0, 1.0, 2.0, 3.0])
    result = IterativeSplineParameterization().compute_time_stamps(trajectory)
    assert not result
    assert isinstance(result.error, MalformedTrajectory)
    assert result.error.expected == 2
    assert result.error.widths == [1]


def test_iteration_cap_is_reported(line_trajectory):
    result = IterativeSplineParameterization(max_iterations=1).compute_time_stamps(line_trajectory)
    assert not result
    assert isinstance(result.error, RefinementDidNotConverge)


def test_failures_are_logged(line_trajectory, caplog):
    line_trajectory.waypoints[0].velocities[0] = 3.0
    with caplog.at_level(logging.ERROR, logger="iterspline"):
        IterativeSplineParameterization().compute_time_stamps(line_trajectory)
    assert any("Initial velocity" in r.getMessage() for r in caplog.records)


def test_invalid_scaling_factor_falls_back_to_one(line_trajectory, check_limits, caplog):
    isp = IterativeSplineParameterization()
    with caplog.at_level(logging.WARNING, logger="iterspline"):
        result = isp.compute_time_stamps(line_trajectory, max_velocity_scaling_factor=1.5)
    assert result
    assert any("max_velocity_scaling_factor" in r.getMessage() for r in caplog.records)
    reference = isp.parameterize(line_trajectory)
    assert np.allclose(result.trajectory.durations(), reference.durations())


def test_continuous_joint_is_unwound(make_group, make_trajectory):
    group = make_group([(1.0, 3.0, 9.0)])
    group.bounds["joint_1"].continuous = True
    trajectory = make_trajectory(group, [3.0, -3.0, -2.5, -2.0])
    isp = IterativeSplineParameterization(add_points=False, match_boundary_acceleration=False)
    timed = isp.parameterize(trajectory)
    positions = timed.positions()[:, 0]
    assert positions[1] == pytest.approx(-3.0 + 2 * np.pi)
    assert np.all(np.abs(np.diff(positions)) <= np.pi)
