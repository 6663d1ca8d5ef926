import numpy as np
import pytest

from reactive_nav import AvoidanceSide, PlannerConfig, PlannerState, PlanStatus, Pose, TrajectoryPlanner
from reactive_nav.sensing import BoxObstacle, GridRaycaster, PrimitiveWorldSensor, ScriptedSensor


def test_single_block_forces_deviation_and_reaches_goal() -> None:
    cfg = PlannerConfig()
    box = BoxObstacle(center=(0.0, 10.0), half_extents=(1.5, 1.0))
    sensor = PrimitiveWorldSensor([box])
    planner = TrajectoryPlanner(cfg, sensor)
    pose = Pose.from_yaw((0.0, 0.0, 0.0))
    goal = np.array([0.0, 0.0, 20.0])

    result = planner.plan(pose, goal)
    wp = result.waypoints

    assert result.status == PlanStatus.REACHED
    assert np.max(np.abs(wp[:, 0])) > 0.5
    assert not any(sensor.occupied(p[0], p[2]) for p in wp)

    if result.side == AvoidanceSide.NONE:
        assert result.offset == 0.0
    else:
        assert cfg.min_offset - 1e-9 <= abs(result.offset) <= cfg.max_offset + 1e-9
        assert np.sign(result.offset) == int(result.side)
    assert np.allclose(wp[-1], goal + pose.right * result.offset)


def test_first_step_commits_to_a_side() -> None:
    sensor = PrimitiveWorldSensor([BoxObstacle(center=(0.0, 10.0), half_extents=(1.5, 1.0))])
    planner = TrajectoryPlanner(PlannerConfig(max_steps=1), sensor)
    result = planner.plan(Pose.from_yaw((0.0, 0.0, 0.0)), (0.0, 0.0, 20.0))

    assert result.status == PlanStatus.EXHAUSTED
    assert result.waypoints.shape == (2, 3)
    assert planner.state.side != AvoidanceSide.NONE
    assert planner.state.cooldown == pytest.approx(0.5)
    # the step went to the committed side
    assert np.sign(result.waypoints[1][0]) == int(planner.state.side)


def test_grid_sensor_avoidance_keeps_out_of_cells() -> None:
    box = BoxObstacle(center=(0.0, 10.0), half_extents=(1.5, 1.0))
    sensor = GridRaycaster.from_obstacles([box], extent=(-15.0, 15.0, -5.0, 30.0), resolution_m=0.1)
    planner = TrajectoryPlanner(PlannerConfig(), sensor)
    result = planner.plan(Pose.from_yaw((0.0, 0.0, 0.0)), (0.0, 0.0, 20.0))

    assert result.status == PlanStatus.REACHED
    assert np.max(np.abs(result.waypoints[:, 0])) > 0.5
    assert not any(box.contains(p[0], p[2]) for p in result.waypoints)


@pytest.mark.parametrize(
    "side, hit, expected",
    [
        (AvoidanceSide.RIGHT, 5.0, 1.8),
        (AvoidanceSide.RIGHT, 0.0, 2.4),
        (AvoidanceSide.LEFT, None, -1.2),
    ],
)
def test_goal_offset_scales_with_obstacle_distance(side, hit, expected) -> None:
    sensor = ScriptedSensor(lambda origin, direction, max_distance: hit)
    planner = TrajectoryPlanner(PlannerConfig(), sensor, PlannerState(side=side, cooldown=0.5))
    result = planner.plan(Pose.from_yaw((0.0, 0.0, 0.0)), (0.0, 0.0, 0.5))

    assert result.status == PlanStatus.REACHED
    assert result.offset == pytest.approx(expected)
    assert np.allclose(result.waypoints[-1], [expected, 0.0, 0.5])
