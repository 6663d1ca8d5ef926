import numpy as np

from reactive_nav import AvoidanceSide, PlannerConfig, PlanStatus, Pose, TrajectoryPlanner
from reactive_nav.sensing import BoxObstacle, PrimitiveWorldSensor, ScriptedSensor


def walled_goal_sensor() -> PrimitiveWorldSensor:
    # Closed ring of walls around (0, 20)
    return PrimitiveWorldSensor(
        [
            BoxObstacle(center=(0.0, 15.0), half_extents=(6.5, 0.5)),
            BoxObstacle(center=(0.0, 25.0), half_extents=(6.5, 0.5)),
            BoxObstacle(center=(-6.0, 20.0), half_extents=(0.5, 5.5)),
            BoxObstacle(center=(6.0, 20.0), half_extents=(0.5, 5.5)),
        ]
    )


def test_unreachable_goal_respects_step_budget() -> None:
    cfg = PlannerConfig(max_steps=50)
    goal = np.array([0.0, 0.0, 20.0])
    planner = TrajectoryPlanner(cfg, walled_goal_sensor())
    result = planner.plan(Pose.from_yaw((0.0, 0.0, 0.0)), goal)

    assert result.status in (PlanStatus.BLOCKED, PlanStatus.EXHAUSTED)
    assert result.steps <= cfg.max_steps
    assert len(result) <= cfg.max_steps + 1
    assert np.linalg.norm(result.waypoints[-1] - goal) > 4.0


def test_same_inputs_give_same_path() -> None:
    cfg = PlannerConfig(max_steps=50)
    pose = Pose.from_yaw((0.0, 0.0, 0.0))
    a = TrajectoryPlanner(cfg, walled_goal_sensor()).compute_path(pose, (0.0, 0.0, 20.0))
    b = TrajectoryPlanner(cfg, walled_goal_sensor()).compute_path(pose, (0.0, 0.0, 20.0))
    assert np.array_equal(a, b)


def test_fully_blocked_truncates_at_cursor() -> None:
    sensor = ScriptedSensor(lambda origin, direction, max_distance: 0.5)
    planner = TrajectoryPlanner(PlannerConfig(), sensor)
    pose = Pose.from_yaw((3.0, 0.0, -2.0), 45.0)

    first = planner.plan(pose, (0.0, 0.0, 20.0))
    second = planner.plan(pose, (0.0, 0.0, 20.0))

    assert first.status == PlanStatus.BLOCKED
    assert np.allclose(first.waypoints, [[3.0, 0.0, -2.0]])
    assert np.array_equal(first.waypoints, second.waypoints)
    assert planner.state.side == AvoidanceSide.NONE


def test_blocked_after_some_progress_ends_at_that_cursor() -> None:
    # Free for the first 3 meters of z, then everything is blocked.
    def fn(origin, direction, max_distance):
        return 0.1 if origin[2] >= 2.5 else None

    planner = TrajectoryPlanner(PlannerConfig(), ScriptedSensor(fn))
    result = planner.plan(Pose.from_yaw((0.0, 0.0, 0.0)), (0.0, 0.0, 20.0))

    assert result.status == PlanStatus.BLOCKED
    assert result.steps == 3
    assert np.allclose(result.waypoints[:, 2], [0.0, 1.0, 2.0, 3.0])


def test_step_budget_ends_at_last_cursor() -> None:
    planner = TrajectoryPlanner(PlannerConfig(max_steps=5), ScriptedSensor(lambda o, d, m: None))
    result = planner.plan(Pose.from_yaw((0.0, 0.0, 0.0)), (0.0, 0.0, 20.0))
    assert result.status == PlanStatus.EXHAUSTED
    assert len(result) == 6
    assert np.allclose(result.waypoints[-1], [0.0, 0.0, 5.0])


def test_sensor_query_count_is_bounded() -> None:
    sensor = ScriptedSensor(lambda o, d, m: None)
    cfg = PlannerConfig(max_steps=10)
    TrajectoryPlanner(cfg, sensor).plan(Pose.from_yaw((0.0, 0.0, 0.0)), (0.0, 0.0, 100.0))
    per_step = len(cfg.angle_steps_deg) * 2 + 1
    assert sensor.calls == cfg.max_steps * per_step * cfg.width_rays
