from pathlib import Path

import numpy as np

from reactive_nav import PlannerConfig, PlanStatus, TrajectoryPlanner
from reactive_nav.sensing import GridRaycaster, PrimitiveWorldSensor
from reactive_nav.sim import RandomSceneConfig, load_scene, random_scene, scene_from_dict

SCENES = Path(__file__).resolve().parents[1] / "configs" / "scenes"


def test_scene_from_dict_builds_sensor() -> None:
    scene = scene_from_dict(
        {
            "start": {"position": [0, 0, 0], "yaw_deg": 0},
            "goal": [0, 0, 30],
            "sensor": {"kind": "grid", "resolution_m": 0.25},
            "obstacles": [{"type": "disc", "center": [0, 12], "radius": 1.0}],
        }
    )
    sensor = scene.make_sensor()
    assert isinstance(sensor, GridRaycaster)
    assert sensor.res == 0.25
    assert sensor.raycast(np.zeros(3), np.array([0.0, 0.0, 1.0]), 20.0) is not None


def test_random_scene_is_seeded_and_keeps_ends_clear() -> None:
    cfg = RandomSceneConfig(num_obstacles_min=3, num_obstacles_max=3)
    a = random_scene(cfg, np.random.default_rng(7))
    b = random_scene(cfg, np.random.default_rng(7))
    assert len(a.obstacles) == len(b.obstacles)
    for oa, ob in zip(a.obstacles, b.obstacles):
        assert oa == ob
    sensor = PrimitiveWorldSensor(a.obstacles)
    assert not sensor.occupied(0.0, 0.0)
    assert not sensor.occupied(a.goal[0], a.goal[2])


def test_bundled_scene_plans_around_block() -> None:
    scene = load_scene(str(SCENES / "single_block.yaml"))
    planner = TrajectoryPlanner(PlannerConfig(), scene.make_sensor())
    result = planner.plan(scene.start_pose, scene.goal)
    assert result.status == PlanStatus.REACHED
    assert np.max(np.abs(result.waypoints[:, 0])) > 0.5
