"""Scene definitions: obstacles, vehicle start pose and goal.

Scenes come from YAML (see configs/scenes/) or from ``random_scene`` which
scatters boxes and discs in the band between start and goal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np

from ..geometry import as_point
from ..sensing import GridRaycaster, PrimitiveWorldSensor, obstacles_from_dicts
from ..sensing.primitives import BoxObstacle, DiscObstacle, Obstacle
from ..types import Pose
from ..utils.config import load_config_dict


@dataclass
class Scene:
    obstacles: List[Obstacle]
    start_pose: Pose
    goal: np.ndarray
    name: str = "scene"
    sensor_cfg: Dict[str, Any] = field(default_factory=dict)

    def extent(self, margin: float = 10.0) -> tuple:
        xs = [self.start_pose.position[0], self.goal[0]]
        zs = [self.start_pose.position[2], self.goal[2]]
        for o in self.obstacles:
            if isinstance(o, BoxObstacle):
                r = float(np.hypot(*o.half_extents))
            else:
                r = o.radius
            xs.extend((o.center[0] - r, o.center[0] + r))
            zs.extend((o.center[1] - r, o.center[1] + r))
        return (min(xs) - margin, max(xs) + margin, min(zs) - margin, max(zs) + margin)

    def make_sensor(self):
        """Sensor described by ``sensor_cfg`` (``kind``: primitives | grid)."""
        cfg = dict(self.sensor_cfg)
        kind = str(cfg.pop("kind", "primitives")).lower()
        if kind == "primitives":
            return PrimitiveWorldSensor(self.obstacles)
        if kind == "grid":
            res = float(cfg.pop("resolution_m", 0.2))
            margin = float(cfg.pop("margin_m", 10.0))
            return GridRaycaster.from_obstacles(self.obstacles, self.extent(margin), res, **cfg)
        raise ValueError(f"Unknown sensor kind '{kind}'")


def scene_from_dict(d: Dict[str, Any]) -> Scene:
    start = d.get("start", {})
    pose = Pose.from_yaw(start.get("position", [0.0, 0.0, 0.0]), float(start.get("yaw_deg", 0.0)))
    if "goal" not in d:
        raise ValueError("Scene requires a 'goal' entry")
    return Scene(
        obstacles=obstacles_from_dicts(d.get("obstacles", [])),
        start_pose=pose,
        goal=as_point(d["goal"]),
        name=str(d.get("name", "scene")),
        sensor_cfg=dict(d.get("sensor", {})),
    )


def load_scene(path: str) -> Scene:
    return scene_from_dict(load_config_dict(path))


@dataclass
class RandomSceneConfig:
    """Obstacle scatter between a start at the origin and a goal straight ahead."""

    goal_distance_m: float = 30.0
    lateral_spread_m: float = 6.0
    num_obstacles_min: int = 1
    num_obstacles_max: int = 4
    box_half_min_m: float = 0.5
    box_half_max_m: float = 2.0
    disc_radius_min_m: float = 0.5
    disc_radius_max_m: float = 1.5
    disc_probability: float = 0.3
    clear_radius_m: float = 4.0
    max_attempts: int = 50

    def __post_init__(self) -> None:
        assert self.goal_distance_m > 2.0 * self.clear_radius_m, "goal too close for clear radius"
        assert 0 <= self.num_obstacles_min <= self.num_obstacles_max, "bad obstacle count range"
        assert 0.0 < self.box_half_min_m <= self.box_half_max_m, "bad box size range"
        assert 0.0 < self.disc_radius_min_m <= self.disc_radius_max_m, "bad disc size range"
        assert 0.0 <= self.disc_probability <= 1.0, "disc_probability in [0,1]"


def random_scene(
    cfg: Optional[RandomSceneConfig] = None,
    rng: Optional[np.random.Generator] = None,
    name: str = "random",
) -> Scene:
    c = cfg or RandomSceneConfig()
    r = rng or np.random.default_rng()
    start = np.zeros(3)
    goal = np.array([0.0, 0.0, c.goal_distance_m])
    n = int(r.integers(c.num_obstacles_min, c.num_obstacles_max + 1))

    obstacles: List[Obstacle] = []
    for _ in range(n):
        for _attempt in range(c.max_attempts):
            x = float(r.uniform(-c.lateral_spread_m, c.lateral_spread_m))
            z = float(r.uniform(c.clear_radius_m, c.goal_distance_m - c.clear_radius_m))
            if r.random() < c.disc_probability:
                obs: Obstacle = DiscObstacle((x, z), float(r.uniform(c.disc_radius_min_m, c.disc_radius_max_m)))
                size = obs.radius
            else:
                hx = float(r.uniform(c.box_half_min_m, c.box_half_max_m))
                hz = float(r.uniform(c.box_half_min_m, c.box_half_max_m))
                obs = BoxObstacle((x, z), (hx, hz), yaw_deg=float(r.uniform(-45.0, 45.0)))
                size = float(np.hypot(hx, hz))
            d_start = float(np.hypot(x - start[0], z - start[2]))
            d_goal = float(np.hypot(x - goal[0], z - goal[2]))
            if min(d_start, d_goal) > c.clear_radius_m + size:
                obstacles.append(obs)
                break
    return Scene(obstacles=obstacles, start_pose=Pose.from_yaw(start, 0.0), goal=goal, name=name)
