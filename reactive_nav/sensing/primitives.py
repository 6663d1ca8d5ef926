"""Analytic ray queries against box and disc obstacles in the x-z plane."""

from __future__ import annotations

from dataclasses import dataclass
from math import cos, sin, radians, sqrt, inf
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from ..constants import ALL_LAYERS, DEFAULT_LAYER
from .base import in_mask

_EPS = 1e-12


def _planar_ray(origin: np.ndarray, direction: np.ndarray) -> Optional[Tuple[float, float, float, float]]:
    dx, dz = float(direction[0]), float(direction[2])
    n = sqrt(dx * dx + dz * dz)
    if n <= _EPS:
        return None
    return float(origin[0]), float(origin[2]), dx / n, dz / n


@dataclass
class BoxObstacle:
    """Rectangle in the x-z plane.

    center: (x, z); half_extents: (hx, hz) before rotation; yaw_deg rotates
    the box with the same convention as vehicle yaw.
    """

    center: Tuple[float, float]
    half_extents: Tuple[float, float]
    yaw_deg: float = 0.0
    layer: int = DEFAULT_LAYER

    def __post_init__(self) -> None:
        self.center = (float(self.center[0]), float(self.center[1]))
        self.half_extents = (float(self.half_extents[0]), float(self.half_extents[1]))
        if self.half_extents[0] <= 0.0 or self.half_extents[1] <= 0.0:
            raise ValueError("BoxObstacle half_extents must be > 0")

    def _to_local(self, x: float, z: float) -> Tuple[float, float]:
        # inverse of rotate_yaw(v, yaw): rotate by -yaw
        a = radians(-self.yaw_deg)
        c, s = cos(a), sin(a)
        return x * c + z * s, -x * s + z * c

    def contains(self, x: float, z: float) -> bool:
        lx, lz = self._to_local(x - self.center[0], z - self.center[1])
        return abs(lx) <= self.half_extents[0] and abs(lz) <= self.half_extents[1]

    def intersect(self, ox: float, oz: float, dx: float, dz: float) -> Optional[float]:
        """Slab test; returns entry distance (0 if the origin is inside)."""
        lox, loz = self._to_local(ox - self.center[0], oz - self.center[1])
        ldx, ldz = self._to_local(dx, dz)
        t_near, t_far = -inf, inf
        for o, d, h in ((lox, ldx, self.half_extents[0]), (loz, ldz, self.half_extents[1])):
            if abs(d) <= _EPS:
                if o < -h or o > h:
                    return None
                continue
            t1 = (-h - o) / d
            t2 = (h - o) / d
            if t1 > t2:
                t1, t2 = t2, t1
            t_near = max(t_near, t1)
            t_far = min(t_far, t2)
            if t_near > t_far:
                return None
        if t_far < 0.0:
            return None
        return max(0.0, t_near)


@dataclass
class DiscObstacle:
    center: Tuple[float, float]
    radius: float
    layer: int = DEFAULT_LAYER

    def __post_init__(self) -> None:
        self.center = (float(self.center[0]), float(self.center[1]))
        self.radius = float(self.radius)
        if self.radius <= 0.0:
            raise ValueError("DiscObstacle radius must be > 0")

    def contains(self, x: float, z: float) -> bool:
        return (x - self.center[0]) ** 2 + (z - self.center[1]) ** 2 <= self.radius ** 2

    def intersect(self, ox: float, oz: float, dx: float, dz: float) -> Optional[float]:
        fx, fz = ox - self.center[0], oz - self.center[1]
        c = fx * fx + fz * fz - self.radius * self.radius
        if c <= 0.0:
            return 0.0
        b = fx * dx + fz * dz
        disc = b * b - c
        if disc < 0.0:
            return None
        t = -b - sqrt(disc)
        if t < 0.0:
            return None
        return t


Obstacle = Union[BoxObstacle, DiscObstacle]


class PrimitiveWorldSensor:
    """Deterministic raycasts against a fixed list of primitive obstacles."""

    def __init__(self, obstacles: Iterable[Obstacle] = ()) -> None:
        self.obstacles: List[Obstacle] = list(obstacles)

    def add(self, obstacle: Obstacle) -> None:
        self.obstacles.append(obstacle)

    def occupied(self, x: float, z: float, layer_mask: int = ALL_LAYERS) -> bool:
        return any(o.contains(x, z) for o in self.obstacles if in_mask(o.layer, layer_mask))

    def raycast(
        self,
        origin: np.ndarray,
        direction: np.ndarray,
        max_distance: float,
        layer_mask: int = ALL_LAYERS,
    ) -> Optional[float]:
        ray = _planar_ray(origin, direction)
        if ray is None:
            return None
        ox, oz, dx, dz = ray
        best: Optional[float] = None
        for obs in self.obstacles:
            if not in_mask(obs.layer, layer_mask):
                continue
            t = obs.intersect(ox, oz, dx, dz)
            if t is None or t > max_distance:
                continue
            if best is None or t < best:
                best = t
        return best


def obstacles_from_dicts(items: Sequence[dict]) -> List[Obstacle]:
    """Build obstacles from config entries.

    Each entry has ``type`` ("box" or "disc") plus the dataclass fields, e.g.
    ``{type: box, center: [0, 10], half_extents: [1.5, 1.0]}``.
    """
    out: List[Obstacle] = []
    for raw in items:
        d = dict(raw)
        kind = str(d.pop("type", "box")).lower()
        if kind == "box":
            out.append(BoxObstacle(**d))
        elif kind == "disc":
            out.append(DiscObstacle(**d))
        else:
            raise ValueError(f"Unknown obstacle type '{kind}'")
    return out
