"""Obstacle query capability consumed by the planner.

A sensor answers one question: along this ray, within this distance, and on
these layers, how far away is the first obstacle? ``None`` means clear.
Distances are measured in the horizontal (x-z) plane.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol, runtime_checkable

import numpy as np

from ..constants import ALL_LAYERS


def layer_bit(index: int) -> int:
    if not 0 <= int(index) < 32:
        raise ValueError(f"layer index must be in [0, 32), got {index}")
    return 1 << int(index)


def in_mask(layer_index: int, layer_mask: int) -> bool:
    return bool(int(layer_mask) & layer_bit(layer_index))


@runtime_checkable
class ObstacleSensor(Protocol):
    def raycast(
        self,
        origin: np.ndarray,
        direction: np.ndarray,
        max_distance: float,
        layer_mask: int = ALL_LAYERS,
    ) -> Optional[float]:
        ...


RayFn = Callable[[np.ndarray, np.ndarray, float], Optional[float]]


class ScriptedSensor:
    """Sensor backed by a plain callable ``fn(origin, direction, max_distance)``.

    Hits beyond ``max_distance`` are discarded so scripts can return raw
    distances. ``calls`` counts queries.
    """

    def __init__(self, fn: RayFn, layer: int = 0) -> None:
        self._fn = fn
        self.layer = int(layer)
        self.calls = 0

    def raycast(
        self,
        origin: np.ndarray,
        direction: np.ndarray,
        max_distance: float,
        layer_mask: int = ALL_LAYERS,
    ) -> Optional[float]:
        self.calls += 1
        if not in_mask(self.layer, layer_mask):
            return None
        d = self._fn(np.asarray(origin, dtype=float), np.asarray(direction, dtype=float), float(max_distance))
        if d is None or d > max_distance:
            return None
        return max(0.0, float(d))


class EmptySensor:
    """A world with nothing in it."""

    def raycast(self, origin, direction, max_distance, layer_mask=ALL_LAYERS):
        return None
