"""Path markers: evenly spaced ground points along the latest path."""

from __future__ import annotations

from typing import Any, Callable, List

import numpy as np


def marker_positions(path: np.ndarray, spacing: float, ground_height: float = 0.0) -> np.ndarray:
    """Resample ``path`` every ``spacing`` meters of arclength, plus its end.

    Leftover arclength carries over segment joints, so spacing stays uniform
    along the whole polyline. Paths with fewer than two points give no markers.
    """
    pts = np.asarray(path, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[0] < 2:
        return np.empty((0, 3), dtype=np.float64)
    if spacing <= 0.0:
        raise ValueError("spacing must be > 0")

    out: List[np.ndarray] = []
    accumulated = 0.0
    for p0, p1 in zip(pts[:-1], pts[1:]):
        seg = p1 - p0
        seg_len = float(np.linalg.norm(seg))
        if seg_len <= 1e-12:
            continue
        direction = seg / seg_len
        dist = spacing - accumulated
        while dist < seg_len:
            out.append(p0 + direction * dist)
            dist += spacing
        accumulated = max(0.0, seg_len - (dist - spacing))
    out.append(pts[-1].copy())

    markers = np.stack(out)
    markers[:, 1] = float(ground_height)
    return markers


class MarkerLayer:
    """Keeps the set of placed markers in sync with the latest path.

    spawn(position) -> handle places one marker; remove(handle) takes it away.
    Old markers are always removed before new ones are placed.
    """

    def __init__(
        self,
        spawn: Callable[[np.ndarray], Any],
        remove: Callable[[Any], None],
        spacing: float = 1.0,
        ground_height: float = 0.0,
    ) -> None:
        self._spawn = spawn
        self._remove = remove
        self.spacing = float(spacing)
        self.ground_height = float(ground_height)
        self.handles: List[Any] = []

    def clear(self) -> None:
        for h in self.handles:
            if h is not None:
                self._remove(h)
        self.handles.clear()

    def replace(self, path: np.ndarray) -> int:
        self.clear()
        for p in marker_positions(path, self.spacing, self.ground_height):
            self.handles.append(self._spawn(p))
        return len(self.handles)
