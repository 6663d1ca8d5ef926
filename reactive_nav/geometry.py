"""Vector helpers for planar (x-z) motion with a vertical y axis.

Yaw convention: rotating by +a degrees turns toward the right of the heading,
so forward (0, 0, 1) rotated by +90 becomes (1, 0, 0).
"""

from __future__ import annotations

from math import cos, sin, radians, degrees, acos
from typing import Sequence

import numpy as np


def as_point(p: Sequence[float]) -> np.ndarray:
    arr = np.asarray(p, dtype=np.float64).reshape(-1)
    if arr.shape != (3,):
        raise ValueError(f"Expected a 3D point, got shape {arr.shape}")
    return arr.copy()


def normalize(v: np.ndarray) -> np.ndarray:
    n = float(np.linalg.norm(v))
    if n <= 1e-12:
        return np.zeros(3, dtype=np.float64)
    return np.asarray(v, dtype=np.float64) / n


def rotate_yaw(v: np.ndarray, angle_deg: float) -> np.ndarray:
    """Rotate ``v`` about the vertical axis by ``angle_deg``."""
    a = radians(float(angle_deg))
    c, s = cos(a), sin(a)
    x, y, z = float(v[0]), float(v[1]), float(v[2])
    return np.array([x * c + z * s, y, -x * s + z * c], dtype=np.float64)


def angle_between_deg(a: np.ndarray, b: np.ndarray) -> float:
    na = float(np.linalg.norm(a))
    nb = float(np.linalg.norm(b))
    if na <= 1e-12 or nb <= 1e-12:
        return 0.0
    c = float(np.dot(a, b)) / (na * nb)
    return degrees(acos(max(-1.0, min(1.0, c))))


def on_ground(p: np.ndarray, height: float) -> np.ndarray:
    out = np.array(p, dtype=np.float64)
    out[1] = float(height)
    return out


def planar_distance(a: np.ndarray, b: np.ndarray) -> float:
    dx = float(b[0] - a[0])
    dz = float(b[2] - a[2])
    return float(np.hypot(dx, dz))
