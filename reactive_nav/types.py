from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Sequence

import numpy as np

from .geometry import as_point, normalize, rotate_yaw


class AvoidanceSide(IntEnum):
    """Committed lateral side; the value is the sign used for offsets."""

    LEFT = -1
    NONE = 0
    RIGHT = 1

    @classmethod
    def from_angle(cls, angle_deg: float) -> "AvoidanceSide":
        if angle_deg < 0.0:
            return cls.LEFT
        if angle_deg > 0.0:
            return cls.RIGHT
        return cls.NONE


class PlanStatus(str, Enum):
    REACHED = "reached"
    EXHAUSTED = "exhausted"
    BLOCKED = "blocked"
    NO_INPUT = "no_input"


@dataclass
class Pose:
    """Vehicle pose: position plus horizontal forward/right unit vectors."""

    position: np.ndarray
    forward: np.ndarray
    right: np.ndarray

    def __post_init__(self) -> None:
        self.position = as_point(self.position)
        self.forward = normalize(as_point(self.forward))
        self.right = normalize(as_point(self.right))
        if abs(float(np.dot(self.forward, self.right))) > 1e-6:
            raise ValueError("forward and right must be orthogonal")

    @classmethod
    def from_yaw(cls, position: Sequence[float], yaw_deg: float = 0.0) -> "Pose":
        """Yaw 0 faces +z; positive yaw turns toward +x."""
        fwd = rotate_yaw(np.array([0.0, 0.0, 1.0]), yaw_deg)
        right = rotate_yaw(fwd, 90.0)
        return cls(position=as_point(position), forward=fwd, right=right)

    @property
    def yaw_deg(self) -> float:
        return float(np.degrees(np.arctan2(self.forward[0], self.forward[2])))

    def ahead(self, distance: float) -> np.ndarray:
        return self.position + self.forward * float(distance)


@dataclass
class PlannerState:
    """Hysteresis state carried by one planner across calls.

    side: currently committed avoidance side.
    cooldown: seconds left before the side may change again (>= 0).
    """

    side: AvoidanceSide = AvoidanceSide.NONE
    cooldown: float = 0.0

    def __post_init__(self) -> None:
        self.side = AvoidanceSide(self.side)
        self.cooldown = max(0.0, float(self.cooldown))

    @property
    def ready_to_switch(self) -> bool:
        return self.cooldown <= 0.0

    def tick(self, dt: float) -> None:
        if self.cooldown > 0.0:
            self.cooldown = max(0.0, self.cooldown - float(dt))

    def reset(self) -> None:
        self.side = AvoidanceSide.NONE
        self.cooldown = 0.0


@dataclass
class PlanResult:
    waypoints: np.ndarray  # shape (N, 3)
    status: PlanStatus
    steps: int = 0
    side: AvoidanceSide = AvoidanceSide.NONE
    offset: float = 0.0  # signed lateral offset applied to the goal

    def __len__(self) -> int:
        return int(self.waypoints.shape[0])
