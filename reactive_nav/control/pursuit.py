"""Pursuit-style path consumer.

API: compute_drive_command(pose, reference, waypoints, speed, cfg) -> DriveCommand | None
The lookahead target is the first waypoint farther than the lookahead distance
from the reference point (typically the front axle center); if none is, the
last waypoint is used. Steering follows the lateral component of the unit
direction to that target.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from ..config import PursuitConfig
from ..geometry import as_point, normalize, rotate_yaw
from ..types import Pose


@dataclass
class DriveCommand:
    steer_input: float  # [-1, 1], positive steers right
    steer_angle_deg: float
    throttle: float  # 0 or 1
    motor_torque: float


def select_lookahead(reference: Sequence[float], waypoints: np.ndarray, lookahead: float) -> Optional[np.ndarray]:
    """First waypoint beyond ``lookahead`` from ``reference``; last one otherwise."""
    if waypoints is None or len(waypoints) == 0:
        return None
    ref = as_point(reference)
    dists = np.linalg.norm(np.asarray(waypoints, dtype=float) - ref, axis=1)
    beyond = np.nonzero(dists > float(lookahead))[0]
    idx = int(beyond[0]) if beyond.size else len(waypoints) - 1
    return np.asarray(waypoints[idx], dtype=float)


def compute_drive_command(
    pose: Pose,
    reference: Optional[Sequence[float]],
    waypoints: np.ndarray,
    speed: float,
    cfg: Optional[PursuitConfig] = None,
) -> Optional[DriveCommand]:
    """Steering/throttle for the current path; ``None`` means hold position."""
    cfg = cfg or PursuitConfig()
    ref = pose.position if reference is None else as_point(reference)
    target = select_lookahead(ref, waypoints, cfg.lookahead_distance)
    if target is None:
        return None

    direction = normalize(target - ref)
    # Lateral component in the vehicle frame
    steer_input = float(np.clip(np.dot(direction, pose.right), -1.0, 1.0))
    throttle = 1.0 if float(speed) < cfg.max_speed else 0.0
    return DriveCommand(
        steer_input=steer_input,
        steer_angle_deg=steer_input * cfg.max_steer_angle_deg,
        throttle=throttle,
        motor_torque=throttle * cfg.motor_torque,
    )


def follow_path(pose: Pose, waypoints: np.ndarray, distance: float, lookahead: float = 3.0) -> Pose:
    """Move ``pose`` by ``distance`` toward the lookahead target (kinematic only)."""
    target = select_lookahead(pose.position, waypoints, lookahead)
    if target is None or distance <= 0.0:
        return pose
    delta = target - pose.position
    delta[1] = 0.0
    dist = float(np.linalg.norm(delta))
    if dist <= 1e-9:
        return pose
    heading = delta / dist
    step = min(float(distance), dist)
    new_pos = pose.position + heading * step
    return Pose(position=new_pos, forward=heading, right=rotate_yaw(heading, 90.0))
