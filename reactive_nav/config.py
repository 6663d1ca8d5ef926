from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Tuple

from .constants import (
    ALL_LAYERS,
    ANGLE_STEPS_DEG,
    DETECTION_RANGE_M,
    FALLBACK_WIDTH_FACTOR,
    GROUND_HEIGHT_M,
    LOOKAHEAD_M,
    MAX_OFFSET_FACTOR,
    MAX_SPEED_MPS,
    MAX_STEER_ANGLE_DEG,
    MAX_STEPS,
    MIN_OFFSET_FACTOR,
    MOTOR_TORQUE,
    OPPOSITE_SIDE_PENALTY,
    RELEASE_ANGLE_DEG,
    SIDE_BONUS,
    SIDE_SWITCH_COOLDOWN_S,
    START_OFFSET_M,
    STEP_DISTANCE_M,
    VEHICLE_WIDTH_M,
    WIDTH_RAYS,
)

FALLBACK_SIDE_RULES = ("mirrored", "legacy")


def _require(cond: bool, msg: str) -> None:
    if not cond:
        raise ValueError(msg)


def _known_keys(cls, d: Dict[str, Any]) -> Dict[str, Any]:
    names = {f.name for f in fields(cls)}
    unknown = sorted(set(d) - names)
    if unknown:
        raise TypeError(f"Unknown {cls.__name__} keys: {', '.join(unknown)}")
    return dict(d)


@dataclass(frozen=True)
class PlannerConfig:
    """Parameters of the reactive trajectory planner.

    Distances are in meters, angles in degrees, cooldown in seconds.
    Offsets applied to the goal while avoiding are expressed as multiples of
    ``vehicle_width`` (see ``min_offset`` / ``max_offset``).
    """

    detection_range: float = DETECTION_RANGE_M
    vehicle_width: float = VEHICLE_WIDTH_M
    step_distance: float = STEP_DISTANCE_M
    max_steps: int = MAX_STEPS
    side_switch_cooldown: float = SIDE_SWITCH_COOLDOWN_S
    angle_steps_deg: Tuple[float, ...] = ANGLE_STEPS_DEG
    width_rays: int = WIDTH_RAYS
    fallback_width_factor: float = FALLBACK_WIDTH_FACTOR
    side_bonus: float = SIDE_BONUS
    opposite_side_penalty: float = OPPOSITE_SIDE_PENALTY
    release_angle_deg: float = RELEASE_ANGLE_DEG
    min_offset_factor: float = MIN_OFFSET_FACTOR
    max_offset_factor: float = MAX_OFFSET_FACTOR
    start_offset: float = START_OFFSET_M
    ground_height: float = GROUND_HEIGHT_M
    obstacle_layers: int = ALL_LAYERS
    fallback_side_rule: str = "mirrored"

    def __post_init__(self) -> None:
        # Normalise sequences coming from YAML/lists into an immutable tuple
        object.__setattr__(
            self, "angle_steps_deg", tuple(float(a) for a in self.angle_steps_deg)
        )
        _require(self.detection_range > 0.0, "detection_range must be > 0")
        _require(self.vehicle_width > 0.0, "vehicle_width must be > 0")
        _require(self.step_distance > 0.0, "step_distance must be > 0")
        _require(
            isinstance(self.max_steps, int) and self.max_steps > 0,
            "max_steps must be a positive integer",
        )
        _require(self.side_switch_cooldown >= 0.0, "side_switch_cooldown must be >= 0")
        _require(len(self.angle_steps_deg) > 0, "angle_steps_deg must not be empty")
        for a in self.angle_steps_deg:
            _require(0.0 < a < 180.0, f"angle step {a} must be in (0, 180) degrees")
        _require(
            isinstance(self.width_rays, int) and self.width_rays >= 1,
            "width_rays must be an integer >= 1",
        )
        _require(self.fallback_width_factor >= 0.0, "fallback_width_factor must be >= 0")
        _require(self.side_bonus >= 0.0, "side_bonus must be >= 0")
        _require(self.opposite_side_penalty >= 0.0, "opposite_side_penalty must be >= 0")
        _require(0.0 < self.release_angle_deg < 180.0, "release_angle_deg in (0, 180)")
        _require(self.min_offset_factor > 0.0, "min_offset_factor must be > 0")
        _require(
            self.max_offset_factor >= self.min_offset_factor,
            "max_offset_factor must be >= min_offset_factor",
        )
        _require(self.start_offset >= 0.0, "start_offset must be >= 0")
        _require(
            self.fallback_side_rule in FALLBACK_SIDE_RULES,
            f"fallback_side_rule must be one of {FALLBACK_SIDE_RULES}",
        )

    @property
    def min_offset(self) -> float:
        return self.min_offset_factor * self.vehicle_width

    @property
    def max_offset(self) -> float:
        return self.max_offset_factor * self.vehicle_width

    @classmethod
    def from_dict(cls, cfg: Dict[str, Any] | None) -> "PlannerConfig":
        d = _known_keys(cls, cfg or {})
        if "max_steps" in d:
            d["max_steps"] = int(d["max_steps"])
        if "width_rays" in d:
            d["width_rays"] = int(d["width_rays"])
        if "obstacle_layers" in d:
            d["obstacle_layers"] = int(d["obstacle_layers"])
        return cls(**d)


@dataclass
class PursuitConfig:
    lookahead_distance: float = LOOKAHEAD_M
    max_steer_angle_deg: float = MAX_STEER_ANGLE_DEG
    motor_torque: float = MOTOR_TORQUE
    max_speed: float = MAX_SPEED_MPS

    def __post_init__(self) -> None:
        _require(self.lookahead_distance > 0.0, "lookahead_distance must be > 0")
        _require(self.max_steer_angle_deg > 0.0, "max_steer_angle_deg must be > 0")
        _require(self.motor_torque >= 0.0, "motor_torque must be >= 0")
        _require(self.max_speed > 0.0, "max_speed must be > 0")

    @classmethod
    def from_dict(cls, cfg: Dict[str, Any] | None) -> "PursuitConfig":
        return cls(**_known_keys(cls, cfg or {}))
