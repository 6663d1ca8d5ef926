from __future__ import annotations

# Planner search
DETECTION_RANGE_M: float = 10.0
VEHICLE_WIDTH_M: float = 2.0
STEP_DISTANCE_M: float = 1.0
MAX_STEPS: int = 200
ANGLE_STEPS_DEG: tuple = (15.0, 30.0, 45.0, 60.0)
WIDTH_RAYS: int = 5

# Side hysteresis
SIDE_SWITCH_COOLDOWN_S: float = 0.5
SIDE_BONUS: float = 0.1
OPPOSITE_SIDE_PENALTY: float = 0.2
RELEASE_ANGLE_DEG: float = 10.0
FALLBACK_WIDTH_FACTOR: float = 5.0

# Endpoint offset (multiples of vehicle width)
MIN_OFFSET_FACTOR: float = 0.6
MAX_OFFSET_FACTOR: float = 1.2

# Vehicle frame
START_OFFSET_M: float = 3.22
GROUND_HEIGHT_M: float = 0.0

# Layers
ALL_LAYERS: int = 0xFFFFFFFF
DEFAULT_LAYER: int = 0

# Pursuit consumer
LOOKAHEAD_M: float = 3.0
MAX_STEER_ANGLE_DEG: float = 30.0
MOTOR_TORQUE: float = 1500.0
MAX_SPEED_MPS: float = 20.0
