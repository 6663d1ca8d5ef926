"""Reactive local path planning for ground vehicles."""

from .config import PlannerConfig, PursuitConfig
from .planning import PathProvider, TrajectoryPlanner
from .types import AvoidanceSide, PlannerState, PlanResult, PlanStatus, Pose

__all__ = [
    "PlannerConfig",
    "PursuitConfig",
    "TrajectoryPlanner",
    "PathProvider",
    "AvoidanceSide",
    "PlannerState",
    "PlanResult",
    "PlanStatus",
    "Pose",
]
