"""Obstacle sensors: the planner's only window onto the world."""

from .base import EmptySensor, ObstacleSensor, ScriptedSensor, in_mask, layer_bit
from .grid import GridRaycaster, inflate_grid, rasterize
from .primitives import BoxObstacle, DiscObstacle, PrimitiveWorldSensor, obstacles_from_dicts

__all__ = [
    "ObstacleSensor",
    "ScriptedSensor",
    "EmptySensor",
    "layer_bit",
    "in_mask",
    "GridRaycaster",
    "inflate_grid",
    "rasterize",
    "BoxObstacle",
    "DiscObstacle",
    "PrimitiveWorldSensor",
    "obstacles_from_dicts",
]
