"""Utility helpers shared across the package and scripts."""

from .config import load_config_any, load_config_dict, load_planner_config, load_pursuit_config

__all__ = [
    "load_config_dict",
    "load_config_any",
    "load_planner_config",
    "load_pursuit_config",
]
