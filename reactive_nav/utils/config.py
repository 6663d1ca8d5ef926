"""Config loading helpers built around OmegaConf."""

from __future__ import annotations

from typing import Any, Dict, Optional

from omegaconf import OmegaConf

from ..config import PlannerConfig, PursuitConfig


def load_config_any(path: str) -> Any:
    """Load a YAML/OmegaConf file and return the resolved Python object."""
    return OmegaConf.to_container(OmegaConf.load(path), resolve=True)


def load_config_dict(path: str) -> Dict[str, Any]:
    """Load a config file and guarantee a `dict` result."""
    cfg = load_config_any(path)
    if not isinstance(cfg, dict):
        raise TypeError(f"Expected mapping at {path}, got {type(cfg)}")
    return cfg


def _section(cfg: Dict[str, Any], key: Optional[str]) -> Dict[str, Any]:
    if key is None or key not in cfg:
        return cfg
    sub = cfg[key]
    if not isinstance(sub, dict):
        raise TypeError(f"Expected config section '{key}' to be a mapping")
    return sub


def load_planner_config(path: str, section: Optional[str] = "planner") -> PlannerConfig:
    """Read a PlannerConfig from ``path``; the ``planner:`` section is used if present."""
    return PlannerConfig.from_dict(_section(load_config_dict(path), section))


def load_pursuit_config(path: str, section: Optional[str] = "pursuit") -> PursuitConfig:
    return PursuitConfig.from_dict(_section(load_config_dict(path), section))
