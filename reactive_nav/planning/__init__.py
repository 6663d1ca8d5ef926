from .provider import PathProvider
from .trajectory import TrajectoryPlanner

__all__ = ["TrajectoryPlanner", "PathProvider"]
