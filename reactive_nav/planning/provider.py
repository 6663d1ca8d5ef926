"""Pull-based access to the current path.

The driver calls ``update(dt)`` once per frame: the cooldown advances with the
same frame time, the path is recomputed, and visual markers (if attached) are
replaced. Consumers call ``get_current_path()`` whenever they need a path; it is
recomputed on every call and never cached.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

import numpy as np

from ..types import PlanResult, PlanStatus, Pose
from .trajectory import TrajectoryPlanner

PoseSource = Callable[[], Optional[Pose]]
GoalSource = Callable[[], Optional[Sequence[float]]]


class PathProvider:
    def __init__(
        self,
        planner: TrajectoryPlanner,
        pose_source: PoseSource,
        goal_source: GoalSource,
        markers=None,
    ) -> None:
        self.planner = planner
        self._pose_source = pose_source
        self._goal_source = goal_source
        self.markers = markers
        self.last_result: Optional[PlanResult] = None

    def plan(self) -> PlanResult:
        pose = self._pose_source()
        goal = self._goal_source()
        if pose is None or goal is None:
            return PlanResult(np.empty((0, 3), dtype=np.float64), PlanStatus.NO_INPUT, side=self.planner.state.side)
        start = pose.ahead(self.planner.cfg.start_offset)
        return self.planner.plan(pose, goal, start=start)

    def get_current_path(self) -> np.ndarray:
        return self.plan().waypoints

    def update(self, dt: float) -> PlanResult:
        self.planner.tick(dt)
        result = self.plan()
        if self.markers is not None:
            self.markers.replace(result.waypoints)
        self.last_result = result
        return result
