"""Reactive local trajectory planner.

Every call marches a cursor from the start toward the goal in fixed steps.
At each step a fan of candidate headings around the goal direction is probed
with parallel rays spread across the vehicle width; blocked headings are
dropped and the survivors are scored by their alignment with the goal
direction. A committed avoidance side (with a cooldown) biases the choice so
the route does not flap between left and right around an obstacle.

API: TrajectoryPlanner(cfg, sensor, state).compute_path(pose, goal, start) -> (N, 3)
"""

from __future__ import annotations

import logging
from math import inf
from typing import List, Optional, Sequence

import numpy as np

from ..config import PlannerConfig
from ..geometry import angle_between_deg, as_point, normalize, on_ground, rotate_yaw
from ..sensing.base import ObstacleSensor
from ..types import AvoidanceSide, PlannerState, PlanResult, PlanStatus, Pose

logger = logging.getLogger(__name__)


def _empty_path() -> np.ndarray:
    return np.empty((0, 3), dtype=np.float64)


class TrajectoryPlanner:
    """Greedy angular-search planner with side hysteresis.

    Args:
        config: planner parameters (immutable).
        sensor: obstacle query capability; ``None`` degrades to a single-point path.
        state: hysteresis state to start from. It is mutated in place by
            ``plan``/``tick`` and exposed as ``self.state``.
    """

    def __init__(
        self,
        config: Optional[PlannerConfig] = None,
        sensor: Optional[ObstacleSensor] = None,
        state: Optional[PlannerState] = None,
    ) -> None:
        self.cfg = config or PlannerConfig()
        self.sensor = sensor
        self.state = state if state is not None else PlannerState()

    def tick(self, dt: float) -> None:
        """Advance the side-switch cooldown by the driver's frame time."""
        self.state.tick(dt)

    def candidate_angles(self, side: AvoidanceSide) -> List[float]:
        steps = sorted(self.cfg.angle_steps_deg)
        if side == AvoidanceSide.NONE:
            out = [0.0]
            for a in steps:
                out.extend((-a, a))
            return out
        sign = float(side)
        committed = [sign * a for a in steps]
        opposite = [-sign * a for a in steps]
        return committed + [0.0] + opposite

    # ------------------------------------------------------------------
    # Obstruction checks
    # ------------------------------------------------------------------
    def _blocked(self, origin: np.ndarray, direction: np.ndarray) -> bool:
        hit = self.sensor.raycast(
            origin, direction, self.cfg.detection_range, self.cfg.obstacle_layers
        )
        return hit is not None

    def is_obstructed(self, cursor: np.ndarray, direction: np.ndarray, right: np.ndarray) -> bool:
        """Cast ``width_rays`` parallel rays spread across the vehicle width."""
        n = self.cfg.width_rays
        for r in range(n):
            t = r / (n - 1) if n > 1 else 0.5
            origin = cursor + right * (t - 0.5) * self.cfg.vehicle_width
            if self._blocked(origin, direction):
                return True
        return False

    def _is_obstructed_wide(self, cursor: np.ndarray, direction: np.ndarray, right: np.ndarray) -> bool:
        spread = right * self.cfg.vehicle_width * self.cfg.fallback_width_factor
        for origin in (cursor, cursor - spread, cursor + spread):
            if self._blocked(origin, direction):
                return True
        return False

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------
    def _score(self, candidate: np.ndarray, target: np.ndarray, angle: float, side: AvoidanceSide) -> float:
        score = float(np.dot(candidate, target))
        if side != AvoidanceSide.NONE:
            cand_side = AvoidanceSide.from_angle(angle)
            if cand_side == side:
                score += self.cfg.side_bonus
            elif cand_side == -side:
                score -= self.cfg.opposite_side_penalty
        return score

    def _fallback_side(self, angle: float) -> AvoidanceSide:
        if self.cfg.fallback_side_rule == "legacy":
            # Legacy rule: every non-zero angle counts as RIGHT.
            return AvoidanceSide.RIGHT if angle != 0.0 else AvoidanceSide.NONE
        return AvoidanceSide.from_angle(angle)

    def _fallback_direction(
        self,
        cursor: np.ndarray,
        target: np.ndarray,
        right: np.ndarray,
        angles: Sequence[float],
    ) -> Optional[np.ndarray]:
        """Best free heading that keeps to the committed side (or straight)."""
        side = self.state.side
        best_dir: Optional[np.ndarray] = None
        best_score = -inf
        for angle in angles:
            cand_side = self._fallback_side(angle)
            if cand_side != side and cand_side != AvoidanceSide.NONE:
                continue
            cand = rotate_yaw(target, angle)
            if self._is_obstructed_wide(cursor, cand, right):
                continue
            score = float(np.dot(cand, target))
            if score > best_score:
                best_score = score
                best_dir = cand
        return best_dir

    def _end_offset(self, cursor: np.ndarray, forward: np.ndarray) -> float:
        """Signed lateral goal offset while avoiding; closer obstacle -> larger offset."""
        cfg = self.cfg
        hit = self.sensor.raycast(cursor, forward, cfg.detection_range, cfg.obstacle_layers)
        closest = cfg.detection_range if hit is None else float(hit)
        t = float(np.clip(1.0 - closest / cfg.detection_range, 0.0, 1.0))
        magnitude = cfg.min_offset + (cfg.max_offset - cfg.min_offset) * t
        return float(self.state.side) * magnitude

    def _finish(self, points: List[np.ndarray]) -> np.ndarray:
        if not points:
            return _empty_path()
        return np.stack([on_ground(p, self.cfg.ground_height) for p in points])

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------
    def plan(
        self,
        pose: Pose,
        goal: Optional[Sequence[float]],
        start: Optional[Sequence[float]] = None,
    ) -> PlanResult:
        """Compute one path from ``start`` (default: pose position) toward ``goal``.

        ``pose`` supplies the vehicle's forward/right axes: the right axis
        spreads the width rays and carries the goal offset, the forward axis
        measures obstacle proximity at the end of the path.
        """
        cfg = self.cfg
        state = self.state
        if goal is None:
            return PlanResult(_empty_path(), PlanStatus.NO_INPUT, side=state.side)
        start_pt = as_point(pose.position if start is None else start)
        if self.sensor is None:
            return PlanResult(self._finish([start_pt]), PlanStatus.NO_INPUT, side=state.side)

        # Planar motion: plan at the start's height
        end = as_point(goal)
        end[1] = start_pt[1]
        right = pose.right

        points: List[np.ndarray] = []
        cursor = start_pt.copy()
        steps = 0
        while True:
            if float(np.linalg.norm(end - cursor)) <= cfg.step_distance:
                status = PlanStatus.REACHED
                break
            if steps >= cfg.max_steps:
                status = PlanStatus.EXHAUSTED
                break

            points.append(cursor.copy())
            target_dir = normalize(end - cursor)
            angles = self.candidate_angles(state.side)

            best_dir: Optional[np.ndarray] = None
            best_score = -inf
            best_side = AvoidanceSide.NONE
            for angle in angles:
                cand = rotate_yaw(target_dir, angle)
                if self.is_obstructed(cursor, cand, right):
                    continue
                score = self._score(cand, target_dir, angle, state.side)
                if score > best_score:
                    best_score = score
                    best_dir = cand
                    best_side = AvoidanceSide.from_angle(angle)

            if best_dir is None:
                status = PlanStatus.BLOCKED
                logger.debug("[PLANNER] all headings blocked at step %d, cursor=%s", steps, cursor)
                break

            if best_side != state.side:
                if state.ready_to_switch:
                    logger.debug("[PLANNER] side %s -> %s", state.side.name, best_side.name)
                    state.side = best_side
                    state.cooldown = cfg.side_switch_cooldown
                else:
                    fallback = self._fallback_direction(cursor, target_dir, right, angles)
                    if fallback is not None:
                        best_dir = fallback

            cursor = cursor + best_dir * cfg.step_distance
            steps += 1

            if state.side != AvoidanceSide.NONE:
                clear = not self._blocked(cursor, target_dir)
                if clear and angle_between_deg(best_dir, target_dir) < cfg.release_angle_deg:
                    logger.debug("[PLANNER] side %s released at step %d", state.side.name, steps)
                    state.side = AvoidanceSide.NONE

        offset = 0.0
        if status == PlanStatus.REACHED:
            if state.side != AvoidanceSide.NONE:
                offset = self._end_offset(cursor, pose.forward)
                end = end + right * offset
            if not points:
                points.append(cursor.copy())
            points.append(end)
        elif status == PlanStatus.EXHAUSTED:
            logger.debug("[PLANNER] step budget %d exhausted", cfg.max_steps)
            points.append(cursor.copy())

        return PlanResult(
            waypoints=self._finish(points),
            status=status,
            steps=steps,
            side=state.side,
            offset=offset,
        )

    def compute_path(
        self,
        pose: Pose,
        goal: Optional[Sequence[float]],
        start: Optional[Sequence[float]] = None,
    ) -> np.ndarray:
        return self.plan(pose, goal, start).waypoints
