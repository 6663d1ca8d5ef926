from __future__ import annotations

from typing import Iterable, Optional, Sequence

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Circle, Polygon

from ..geometry import rotate_yaw
from ..sensing.primitives import BoxObstacle, DiscObstacle
from ..types import Pose
from .markers import MarkerLayer


def _box_corners(box: BoxObstacle) -> np.ndarray:
    hx, hz = box.half_extents
    corners = []
    for sx, sz in ((-1, -1), (1, -1), (1, 1), (-1, 1)):
        local = np.array([sx * hx, 0.0, sz * hz])
        p = rotate_yaw(local, box.yaw_deg)
        corners.append((box.center[0] + p[0], box.center[1] + p[2]))
    return np.array(corners)


def draw_scene(
    ax,
    obstacles: Iterable = (),
    pose: Optional[Pose] = None,
    goal: Optional[Sequence[float]] = None,
    path: Optional[np.ndarray] = None,
    status: dict | None = None,
    clear: bool = True,
):
    """Top-down view: x to the right, z up."""
    if clear:
        ax.clear()
    for obs in obstacles:
        if isinstance(obs, BoxObstacle):
            ax.add_patch(Polygon(_box_corners(obs), closed=True, color="0.35"))
        elif isinstance(obs, DiscObstacle):
            ax.add_patch(Circle(obs.center, obs.radius, color="0.35"))

    if path is not None and len(path) > 0:
        ax.plot(path[:, 0], path[:, 2], "c-", linewidth=1.5, alpha=0.9, label="path")
        ax.plot(path[:, 0], path[:, 2], "co", markersize=2, alpha=0.7)

    if goal is not None:
        ax.plot(goal[0], goal[2], "gx", markersize=8, markeredgewidth=2, label="goal")

    if pose is not None:
        x, z = pose.position[0], pose.position[2]
        ax.plot(x, z, "bo")
        ax.arrow(x, z, 1.5 * pose.forward[0], 1.5 * pose.forward[2], head_width=0.4, color="b")

    ax.set_aspect("equal")
    ax.set_xlabel("x [m]")
    ax.set_ylabel("z [m]")
    ax.set_title("Planner: path (cyan), vehicle (blue), goal (green x)")

    if status:
        lines = []
        for k, v in status.items():
            if v is None:
                continue
            if isinstance(v, float):
                v = f"{v:.2f}"
            lines.append(f"{k}: {v}")
        if lines:
            ax.text(
                0.02,
                0.98,
                "\n".join(lines),
                transform=ax.transAxes,
                fontsize=8,
                va="top",
                ha="left",
                color="k",
                bbox=dict(facecolor="white", alpha=0.75, edgecolor="none", boxstyle="round,pad=0.3"),
            )


def axes_marker_layer(ax, spacing: float = 1.0, ground_height: float = 0.0) -> MarkerLayer:
    """MarkerLayer that draws each marker as a small disc on ``ax``."""

    def spawn(p: np.ndarray):
        (artist,) = ax.plot(p[0], p[2], "o", color="orange", markersize=4)
        return artist

    def remove(artist) -> None:
        if artist.axes is not None:
            artist.remove()

    return MarkerLayer(spawn, remove, spacing=spacing, ground_height=ground_height)


def save_figure(fig, path: str) -> None:
    fig.savefig(path, dpi=120, bbox_inches="tight")
    plt.close(fig)
