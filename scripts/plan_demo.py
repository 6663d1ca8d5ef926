from __future__ import annotations

import argparse

import matplotlib.pyplot as plt

from reactive_nav import PathProvider, TrajectoryPlanner
from reactive_nav.control import compute_drive_command, follow_path
from reactive_nav.geometry import planar_distance
from reactive_nav.sim import load_scene
from reactive_nav.utils import load_planner_config, load_pursuit_config
from reactive_nav.viz.plotting import axes_marker_layer, draw_scene, save_figure


def main():
    parser = argparse.ArgumentParser(description="Drive a vehicle through a scene with the reactive planner")
    parser.add_argument("--scene", default="configs/scenes/single_block.yaml")
    parser.add_argument("--cfg", default="configs/planner.yaml")
    parser.add_argument("--ticks", type=int, default=300)
    parser.add_argument("--dt", type=float, default=0.05)
    parser.add_argument("--speed", type=float, default=6.0, help="kinematic speed (m/s)")
    parser.add_argument("--out", default=None, help="save final frame to this PNG instead of animating")
    args = parser.parse_args()

    scene = load_scene(args.scene)
    planner_cfg = load_planner_config(args.cfg)
    pursuit_cfg = load_pursuit_config(args.cfg)
    planner = TrajectoryPlanner(planner_cfg, scene.make_sensor())

    vehicle = {"pose": scene.start_pose}
    fig, ax = plt.subplots(figsize=(6, 8))
    markers = axes_marker_layer(ax, spacing=planner_cfg.step_distance, ground_height=planner_cfg.ground_height)
    provider = PathProvider(planner, lambda: vehicle["pose"], lambda: scene.goal, markers=markers)

    result = None
    for k in range(int(args.ticks)):
        pose = vehicle["pose"]
        markers.clear()
        draw_scene(ax, scene.obstacles, pose, scene.goal)
        result = provider.update(args.dt)
        cmd = compute_drive_command(pose, None, result.waypoints, args.speed, pursuit_cfg)
        status = {
            "tick": k,
            "status": result.status.value,
            "side": result.side.name,
            "cooldown": planner.state.cooldown,
            "steer_deg": None if cmd is None else cmd.steer_angle_deg,
        }
        draw_scene(ax, (), None, None, result.waypoints, status=status, clear=False)
        if args.out is None:
            plt.pause(args.dt)

        if cmd is None:
            continue
        vehicle["pose"] = follow_path(pose, result.waypoints, args.speed * args.dt, pursuit_cfg.lookahead_distance)
        if planar_distance(vehicle["pose"].position, scene.goal) < 1.0:
            print(f"[DEMO] goal reached at tick {k}")
            break

    if result is not None:
        print(f"[DEMO] last status={result.status.value} waypoints={len(result)} side={result.side.name}")
    if args.out:
        save_figure(fig, args.out)
        print(f"[DEMO] saved {args.out}")
    else:
        plt.show()


if __name__ == "__main__":
    main()
