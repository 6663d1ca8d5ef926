import numpy as np
import pytest

from reactive_nav import Pose, PursuitConfig
from reactive_nav.control import compute_drive_command, follow_path, select_lookahead


def straight_path(n: int = 21) -> np.ndarray:
    return np.stack([np.zeros(n), np.zeros(n), np.linspace(0.0, 20.0, n)], axis=1)


def test_lookahead_picks_first_point_beyond_distance() -> None:
    wp = straight_path()
    target = select_lookahead((0.0, 0.0, 0.0), wp, 3.0)
    assert np.allclose(target, [0.0, 0.0, 4.0])
    assert np.allclose(select_lookahead((0.0, 0.0, 0.0), wp, 50.0), wp[-1])
    assert select_lookahead((0.0, 0.0, 0.0), np.empty((0, 3)), 3.0) is None


def test_straight_path_zero_steer_full_throttle() -> None:
    cmd = compute_drive_command(Pose.from_yaw((0.0, 0.0, 0.0)), None, straight_path(), speed=5.0)
    assert cmd.steer_input == pytest.approx(0.0)
    assert cmd.throttle == 1.0
    assert cmd.motor_torque == 1500.0


def test_target_to_the_right_steers_right() -> None:
    cfg = PursuitConfig(max_steer_angle_deg=30.0)
    cmd = compute_drive_command(
        Pose.from_yaw((0.0, 0.0, 0.0)), None, np.array([[5.0, 0.0, 5.0]]), speed=0.0, cfg=cfg
    )
    assert cmd.steer_input == pytest.approx(np.sqrt(0.5))
    assert cmd.steer_angle_deg == pytest.approx(30.0 * np.sqrt(0.5))


def test_speed_limit_cuts_throttle() -> None:
    cfg = PursuitConfig(max_speed=10.0)
    cmd = compute_drive_command(Pose.from_yaw((0.0, 0.0, 0.0)), None, straight_path(), speed=10.0, cfg=cfg)
    assert cmd.throttle == 0.0
    assert cmd.motor_torque == 0.0


def test_empty_path_means_hold() -> None:
    assert compute_drive_command(Pose.from_yaw((0.0, 0.0, 0.0)), None, np.empty((0, 3)), speed=1.0) is None


def test_reference_point_is_used_for_lookahead() -> None:
    # From a reference 2 m ahead, the 3 m lookahead lands on z=6.
    pose = Pose.from_yaw((0.0, 0.0, 0.0))
    wp = np.array([[0.0, 0.0, 4.0], [0.0, 0.0, 6.0], [10.0, 0.0, 6.0]])
    cmd = compute_drive_command(pose, (0.0, 0.0, 2.0), wp, speed=0.0)
    assert cmd.steer_input == pytest.approx(0.0)


def test_follow_path_moves_toward_target() -> None:
    pose = Pose.from_yaw((0.0, 0.0, 0.0))
    moved = follow_path(pose, np.array([[3.0, 0.0, 4.0]]), 1.0)
    assert np.allclose(moved.position, [0.6, 0.0, 0.8])
    assert np.allclose(moved.forward, [0.6, 0.0, 0.8])
    assert np.allclose(moved.right, [0.8, 0.0, -0.6])
