import numpy as np
import pytest

from reactive_nav import AvoidanceSide, PlannerState, Pose
from reactive_nav.geometry import angle_between_deg, normalize, planar_distance, rotate_yaw


def test_positive_yaw_turns_right() -> None:
    fwd = np.array([0.0, 0.0, 1.0])
    assert np.allclose(rotate_yaw(fwd, 90.0), [1.0, 0.0, 0.0])
    assert np.allclose(rotate_yaw(fwd, -90.0), [-1.0, 0.0, 0.0])
    assert np.allclose(rotate_yaw(np.array([0.0, 2.0, 1.0]), 180.0), [0.0, 2.0, -1.0])


def test_pose_from_yaw_frame() -> None:
    pose = Pose.from_yaw((1.0, 0.0, 2.0), 90.0)
    assert np.allclose(pose.forward, [1.0, 0.0, 0.0])
    assert np.allclose(pose.right, [0.0, 0.0, -1.0])
    assert pose.yaw_deg == pytest.approx(90.0)
    assert np.allclose(pose.ahead(2.0), [3.0, 0.0, 2.0])


def test_pose_rejects_skewed_frame() -> None:
    with pytest.raises(ValueError):
        Pose(position=np.zeros(3), forward=[0.0, 0.0, 1.0], right=[1.0, 0.0, 1.0])
    pose = Pose(position=np.zeros(3), forward=[0.0, 0.0, 2.0], right=[3.0, 0.0, 0.0])
    assert np.allclose(pose.right, [1.0, 0.0, 0.0])


def test_angles_and_degenerate_vectors() -> None:
    assert angle_between_deg(np.array([1.0, 0.0, 0.0]), np.array([0.0, 0.0, 3.0])) == pytest.approx(90.0)
    assert angle_between_deg(np.zeros(3), np.array([1.0, 0.0, 0.0])) == 0.0
    assert np.allclose(normalize(np.zeros(3)), 0.0)
    assert planar_distance(np.array([0.0, 5.0, 0.0]), np.array([3.0, -1.0, 4.0])) == pytest.approx(5.0)


def test_side_from_angle() -> None:
    assert AvoidanceSide.from_angle(-15.0) == AvoidanceSide.LEFT
    assert AvoidanceSide.from_angle(30.0) == AvoidanceSide.RIGHT
    assert AvoidanceSide.from_angle(0.0) == AvoidanceSide.NONE


def test_state_tick_clamps_and_resets() -> None:
    state = PlannerState(side=-1, cooldown=0.3)
    assert state.side == AvoidanceSide.LEFT
    state.tick(1.0)
    assert state.cooldown == 0.0
    state.reset()
    assert state.side == AvoidanceSide.NONE
    assert PlannerState(cooldown=-2.0).cooldown == 0.0
