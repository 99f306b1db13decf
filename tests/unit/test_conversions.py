import numpy as np
import pytest
from spatialmath import SE3

from armtraj.kinematics.conversions import (
    array_to_joint_values,
    compute_cartesian_velocity,
    is_pose_near,
    joint_values_to_array,
    pose_from_matrix,
    pose_from_position_quaternion,
    pose_to_position_quaternion,
    se3_to_pose6,
)

NAMES = ["j1", "j2", "j3"]


def test_joint_values_ordering():
    values = {"j3": 3.0, "j1": 1.0, "j2": 2.0, "extra": 9.0}
    assert np.allclose(joint_values_to_array(values, NAMES), [1.0, 2.0, 3.0])
    with pytest.raises(KeyError):
        joint_values_to_array({"j1": 1.0}, NAMES)

    assert array_to_joint_values(np.array([1.0, 2.0, 3.0]), NAMES) == {"j1": 1.0, "j2": 2.0, "j3": 3.0}
    with pytest.raises(ValueError):
        array_to_joint_values([1.0, 2.0], NAMES)


def test_pose_from_matrix_identity_translation():
    """
    Identity rotation with translation (0.01, 0.02, 0.03) m.
    """
    mat = [
        [1, 0, 0, 0.01],
        [0, 1, 0, 0.02],
        [0, 0, 1, 0.03],
        [0, 0, 0, 1],
    ]
    pose = pose_from_matrix(mat)
    pose6 = se3_to_pose6(pose)
    assert np.allclose(pose6[0:3], [0.01, 0.02, 0.03])
    # Identity rotation -> zero Euler angles (within tolerance)
    assert np.allclose(pose6[3:6], 0.0, atol=1e-9)


def test_se3_to_pose6_rpy():
    pose = SE3(0.1, 0.2, 0.3) * SE3.RPY([0.1, -0.2, 0.3], order="zyx")
    assert np.allclose(se3_to_pose6(pose), [0.1, 0.2, 0.3, 0.1, -0.2, 0.3])


def test_position_quaternion_round_trip():
    # 90 degrees about z: quaternion [x, y, z, w]
    q = [0.0, 0.0, np.sin(np.pi / 4), np.cos(np.pi / 4)]
    pose = pose_from_position_quaternion([0.5, 0.0, 0.2], q)
    assert np.allclose(pose.A, (SE3(0.5, 0.0, 0.2) * SE3.Rz(np.pi / 2)).A)

    position, quaternion = pose_to_position_quaternion(pose)
    assert np.allclose(position, [0.5, 0.0, 0.2])
    # q and -q are the same rotation
    assert np.allclose(np.abs(quaternion), np.abs(q))


def test_is_pose_near():
    pose = SE3(0.1, 0.2, 0.3) * SE3.Rx(0.2)
    assert is_pose_near(pose, pose, 0.0)
    assert is_pose_near(pose, SE3(1e-5, 0.0, 0.0) * pose, 1e-4)
    assert not is_pose_near(pose, SE3(1e-3, 0.0, 0.0) * pose, 1e-4)
    assert not is_pose_near(pose, pose * SE3.Rz(1e-2), 1e-4)


def test_compute_cartesian_velocity():
    pose_1 = SE3(0.0, 0.0, 0.5)
    pose_2 = SE3(0.02, -0.01, 0.5) * SE3.Rz(0.05)
    v, w = compute_cartesian_velocity(pose_1, pose_2, 0.1)
    assert np.allclose(v, [0.2, -0.1, 0.0])
    assert np.allclose(w, [0.0, 0.0, 0.5])

    with pytest.raises(ValueError):
        compute_cartesian_velocity(pose_1, pose_2, 0.0)
