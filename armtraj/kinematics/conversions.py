"""
Conversions between joint value maps, ordered joint vectors and poses.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.spatial.transform import Rotation
from spatialmath import SE3


def joint_values_to_array(
    joint_values: Mapping[str, float], joint_names: Sequence[str]
) -> NDArray[np.float64]:
    """Order a joint value map by joint_names. Raises KeyError for a missing joint."""
    return np.array([joint_values[name] for name in joint_names], dtype=np.float64)


def array_to_joint_values(values: ArrayLike, joint_names: Sequence[str]) -> dict[str, float]:
    """Name an ordered joint vector."""
    arr = np.asarray(values, dtype=np.float64).reshape(-1)
    if arr.shape[0] != len(joint_names):
        raise ValueError(f"Expected {len(joint_names)} joint values, got {arr.shape[0]}")
    return {name: float(v) for name, v in zip(joint_names, arr)}


def pose_from_matrix(matrix: ArrayLike) -> SE3:
    """4x4 homogeneous matrix to SE3 (rotation must be orthonormal)."""
    return SE3(np.asarray(matrix, dtype=np.float64))


def pose_from_position_quaternion(position: Sequence[float], quaternion: Sequence[float]) -> SE3:
    """Pose from translation [x, y, z] and quaternion [x, y, z, w]."""
    R = Rotation.from_quat(np.asarray(quaternion, dtype=float)).as_matrix()
    return SE3.Rt(R, np.asarray(position, dtype=float))


def pose_to_position_quaternion(pose: SE3) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Split a pose into translation [x, y, z] and quaternion [x, y, z, w]."""
    return np.array(pose.t, dtype=np.float64), Rotation.from_matrix(pose.R).as_quat()


def se3_to_pose6(T: SE3) -> list[float]:
    """Convert SE3 transform to 6D pose [x,y,z,roll,pitch,yaw] (m, rad)."""
    return np.concatenate([T.t, T.rpy(order="zyx")]).tolist()


def is_pose_near(pose1: SE3, pose2: SE3, epsilon: float) -> bool:
    """True if every rotation and translation entry differs by at most epsilon."""
    return bool(np.all(np.abs(pose1.A[:3, :] - pose2.A[:3, :]) <= abs(epsilon)))


def compute_cartesian_velocity(
    pose_1: SE3, pose_2: SE3, duration: float
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Average linear and angular velocity moving from pose_1 to pose_2.

    Angular velocity is expressed in the root frame.
    """
    if duration <= 0:
        raise ValueError("duration must be positive")
    v = (pose_2.t - pose_1.t) / duration
    rotvec = Rotation.from_matrix(pose_2.R @ pose_1.R.T).as_rotvec()
    w = rotvec / duration
    return v, w
