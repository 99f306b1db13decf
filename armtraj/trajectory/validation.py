"""
Whole-trajectory checks for externally supplied or generated joint trajectories.

Used by blending code to validate merged results: timing consistency,
per-point limit bounds and joint-space continuity at a trajectory boundary.
"""

from __future__ import annotations

import logging

import numpy as np

from armtraj import config as cfg
from armtraj.limits import JointLimitsContainer
from armtraj.trajectory.types import JointTrajectory

logger = logging.getLogger(__name__)


def is_trajectory_consistent(trajectory: JointTrajectory) -> bool:
    """True if every point has one value per joint and time strictly increases."""
    n = len(trajectory.joint_names)
    last_time = None
    for i, point in enumerate(trajectory):
        for label, vec in (
            ("positions", point.positions),
            ("velocities", point.velocities),
            ("accelerations", point.accelerations),
        ):
            if vec is not None and len(vec) != n:
                logger.error("Point %d has %d %s for %d joints", i, len(vec), label, n)
                return False
        if last_time is not None and point.time_from_start <= last_time:
            logger.error("Point %d does not advance in time (%s <= %s)", i, point.time_from_start, last_time)
            return False
        last_time = point.time_from_start
    return True


def is_position_bounded(trajectory: JointTrajectory, joint_limits: JointLimitsContainer) -> bool:
    for i, point in enumerate(trajectory):
        for name, position in zip(trajectory.joint_names, point.positions):
            if not joint_limits.verify_position_limit(name, float(position)):
                logger.error("Position of %s out of bounds at point %d: %s", name, i, position)
                return False
    return True


def is_velocity_bounded(trajectory: JointTrajectory, joint_limits: JointLimitsContainer) -> bool:
    for i, point in enumerate(trajectory):
        if point.velocities is None:
            continue
        for name, velocity in zip(trajectory.joint_names, point.velocities):
            if not joint_limits.verify_velocity_limit(name, float(velocity)):
                logger.error("Velocity of %s out of bounds at point %d: %s", name, i, velocity)
                return False
    return True


def is_acceleration_bounded(trajectory: JointTrajectory, joint_limits: JointLimitsContainer) -> bool:
    """
    True if every stored acceleration lies in [max_deceleration, max_acceleration].

    Stored accelerations are signed, so the check is against the signed bounds.
    """
    for i, point in enumerate(trajectory):
        if point.accelerations is None:
            continue
        for name, acceleration in zip(trajectory.joint_names, point.accelerations):
            limit = joint_limits.find_limit(name)
            if limit is None:
                continue
            if limit.has_acceleration_limits and acceleration > limit.max_acceleration:
                logger.error("Acceleration of %s out of bounds at point %d: %s", name, i, acceleration)
                return False
            if limit.has_deceleration_limits and acceleration < limit.max_deceleration:
                logger.error("Deceleration of %s out of bounds at point %d: %s", name, i, acceleration)
                return False
    return True


def check_joint_trajectory(trajectory: JointTrajectory, joint_limits: JointLimitsContainer) -> bool:
    """Consistency plus position, velocity and acceleration bounds."""
    return (
        is_trajectory_consistent(trajectory)
        and is_position_bounded(trajectory, joint_limits)
        and is_velocity_bounded(trajectory, joint_limits)
        and is_acceleration_bounded(trajectory, joint_limits)
    )


def check_joint_space_continuity(
    first: JointTrajectory, second: JointTrajectory, velocity_tolerance: float
) -> bool:
    """
    Check that second continues first in joint space.

    second's time_from_start is measured from the end of first. The velocity
    implied by the position step from first's last point to second's first
    point must match second's first velocity within velocity_tolerance. If
    second starts at the end of first (zero time step), positions must
    coincide and the velocities of both boundary points must match instead.
    """
    if first.empty() or second.empty():
        logger.error("Cannot check continuity of an empty trajectory")
        return False
    if first.joint_names != second.joint_names:
        logger.error("Trajectories have different joints: %s vs %s", first.joint_names, second.joint_names)
        return False

    last = first[-1]
    head = second[0]
    head_velocity = head.velocities if head.velocities is not None else np.zeros(len(head.positions))
    dt = head.time_from_start

    if dt <= cfg.SAMPLE_DURATION_EPSILON:
        if not np.allclose(last.positions, head.positions, rtol=0.0, atol=cfg.SAMPLE_DURATION_EPSILON):
            logger.error("Joint positions jump at the trajectory boundary")
            return False
        last_velocity = last.velocities if last.velocities is not None else np.zeros(len(last.positions))
        diff = np.abs(head_velocity - last_velocity)
    else:
        implied = (head.positions - last.positions) / dt
        diff = np.abs(head_velocity - implied)

    if np.any(diff > velocity_tolerance):
        j = int(np.argmax(diff))
        logger.error(
            "Joint velocity of %s is discontinuous at the trajectory boundary (difference %.6g)",
            first.joint_names[j],
            float(diff[j]),
        )
        return False
    return True
