"""
Trajectory generation and verification functions.

- verify_sample_joint_limits: velocity/acceleration/deceleration check of one new sample
- generate_joint_trajectory: sample a PathTrajectory and solve IK per sample
- generate_joint_trajectory_from_cartesian: same for a pre-sampled CartesianTrajectory
- determine_and_check_sampling_time: common sampling period of two trajectories
- is_robot_state_equal / is_robot_state_stationary: endpoint predicates for blending

Failures are reported through ErrorCode values; partially generated
trajectories are never returned.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import NamedTuple

import numpy as np

from armtraj import config as cfg
from armtraj.config import TRACE
from armtraj.kinematics.chain import CollisionChecker, KinematicChain
from armtraj.kinematics.ik import compute_pose_ik
from armtraj.limits import JointLimitsContainer
from armtraj.trajectory.path import PathTrajectory, time_samples
from armtraj.trajectory.types import CartesianTrajectory, JointTrajectory, RobotState
from armtraj.utils.errors import (
    IK_ERROR_CODES,
    ErrorCode,
    IKError,
    TrajectoryPlanningError,
)

logger = logging.getLogger(__name__)


@dataclass
class TrajectoryGenerationResult:
    """Outcome of a trajectory generation call; trajectory is empty on failure."""
    error_code: ErrorCode
    trajectory: JointTrajectory = field(default_factory=JointTrajectory)
    message: str = ""

    @property
    def success(self) -> bool:
        return self.error_code is ErrorCode.SUCCESS

    def raise_for_error(self) -> JointTrajectory:
        """Return the trajectory, or raise IKError / TrajectoryPlanningError on failure."""
        if self.success:
            return self.trajectory
        if self.error_code in IK_ERROR_CODES:
            raise IKError(self.message, self.error_code)
        raise TrajectoryPlanningError(self.message, self.error_code)


class SamplingTimeResult(NamedTuple):
    ok: bool
    sampling_time: float
    error_code: ErrorCode


def _failure(
    code: ErrorCode, message: str, joint_names=()
) -> TrajectoryGenerationResult:
    logger.error(message)
    return TrajectoryGenerationResult(code, JointTrajectory(joint_names), message)


# -----------------------------
# Joint limit verification
# -----------------------------
def check_sample_joint_limits(
    position_last: Mapping[str, float],
    velocity_last: Mapping[str, float],
    position_current: Mapping[str, float],
    duration_last: float,
    duration_current: float,
    joint_limits: JointLimitsContainer,
) -> ErrorCode:
    """
    Check the velocity and acceleration implied by a new sample.

    Velocity is the backward difference over duration_current; acceleration
    is the change against velocity_last over the mean of both durations. A
    joint whose speed magnitude does not drop is checked against its
    acceleration limit, otherwise against its deceleration limit. Joints
    without a limit entry (or with a disabled flag) are unconstrained, and the
    acceleration check is skipped for joints missing from velocity_last.

    Returns
    -------
    ErrorCode
        SUCCESS, DEGENERATE_SAMPLING_DURATION, INPUT_SIZE_MISMATCH or LIMIT_VIOLATION
    """
    if duration_current <= cfg.SAMPLE_DURATION_EPSILON:
        logger.error("Sample duration too small (%g s), cannot compute the velocity", duration_current)
        return ErrorCode.DEGENERATE_SAMPLING_DURATION

    for joint_name, position in position_current.items():
        if joint_name not in position_last:
            logger.error("No previous position for joint %s", joint_name)
            return ErrorCode.INPUT_SIZE_MISMATCH

        velocity_current = (position - position_last[joint_name]) / duration_current
        if not joint_limits.verify_velocity_limit(joint_name, velocity_current):
            logger.error(
                "Joint velocity limit of %s violated (%.6g > %.6g)",
                joint_name,
                abs(velocity_current),
                joint_limits.get_limit(joint_name).max_velocity,
            )
            return ErrorCode.LIMIT_VIOLATION

        limit = joint_limits.find_limit(joint_name)
        if limit is None or joint_name not in velocity_last:
            continue

        v_last = velocity_last[joint_name]
        acceleration_current = (velocity_current - v_last) / (duration_last + duration_current) * 2
        if abs(v_last) <= abs(velocity_current):
            if limit.has_acceleration_limits and abs(acceleration_current) > abs(limit.max_acceleration):
                logger.error(
                    "Joint acceleration limit of %s violated (%.6g > %.6g)",
                    joint_name,
                    abs(acceleration_current),
                    abs(limit.max_acceleration),
                )
                return ErrorCode.LIMIT_VIOLATION
        elif limit.has_deceleration_limits and abs(acceleration_current) > abs(limit.max_deceleration):
            logger.error(
                "Joint deceleration limit of %s violated (%.6g > %.6g)",
                joint_name,
                abs(acceleration_current),
                abs(limit.max_deceleration),
            )
            return ErrorCode.LIMIT_VIOLATION

    return ErrorCode.SUCCESS


def verify_sample_joint_limits(
    position_last: Mapping[str, float],
    velocity_last: Mapping[str, float],
    position_current: Mapping[str, float],
    duration_last: float,
    duration_current: float,
    joint_limits: JointLimitsContainer,
) -> bool:
    """True if the sample respects every enabled limit; see check_sample_joint_limits."""
    return (
        check_sample_joint_limits(
            position_last,
            velocity_last,
            position_current,
            duration_last,
            duration_current,
            joint_limits,
        )
        is ErrorCode.SUCCESS
    )


# -----------------------------
# Trajectory generation
# -----------------------------
def _check_group_and_link(
    chain: KinematicChain, group_name: str, link_name: str
) -> TrajectoryGenerationResult | None:
    if not chain.has_group(group_name):
        return _failure(
            ErrorCode.UNKNOWN_GROUP, f"Robot model has no planning group named {group_name}"
        )
    if not chain.can_solve_ik(group_name, link_name):
        return _failure(
            ErrorCode.UNKNOWN_LINK,
            f"No valid IK solver exists for {link_name} in planning group {group_name}",
        )
    return None


def generate_joint_trajectory(
    chain: KinematicChain,
    joint_limits: JointLimitsContainer,
    trajectory: PathTrajectory,
    group_name: str,
    link_name: str,
    initial_joint_position: Mapping[str, float],
    sampling_time: float,
    check_self_collision: bool = False,
    collision_checker: CollisionChecker | None = None,
) -> TrajectoryGenerationResult:
    """
    Generate a joint trajectory by sampling a Cartesian path trajectory.

    The path is sampled every sampling_time from 0 to its duration (the last
    interval may be shorter). Each sample is solved with IK seeded by the
    previous solution, the first one by initial_joint_position, and checked
    against joint_limits. Velocities and accelerations are backward
    differences; they are zero at the first and last point.

    Parameters
    ----------
    chain : KinematicChain
        Kinematic model providing IK
    joint_limits : JointLimitsContainer
        Per-joint limits used to verify each sample
    trajectory : PathTrajectory
        Cartesian path with velocity profile, poses in the chain root frame
    group_name : str
        Planning group to solve for
    link_name : str
        Link that follows the path
    initial_joint_position : Mapping[str, float]
        Seed for the first sample
    sampling_time : float
        Sampling period in seconds
    check_self_collision : bool, optional
        Reject samples the collision_checker reports as colliding
    collision_checker : CollisionChecker, optional
        Required if check_self_collision is True

    Returns
    -------
    TrajectoryGenerationResult
        Joint trajectory on success; error code and empty trajectory otherwise
    """
    logger.debug("Generate joint trajectory from a Cartesian path trajectory.")
    generation_begin = time.perf_counter()

    failure = _check_group_and_link(chain, group_name, link_name)
    if failure is not None:
        return failure
    if check_self_collision and collision_checker is None:
        raise ValueError("check_self_collision requires a collision_checker")
    if sampling_time <= cfg.SAMPLE_DURATION_EPSILON:
        return _failure(
            ErrorCode.DEGENERATE_SAMPLING_DURATION, f"Sampling time {sampling_time} s is too small"
        )

    joint_names = tuple(chain.joint_names(group_name))
    samples = time_samples(trajectory.duration, sampling_time)

    joint_trajectory = JointTrajectory(joint_names)
    ik_solution_last: dict[str, float] = dict(initial_joint_position)
    joint_velocity_last = {name: 0.0 for name in joint_names}

    for i, t in enumerate(samples):
        pose_sample = trajectory.pose(t)
        ik = compute_pose_ik(
            chain,
            group_name,
            link_name,
            pose_sample,
            chain.root_frame,
            ik_solution_last,
            check_self_collision=check_self_collision,
            collision_checker=collision_checker,
        )
        if not ik.success:
            what = (
                "is in self collision"
                if ik.error_code is ErrorCode.SELF_COLLISION
                else "has no inverse kinematics solution"
            )
            return _failure(ik.error_code, f"Sampled Cartesian pose at {t:.4f}s {what}", joint_names)
        ik_solution = ik.solution

        # last interval can be shorter than the sampling time
        duration_current = t - samples[i - 1] if i > 0 else 0.0

        # skip the first sample with zero time from start for limits checking
        if i > 0:
            code = check_sample_joint_limits(
                ik_solution_last,
                joint_velocity_last,
                ik_solution,
                sampling_time,
                duration_current,
                joint_limits,
            )
            if code is not ErrorCode.SUCCESS:
                return _failure(
                    code,
                    f"Inverse kinematics solution at {t:.4f}s violates the joint "
                    "velocity/acceleration/deceleration limits",
                    joint_names,
                )

        positions = np.array([ik_solution[name] for name in joint_names], dtype=np.float64)
        if 0 < i < len(samples) - 1:
            last = np.array([ik_solution_last[name] for name in joint_names], dtype=np.float64)
            v_last = np.array([joint_velocity_last[name] for name in joint_names], dtype=np.float64)
            velocities = (positions - last) / duration_current
            accelerations = (velocities - v_last) / (duration_current + sampling_time) * 2
        else:
            velocities = np.zeros(len(joint_names))
            accelerations = np.zeros(len(joint_names))

        joint_trajectory.add_point(positions, t, velocities, accelerations)
        logger.log(TRACE, "Sample %d at %.4fs: %s", i, t, positions.tolist())

        joint_velocity_last = dict(zip(joint_names, velocities.tolist()))
        ik_solution_last = ik_solution

    duration_ms = (time.perf_counter() - generation_begin) * 1000
    logger.debug(
        "Generate trajectory (N-Points: %d) took %.3f ms | %.3f ms per Point",
        len(joint_trajectory),
        duration_ms,
        duration_ms / len(joint_trajectory),
    )
    return TrajectoryGenerationResult(ErrorCode.SUCCESS, joint_trajectory)


def generate_joint_trajectory_from_cartesian(
    chain: KinematicChain,
    joint_limits: JointLimitsContainer,
    trajectory: CartesianTrajectory,
    group_name: str,
    link_name: str,
    initial_joint_position: Mapping[str, float],
    initial_joint_velocity: Mapping[str, float],
    check_self_collision: bool = False,
    collision_checker: CollisionChecker | None = None,
) -> TrajectoryGenerationResult:
    """
    Generate a joint trajectory from a pre-sampled Cartesian trajectory.

    Time steps are taken from the points. The first point's duration is its
    own time_from_start, measured from the initial joint state; every point
    gets backward-difference velocities and accelerations.
    """
    logger.debug("Generate joint trajectory from a Cartesian trajectory.")

    failure = _check_group_and_link(chain, group_name, link_name)
    if failure is not None:
        return failure
    if check_self_collision and collision_checker is None:
        raise ValueError("check_self_collision requires a collision_checker")

    joint_names = tuple(chain.joint_names(group_name))
    frame_id = trajectory.frame_id if trajectory.frame_id is not None else chain.root_frame

    joint_trajectory = JointTrajectory(joint_names)
    ik_solution_last: dict[str, float] = dict(initial_joint_position)
    joint_velocity_last: dict[str, float] = {
        name: float(initial_joint_velocity.get(name, 0.0)) for name in joint_names
    }
    duration_last = 0.0

    for i, point in enumerate(trajectory.points):
        ik = compute_pose_ik(
            chain,
            group_name,
            link_name,
            point.pose,
            frame_id,
            ik_solution_last,
            check_self_collision=check_self_collision,
            collision_checker=collision_checker,
        )
        if not ik.success:
            return _failure(
                ik.error_code,
                f"Failed to compute inverse kinematics solution for Cartesian point {i}",
                joint_names,
            )
        ik_solution = ik.solution

        if i == 0:
            duration_current = point.time_from_start
            duration_last = duration_current
        else:
            duration_current = point.time_from_start - trajectory.points[i - 1].time_from_start

        code = check_sample_joint_limits(
            ik_solution_last,
            joint_velocity_last,
            ik_solution,
            duration_last,
            duration_current,
            joint_limits,
        )
        if code is not ErrorCode.SUCCESS:
            return _failure(
                code,
                f"Inverse kinematics solution of sample {i} violates the joint "
                "velocity/acceleration/deceleration limits",
                joint_names,
            )

        positions = np.array([ik_solution[name] for name in joint_names], dtype=np.float64)
        last = np.array([ik_solution_last.get(name, 0.0) for name in joint_names], dtype=np.float64)
        v_last = np.array([joint_velocity_last[name] for name in joint_names], dtype=np.float64)
        velocities = (positions - last) / duration_current
        accelerations = (velocities - v_last) / (duration_current + duration_last) * 2

        joint_trajectory.add_point(positions, point.time_from_start, velocities, accelerations)
        logger.log(TRACE, "Point %d at %.4fs: %s", i, point.time_from_start, positions.tolist())

        joint_velocity_last = dict(zip(joint_names, velocities.tolist()))
        ik_solution_last = ik_solution
        duration_last = duration_current

    return TrajectoryGenerationResult(ErrorCode.SUCCESS, joint_trajectory)


# -----------------------------
# Trajectory consistency
# -----------------------------
def determine_and_check_sampling_time(
    first_trajectory: JointTrajectory,
    second_trajectory: JointTrajectory,
    epsilon: float,
    skip_final_interval: bool = False,
) -> SamplingTimeResult:
    """
    Determine the common sampling period of two trajectories and verify it.

    The period is the first checked interval of the first trajectory that has
    one (the second otherwise). Every checked interval of both trajectories
    must lie within epsilon of it. With skip_final_interval the last interval
    of each trajectory is exempt, since a sampled path ends on its duration.

    Returns
    -------
    SamplingTimeResult
        ok, the determined sampling time (kept on failure for diagnostics),
        and INPUT_SIZE_MISMATCH / INCONSISTENT_SAMPLING_TIME on failure
    """
    if len(first_trajectory) < 2 or len(second_trajectory) < 2:
        logger.error("Both trajectories need at least two waypoints to determine the sampling time")
        return SamplingTimeResult(False, 0.0, ErrorCode.INPUT_SIZE_MISMATCH)

    d1 = first_trajectory.durations()
    d2 = second_trajectory.durations()
    if skip_final_interval:
        d1, d2 = d1[:-1], d2[:-1]
    if d1.size == 0 and d2.size == 0:
        logger.error("Both trajectories do not have enough points to determine sampling time")
        return SamplingTimeResult(False, 0.0, ErrorCode.INPUT_SIZE_MISMATCH)

    sampling_time = float(d1[0]) if d1.size > 0 else float(d2[0])

    for i in range(max(d1.size, d2.size)):
        if i < d1.size and abs(sampling_time - d1[i]) > epsilon:
            logger.error(
                "First trajectory violates sampling time %s between points %d and %d",
                sampling_time,
                i,
                i + 1,
            )
            return SamplingTimeResult(False, sampling_time, ErrorCode.INCONSISTENT_SAMPLING_TIME)
        if i < d2.size and abs(sampling_time - d2[i]) > epsilon:
            logger.error(
                "Second trajectory violates sampling time %s between points %d and %d",
                sampling_time,
                i,
                i + 1,
            )
            return SamplingTimeResult(False, sampling_time, ErrorCode.INCONSISTENT_SAMPLING_TIME)

    return SamplingTimeResult(True, sampling_time, ErrorCode.SUCCESS)


# -----------------------------
# Robot state predicates
# -----------------------------
def is_robot_state_equal(
    state1: RobotState, state2: RobotState, group_name: str, epsilon: float
) -> bool:
    """True if every joint of the group differs by at most epsilon in position, velocity and acceleration."""
    if not state1.chain.has_group(group_name) or not state2.chain.has_group(group_name):
        logger.error("Robot model has no planning group named %s", group_name)
        return False

    for label, a, b in (
        ("positions", state1.joint_group_positions(group_name), state2.joint_group_positions(group_name)),
        ("velocities", state1.joint_group_velocities(group_name), state2.joint_group_velocities(group_name)),
        (
            "accelerations",
            state1.joint_group_accelerations(group_name),
            state2.joint_group_accelerations(group_name),
        ),
    ):
        diff = np.abs(a - b)
        if np.any(diff > epsilon):
            logger.debug(
                "Joint %s of the two states are unequal (max difference %.6g > %.6g)",
                label,
                float(diff.max()),
                epsilon,
            )
            return False
    return True


def is_robot_state_stationary(state: RobotState, group_name: str, epsilon: float) -> bool:
    """True if every joint of the group has |velocity| and |acceleration| at most epsilon."""
    if not state.chain.has_group(group_name):
        logger.error("Robot model has no planning group named %s", group_name)
        return False

    if np.any(np.abs(state.joint_group_velocities(group_name)) > epsilon):
        logger.debug("Joint velocities are not zero")
        return False
    if np.any(np.abs(state.joint_group_accelerations(group_name)) > epsilon):
        logger.debug("Joint accelerations are not zero")
        return False
    return True
