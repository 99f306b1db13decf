"""
armtraj Python Package

Trajectory generation and verification for serial manipulators on top of
roboticstoolbox kinematics.

Key components:
- generate_joint_trajectory: sample a Cartesian path trajectory into joint space
- generate_joint_trajectory_from_cartesian: convert a pre-sampled Cartesian trajectory
- verify_sample_joint_limits: velocity/acceleration/deceleration check of one sample
- determine_and_check_sampling_time: common sampling period of two trajectories
- is_robot_state_equal / is_robot_state_stationary: blending endpoint predicates
- RoboticsToolboxChain: KinematicChain backed by a roboticstoolbox Robot
"""

from ._version import __version__
from .kinematics.chain import KinematicChain, PlanningGroup, RoboticsToolboxChain
from .kinematics.ik import IKResult, compute_link_fk, compute_pose_ik
from .limits import JointLimit, JointLimitsContainer
from .trajectory.functions import (
    SamplingTimeResult,
    TrajectoryGenerationResult,
    determine_and_check_sampling_time,
    generate_joint_trajectory,
    generate_joint_trajectory_from_cartesian,
    is_robot_state_equal,
    is_robot_state_stationary,
    verify_sample_joint_limits,
)
from .trajectory.types import (
    CartesianTrajectory,
    CartesianTrajectoryPoint,
    JointTrajectory,
    JointTrajectoryPoint,
    RobotState,
)
from .utils.errors import ErrorCode, IKError, TrajectoryPlanningError

__all__ = [
    "__version__",
    "KinematicChain",
    "PlanningGroup",
    "RoboticsToolboxChain",
    "IKResult",
    "compute_link_fk",
    "compute_pose_ik",
    "JointLimit",
    "JointLimitsContainer",
    "SamplingTimeResult",
    "TrajectoryGenerationResult",
    "determine_and_check_sampling_time",
    "generate_joint_trajectory",
    "generate_joint_trajectory_from_cartesian",
    "is_robot_state_equal",
    "is_robot_state_stationary",
    "verify_sample_joint_limits",
    "CartesianTrajectory",
    "CartesianTrajectoryPoint",
    "JointTrajectory",
    "JointTrajectoryPoint",
    "RobotState",
    "ErrorCode",
    "IKError",
    "TrajectoryPlanningError",
]
