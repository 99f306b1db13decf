"""
Forward/inverse kinematics helpers on top of a KinematicChain.

Both functions validate their inputs up front and report failures as return
values: compute_link_fk returns None, compute_pose_ik an IKResult with an
ErrorCode.
"""

from __future__ import annotations

import logging
from collections import namedtuple
from collections.abc import Mapping
from typing import TYPE_CHECKING

import numpy as np
from spatialmath import SE3

from armtraj import config as cfg
from armtraj.utils.errors import ErrorCode

if TYPE_CHECKING:
    from armtraj.kinematics.chain import CollisionChecker, KinematicChain

logger = logging.getLogger(__name__)


def unwrap_angles(q_solution, q_current):
    """
    Vectorized unwrap: bring solution angles near current by adding/subtracting 2*pi.
    This minimizes joint motion between consecutive configurations.
    """
    qs = np.asarray(q_solution, dtype=float)
    qc = np.asarray(q_current, dtype=float)
    diff = qs - qc
    q_unwrapped = qs.copy()
    q_unwrapped[diff > np.pi] -= 2 * np.pi
    q_unwrapped[diff < -np.pi] += 2 * np.pi
    return q_unwrapped


IKResult = namedtuple('IKResult', 'success solution error_code')


def compute_link_fk(
    chain: KinematicChain,
    group_name: str,
    link_name: str,
    joint_values: Mapping[str, float],
) -> SE3 | None:
    """
    Pose of link_name in the chain's root frame.

    Parameters
    ----------
    chain : KinematicChain
        Kinematic model
    group_name : str
        Planning group whose joints must all be present in joint_values
    link_name : str
        Link to compute the pose of
    joint_values : Mapping[str, float]
        Joint positions by name

    Returns
    -------
    SE3 | None
        Link pose, or None if the group/link is unknown, a group joint is
        missing or the transform cannot be computed
    """
    if not chain.has_group(group_name):
        logger.error("Robot model has no planning group named %s", group_name)
        return None
    if not chain.has_link(link_name):
        logger.error("The target link %s is not known by robot", link_name)
        return None
    missing = [j for j in chain.joint_names(group_name) if j not in joint_values]
    if missing:
        logger.error("Joint values for group %s are missing %s", group_name, missing)
        return None
    return chain.link_pose(link_name, joint_values)


def compute_pose_ik(
    chain: KinematicChain,
    group_name: str,
    link_name: str,
    pose: SE3,
    frame_id: str,
    seed: Mapping[str, float],
    timeout: float | None = None,
    check_self_collision: bool = False,
    collision_checker: CollisionChecker | None = None,
) -> IKResult:
    """
    Solve inverse kinematics for link_name reaching pose.

    The pose must be expressed in the chain's root frame; no frame transform
    is applied. The seed may be incomplete, missing joints start at zero.

    Returns
    -------
    IKResult
        success - True if a solution was found
        solution - Joint values of the group by name (None if failed)
        error_code - ErrorCode describing the outcome
    """
    if not chain.has_group(group_name):
        logger.error("Robot model has no planning group named %s", group_name)
        return IKResult(False, None, ErrorCode.UNKNOWN_GROUP)
    if not chain.can_solve_ik(group_name, link_name):
        logger.error("No valid IK solver exists for %s in planning group %s", link_name, group_name)
        return IKResult(False, None, ErrorCode.UNKNOWN_LINK)
    if frame_id != chain.root_frame:
        logger.error("Given frame (%s) is unequal to model frame (%s)", frame_id, chain.root_frame)
        return IKResult(False, None, ErrorCode.FRAME_MISMATCH)
    if check_self_collision and collision_checker is None:
        raise ValueError("check_self_collision requires a collision_checker")

    solution = chain.solve_ik(
        group_name, link_name, pose, seed, cfg.IK_TIMEOUT_S if timeout is None else timeout
    )
    if solution is None:
        logger.error("Unable to find IK solution for %s", link_name)
        return IKResult(False, None, ErrorCode.IK_FAILURE)

    if check_self_collision and collision_checker(group_name, solution):
        logger.error("IK solution for %s is in self collision", link_name)
        return IKResult(False, None, ErrorCode.SELF_COLLISION)

    return IKResult(True, solution, ErrorCode.SUCCESS)
