"""
Reference 6-axis manipulator (PRBT-like geometry) for examples and tests.

Joint 1 turns about the base z axis, joints 2 and 3 are shoulder/elbow pitch
(joint 3 mirrored), joints 4-6 form a z-y-z wrist. At zero configuration the
arm points straight up.
"""

import logging
from math import pi

import roboticstoolbox as rtb
from roboticstoolbox import ET, ETS, Link

from armtraj.kinematics.chain import PlanningGroup, RoboticsToolboxChain
from armtraj.limits import JointLimit, JointLimitsContainer

logger = logging.getLogger(__name__)

# -----------------------------
# Geometry (m)
# -----------------------------
L0: float = 0.2604  # base to shoulder
L1: float = 0.35  # shoulder to elbow
L2: float = 0.307  # elbow to wrist
L3: float = 0.084  # wrist to flange

GROUP_NAME = "manipulator"
BASE_LINK = "prbt_base_link"
FLANGE_LINK = "prbt_flange"
TCP_LINK = "prbt_tcp"
JOINT_NAMES: tuple[str, ...] = tuple(f"prbt_joint_{i}" for i in range(1, 7))

# -----------------------------
# Nominal limits
# -----------------------------
POSITION_LIMIT: float = 2.967  # rad, symmetric for every joint
_max_velocity = (1.57, 1.57, 1.57, 3.14, 3.14, 3.14)  # rad/s
_max_acceleration: float = 3.49  # rad/s^2
_max_deceleration: float = -3.49  # rad/s^2


def make_robot(tool_offset: float = 0.0) -> rtb.Robot:
    """
    Build the chain as roboticstoolbox Links.

    Parameters
    ----------
    tool_offset : float
        Distance of the TCP link from the flange along the flange z axis (m)
    """
    qlim = [-POSITION_LIMIT, POSITION_LIMIT]

    base = Link(name=BASE_LINK)
    link_1 = Link(ET.tz(L0) * ET.Rz(qlim=qlim), name="prbt_link_1", parent=base)
    link_2 = Link(ET.Ry(qlim=qlim), name="prbt_link_2", parent=link_1)
    link_3 = Link(ET.tz(L1) * ET.Ry(flip=True, qlim=qlim), name="prbt_link_3", parent=link_2)
    link_4 = Link(ET.tz(L2) * ET.Rz(qlim=qlim), name="prbt_link_4", parent=link_3)
    link_5 = Link(ET.Ry(qlim=qlim), name="prbt_link_5", parent=link_4)
    link_6 = Link(ET.Rz(qlim=qlim), name="prbt_link_6", parent=link_5)
    flange = Link(ET.tz(L3), name=FLANGE_LINK, parent=link_6)
    tcp = Link(ET.tz(tool_offset) if tool_offset else ETS(), name=TCP_LINK, parent=flange)

    robot = rtb.Robot(
        [base, link_1, link_2, link_3, link_4, link_5, link_6, flange, tcp],
        name="prbt",
    )
    logger.debug("Built prbt model with tool offset %.4f m", tool_offset)
    return robot


def make_chain(tool_offset: float = 0.0) -> RoboticsToolboxChain:
    """Chain with one planning group 'manipulator' over all six joints."""
    return RoboticsToolboxChain(
        make_robot(tool_offset),
        [PlanningGroup(GROUP_NAME, JOINT_NAMES, FLANGE_LINK)],
        joint_names=JOINT_NAMES,
    )


def make_joint_limits() -> JointLimitsContainer:
    limits = JointLimitsContainer()
    for name, max_velocity in zip(JOINT_NAMES, _max_velocity):
        limits.add_limit(
            name,
            JointLimit(
                has_position_limits=True,
                min_position=-POSITION_LIMIT,
                max_position=POSITION_LIMIT,
                has_velocity_limits=True,
                max_velocity=max_velocity,
                has_acceleration_limits=True,
                max_acceleration=_max_acceleration,
                has_deceleration_limits=True,
                max_deceleration=_max_deceleration,
            ),
        )
    return limits


# Degrees helper for readable test/example configurations
def deg(*values: float) -> list[float]:
    return [v * pi / 180.0 for v in values]
