"""
Deterministic KinematicChain fake for tests.

A three-axis cartesian gantry: prismatic x/y/z joints move the tool link
without rotating it, so FK and IK are exact and closed form. A gripper
variable exists in the chain but in no planning group.
"""

from collections.abc import Mapping

import numpy as np
from spatialmath import SE3

ROOT_FRAME = "world"
GROUP_NAME = "gantry"
XY_GROUP_NAME = "xy_table"
TIP_LINK = "tool"
JOINT_NAMES = ("x_joint", "y_joint", "z_joint")
WORKSPACE = 1.5  # |coordinate| bound of the reachable box (m)


class FakeGantryChain:
    """Cartesian gantry with exact inverse kinematics inside WORKSPACE."""

    def __init__(self):
        self._groups = {
            GROUP_NAME: (JOINT_NAMES, TIP_LINK),
            XY_GROUP_NAME: (JOINT_NAMES[:2], "carriage"),
        }
        self._links = {ROOT_FRAME, "carriage", TIP_LINK}
        self.ik_calls = 0

    @property
    def root_frame(self) -> str:
        return ROOT_FRAME

    @property
    def variable_names(self) -> tuple[str, ...]:
        return JOINT_NAMES + ("gripper_joint",)

    def has_group(self, group_name: str) -> bool:
        return group_name in self._groups

    def joint_names(self, group_name: str) -> tuple[str, ...]:
        return self._groups[group_name][0]

    def has_link(self, link_name: str) -> bool:
        return link_name in self._links

    def can_solve_ik(self, group_name: str, link_name: str) -> bool:
        return group_name in self._groups and self._groups[group_name][1] == link_name

    def link_pose(self, link_name: str, joint_values: Mapping[str, float]):
        if link_name not in self._links:
            return None
        x = joint_values.get("x_joint", 0.0)
        y = joint_values.get("y_joint", 0.0)
        if link_name == ROOT_FRAME:
            return SE3()
        if link_name == "carriage":
            return SE3(x, y, 0.0)
        return SE3(x, y, joint_values.get("z_joint", 0.0))

    def solve_ik(self, group_name, link_name, pose, seed, timeout=None):
        self.ik_calls += 1
        if not self.can_solve_ik(group_name, link_name):
            return None
        if not np.allclose(pose.R, np.eye(3), atol=1e-9):
            return None
        t = np.asarray(pose.t, dtype=float)
        if np.any(np.abs(t) > WORKSPACE):
            return None
        if link_name == "carriage":
            if abs(t[2]) > 1e-9:
                return None
            return {"x_joint": float(t[0]), "y_joint": float(t[1])}
        return dict(zip(JOINT_NAMES, t.tolist()))
