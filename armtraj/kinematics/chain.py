"""
Kinematic chain capability interface and its roboticstoolbox implementation.

The trajectory functions only talk to a KinematicChain: active joint names per
planning group, forward kinematics of a named link and single-solution inverse
kinematics for a link. RoboticsToolboxChain wraps a roboticstoolbox Robot.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import numpy as np
from numpy.typing import NDArray
from roboticstoolbox import Robot
from spatialmath import SE3

from armtraj import config as cfg
from armtraj.kinematics.ik import unwrap_angles

logger = logging.getLogger(__name__)

# (group_name, joint_values) -> True if the configuration is in self collision
CollisionChecker = Callable[[str, Mapping[str, float]], bool]


@runtime_checkable
class KinematicChain(Protocol):
    """Read-only kinematic model with per-group IK capability."""

    @property
    def root_frame(self) -> str: ...

    @property
    def variable_names(self) -> Sequence[str]: ...

    def has_group(self, group_name: str) -> bool: ...

    def joint_names(self, group_name: str) -> Sequence[str]: ...

    def has_link(self, link_name: str) -> bool: ...

    def can_solve_ik(self, group_name: str, link_name: str) -> bool: ...

    def link_pose(self, link_name: str, joint_values: Mapping[str, float]) -> SE3 | None: ...

    def solve_ik(
        self,
        group_name: str,
        link_name: str,
        pose: SE3,
        seed: Mapping[str, float],
        timeout: float | None = None,
    ) -> dict[str, float] | None: ...


@dataclass(frozen=True)
class PlanningGroup:
    """Named subset of chain joints driven as one unit, solved for tip_link."""
    name: str
    joint_names: tuple[str, ...]
    tip_link: str


class RoboticsToolboxChain:
    """
    KinematicChain backed by a roboticstoolbox Robot.

    Parameters
    ----------
    robot : Robot
        Serial chain model (from URDF, DH or hand-built Links)
    groups : Sequence[PlanningGroup]
        Planning groups defined on the robot's joints
    joint_names : Sequence[str], optional
        Name of each joint variable in joint-index order. Defaults to the names
        of the jointed links.
    """

    def __init__(
        self,
        robot: Robot,
        groups: Sequence[PlanningGroup],
        joint_names: Sequence[str] | None = None,
    ):
        self._robot = robot
        if joint_names is None:
            joint_links = sorted(
                (link for link in robot.links if link.isjoint), key=lambda link: link.jindex
            )
            joint_names = [link.name for link in joint_links]
        if len(joint_names) != robot.n:
            raise ValueError(
                f"Expected {robot.n} joint names for robot '{robot.name}', got {len(joint_names)}"
            )
        self._variable_names: tuple[str, ...] = tuple(joint_names)
        self._index = {name: i for i, name in enumerate(self._variable_names)}

        self._groups: dict[str, PlanningGroup] = {}
        for group in groups:
            unknown = [j for j in group.joint_names if j not in self._index]
            if unknown:
                raise ValueError(f"Group '{group.name}' references unknown joints {unknown}")
            if not self.has_link(group.tip_link):
                raise ValueError(f"Group '{group.name}' tip link '{group.tip_link}' is not in the robot")
            self._groups[group.name] = group

    @property
    def robot(self) -> Robot:
        return self._robot

    @property
    def root_frame(self) -> str:
        return self._robot.base_link.name

    @property
    def variable_names(self) -> tuple[str, ...]:
        return self._variable_names

    def has_group(self, group_name: str) -> bool:
        return group_name in self._groups

    def joint_names(self, group_name: str) -> tuple[str, ...]:
        return self._groups[group_name].joint_names

    def has_link(self, link_name: str) -> bool:
        return link_name in self._robot.link_dict

    def _full_q(self, joint_values: Mapping[str, float]) -> NDArray[np.float64]:
        # unspecified variables keep their default (zero) value
        q = np.zeros(len(self._variable_names), dtype=np.float64)
        for name, value in joint_values.items():
            idx = self._index.get(name)
            if idx is not None:
                q[idx] = value
        return q

    @staticmethod
    def _joint_indices(ets) -> list[int]:
        return [et.jindex for et in ets if et.isjoint]

    def can_solve_ik(self, group_name: str, link_name: str) -> bool:
        """IK is available if the link is moved by exactly the group's joints."""
        if group_name not in self._groups or not self.has_link(link_name):
            return False
        ets = self._robot.ets(end=link_name)
        moving = {self._variable_names[j] for j in self._joint_indices(ets)}
        return moving == set(self._groups[group_name].joint_names)

    def link_pose(self, link_name: str, joint_values: Mapping[str, float]) -> SE3 | None:
        if not self.has_link(link_name):
            logger.error("The target link %s is not known by robot '%s'", link_name, self._robot.name)
            return None
        ets = self._robot.ets(end=link_name)
        q = self._full_q(joint_values)[self._joint_indices(ets)]
        try:
            T = ets.fkine(q)
        except (ValueError, TypeError) as e:
            logger.error(f"Forward kinematics of {link_name} failed: {e}")
            return None
        return T if isinstance(T, SE3) else SE3(T, check=False)

    def solve_ik(
        self,
        group_name: str,
        link_name: str,
        pose: SE3,
        seed: Mapping[str, float],
        timeout: float | None = None,
    ) -> dict[str, float] | None:
        """
        Single IK solution for link_name near seed, or None.

        Uses Levenberg-Marquardt with Sugihara damping. The solution is
        unwrapped toward the seed when that keeps it inside the joint limits.
        A solve that exceeds timeout is reported as a failure.
        """
        if not self.can_solve_ik(group_name, link_name):
            return None

        ets = self._robot.ets(end=link_name)
        jidx = self._joint_indices(ets)
        q_seed = self._full_q(seed)[jidx]

        start = time.perf_counter()
        result = ets.ik_LM(
            pose,
            q0=q_seed,
            ilimit=cfg.IK_ILIMIT,
            slimit=cfg.IK_SLIMIT,
            tol=cfg.IK_TOL,
            joint_limits=True,
            k=0.0,
            method="sugihara",
        )
        q = np.asarray(result[0], dtype=np.float64)
        success = result[1] > 0
        iterations = result[2]
        searches = result[3]
        residual = result[4]
        elapsed = time.perf_counter() - start

        if not success:
            logger.debug(
                "IK for %s did not converge (iterations=%s, searches=%s, residual=%.3g)",
                link_name,
                iterations,
                searches,
                residual,
            )
            return None
        if timeout is not None and timeout > 0 and elapsed > timeout:
            logger.warning("IK for %s exceeded timeout (%.3fs > %.3fs)", link_name, elapsed, timeout)
            return None

        revolute = np.array([et.isrotation for et in ets if et.isjoint], dtype=bool)
        q_unwrapped = np.where(revolute, unwrap_angles(q, q_seed), q)
        qlim = ets.qlim
        if np.all((q_unwrapped >= qlim[0, :]) & (q_unwrapped <= qlim[1, :])):
            q = q_unwrapped

        return {self._variable_names[j]: float(value) for j, value in zip(jidx, q)}
