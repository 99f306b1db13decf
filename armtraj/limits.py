"""
Per-joint motion limits keyed by joint name.

A JointLimit carries position, velocity, acceleration and deceleration bounds,
each switched on by its own flag. Deceleration is a signed (negative) value.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, fields
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class JointLimit:
    """Motion limits for a single joint. Disabled limits are unconstrained."""
    has_position_limits: bool = False
    min_position: float = 0.0
    max_position: float = 0.0
    has_velocity_limits: bool = False
    max_velocity: float = 0.0
    has_acceleration_limits: bool = False
    max_acceleration: float = 0.0
    has_deceleration_limits: bool = False
    max_deceleration: float = 0.0  # negative

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "JointLimit":
        """
        Build a limit from a flat mapping such as a parsed parameter file entry.

        A bound that is present without its has_* flag enables that flag.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown joint limit keys: {sorted(unknown)}")

        limit = cls(**data)
        if "has_position_limits" not in data and ("min_position" in data or "max_position" in data):
            limit.has_position_limits = True
        if "has_velocity_limits" not in data and "max_velocity" in data:
            limit.has_velocity_limits = True
        if "has_acceleration_limits" not in data and "max_acceleration" in data:
            limit.has_acceleration_limits = True
        if "has_deceleration_limits" not in data and "max_deceleration" in data:
            limit.has_deceleration_limits = True
        return limit


class JointLimitsContainer:
    """Ordered container of JointLimit entries, one per joint name."""

    def __init__(self):
        self._limits: dict[str, JointLimit] = {}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Mapping[str, Any]]) -> "JointLimitsContainer":
        """Build a container from {joint_name: {limit fields}}; invalid entries raise ValueError."""
        container = cls()
        for joint_name, entry in data.items():
            if not container.add_limit(joint_name, JointLimit.from_mapping(entry)):
                raise ValueError(f"Invalid joint limit for '{joint_name}'")
        return container

    def add_limit(self, joint_name: str, joint_limit: JointLimit) -> bool:
        """
        Add the limit of a joint.

        Returns False (and leaves the container unchanged) if the joint already
        has a limit or if an enabled deceleration limit is not negative.
        """
        if joint_limit.has_deceleration_limits and joint_limit.max_deceleration >= 0:
            logger.error(
                "Deceleration limit of %s must be negative, got %s",
                joint_name,
                joint_limit.max_deceleration,
            )
            return False
        if joint_name in self._limits:
            logger.error("Joint limit for %s already exists", joint_name)
            return False
        self._limits[joint_name] = joint_limit
        return True

    def has_limit(self, joint_name: str) -> bool:
        return joint_name in self._limits

    def get_limit(self, joint_name: str) -> JointLimit:
        """Return the limit of a joint; raises KeyError if it has none."""
        return self._limits[joint_name]

    def find_limit(self, joint_name: str) -> JointLimit | None:
        return self._limits.get(joint_name)

    def get_common_limit(self, joint_names: Iterable[str] | None = None) -> JointLimit:
        """
        Most restrictive limit over the given joints (all joints if None).

        A bound is enabled in the result if any contributing joint enables it.
        """
        names = list(self._limits) if joint_names is None else list(joint_names)
        common = JointLimit()
        for name in names:
            limit = self._limits.get(name)
            if limit is None:
                continue
            if limit.has_position_limits:
                if common.has_position_limits:
                    common.min_position = max(common.min_position, limit.min_position)
                    common.max_position = min(common.max_position, limit.max_position)
                else:
                    common.min_position = limit.min_position
                    common.max_position = limit.max_position
                    common.has_position_limits = True
            if limit.has_velocity_limits:
                common.max_velocity = (
                    min(common.max_velocity, limit.max_velocity)
                    if common.has_velocity_limits
                    else limit.max_velocity
                )
                common.has_velocity_limits = True
            if limit.has_acceleration_limits:
                common.max_acceleration = (
                    min(common.max_acceleration, limit.max_acceleration)
                    if common.has_acceleration_limits
                    else limit.max_acceleration
                )
                common.has_acceleration_limits = True
            if limit.has_deceleration_limits:
                # closest to zero is the most restrictive
                common.max_deceleration = (
                    max(common.max_deceleration, limit.max_deceleration)
                    if common.has_deceleration_limits
                    else limit.max_deceleration
                )
                common.has_deceleration_limits = True
        return common

    def verify_velocity_limit(self, joint_name: str, joint_velocity: float) -> bool:
        """True if |joint_velocity| is allowed (no limit means allowed)."""
        limit = self._limits.get(joint_name)
        return not (
            limit is not None
            and limit.has_velocity_limits
            and abs(joint_velocity) > limit.max_velocity
        )

    def verify_position_limit(self, joint_name: str, joint_position: float) -> bool:
        """True if joint_position lies within [min_position, max_position] (no limit means allowed)."""
        limit = self._limits.get(joint_name)
        return not (
            limit is not None
            and limit.has_position_limits
            and (joint_position < limit.min_position or joint_position > limit.max_position)
        )

    def verify_position_limits(
        self, joint_names: Sequence[str], joint_positions: Sequence[float]
    ) -> bool:
        if len(joint_names) != len(joint_positions):
            raise ValueError("joint_names and joint_positions must have the same length")
        return all(
            self.verify_position_limit(name, pos) for name, pos in zip(joint_names, joint_positions)
        )

    def __len__(self) -> int:
        return len(self._limits)

    def __contains__(self, joint_name: object) -> bool:
        return joint_name in self._limits

    def __iter__(self) -> Iterator[str]:
        return iter(self._limits)

    def items(self):
        return self._limits.items()

    def empty(self) -> bool:
        return not self._limits
