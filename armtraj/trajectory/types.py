"""
Trajectory and robot state containers.

All containers are created per call and owned by the caller. Joint vectors are
NumPy arrays ordered by the trajectory's (or chain's) joint names.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import ArrayLike, NDArray
from spatialmath import SE3

from armtraj.kinematics.chain import KinematicChain


@dataclass
class JointTrajectoryPoint:
    positions: NDArray[np.float64]
    velocities: NDArray[np.float64] | None = None
    accelerations: NDArray[np.float64] | None = None
    time_from_start: float = 0.0


class JointTrajectory:
    """
    Time-parameterised joint trajectory.

    Points are appended in order; time_from_start must strictly increase and
    every vector must match the number of joints.
    """

    def __init__(self, joint_names: Sequence[str] = ()):
        self.joint_names: tuple[str, ...] = tuple(joint_names)
        self.points: list[JointTrajectoryPoint] = []

    def add_point(
        self,
        positions: ArrayLike,
        time_from_start: float,
        velocities: ArrayLike | None = None,
        accelerations: ArrayLike | None = None,
    ) -> JointTrajectoryPoint:
        n = len(self.joint_names)
        pos = np.asarray(positions, dtype=np.float64).reshape(-1)
        vel = None if velocities is None else np.asarray(velocities, dtype=np.float64).reshape(-1)
        acc = None if accelerations is None else np.asarray(accelerations, dtype=np.float64).reshape(-1)
        for label, vec in (("positions", pos), ("velocities", vel), ("accelerations", acc)):
            if vec is not None and vec.shape[0] != n:
                raise ValueError(f"Expected {n} {label}, got {vec.shape[0]}")
        if self.points and time_from_start <= self.points[-1].time_from_start:
            raise ValueError(
                f"time_from_start must increase ({time_from_start} <= {self.points[-1].time_from_start})"
            )
        point = JointTrajectoryPoint(pos, vel, acc, float(time_from_start))
        self.points.append(point)
        return point

    def add_point_after(
        self,
        positions: ArrayLike,
        duration_from_previous: float,
        velocities: ArrayLike | None = None,
        accelerations: ArrayLike | None = None,
    ) -> JointTrajectoryPoint:
        """Append a point duration_from_previous after the last one (or after t=0)."""
        last = self.points[-1].time_from_start if self.points else 0.0
        return self.add_point(positions, last + duration_from_previous, velocities, accelerations)

    def time_from_start(self) -> NDArray[np.float64]:
        return np.array([p.time_from_start for p in self.points], dtype=np.float64)

    def durations(self) -> NDArray[np.float64]:
        """Time between consecutive points (length = number of points - 1)."""
        return np.diff(self.time_from_start())

    @property
    def duration(self) -> float:
        return self.points[-1].time_from_start if self.points else 0.0

    def positions(self) -> NDArray[np.float64]:
        """All positions as an array of shape (N, n_joints)."""
        return np.array([p.positions for p in self.points], dtype=np.float64).reshape(
            -1, len(self.joint_names)
        )

    def point_values(self, index: int) -> dict[str, float]:
        return dict(zip(self.joint_names, self.points[index].positions.tolist()))

    def clear(self) -> None:
        self.points.clear()

    def empty(self) -> bool:
        return not self.points

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[JointTrajectoryPoint]:
        return iter(self.points)

    def __getitem__(self, index: int) -> JointTrajectoryPoint:
        return self.points[index]


@dataclass
class CartesianTrajectoryPoint:
    pose: SE3 = field(default_factory=SE3)
    linear_velocity: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))
    angular_velocity: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))
    time_from_start: float = 0.0


@dataclass
class CartesianTrajectory:
    """Pre-sampled Cartesian trajectory of link_name; frame_id None means the chain root frame."""
    group_name: str
    link_name: str
    points: list[CartesianTrajectoryPoint] = field(default_factory=list)
    frame_id: str | None = None


class RobotState:
    """
    Position, velocity and acceleration of every chain variable at one instant.

    Unset values are zero. Not thread-safe; share between threads only with
    external locking.
    """

    def __init__(self, chain: KinematicChain):
        self._chain = chain
        self._names: tuple[str, ...] = tuple(chain.variable_names)
        self._index = {name: i for i, name in enumerate(self._names)}
        n = len(self._names)
        self.positions = np.zeros(n, dtype=np.float64)
        self.velocities = np.zeros(n, dtype=np.float64)
        self.accelerations = np.zeros(n, dtype=np.float64)

    @property
    def chain(self) -> KinematicChain:
        return self._chain

    @property
    def variable_names(self) -> tuple[str, ...]:
        return self._names

    def _group_indices(self, group_name: str) -> list[int]:
        return [self._index[name] for name in self._chain.joint_names(group_name)]

    def _set_group(self, target: NDArray[np.float64], group_name: str, values: ArrayLike) -> None:
        idx = self._group_indices(group_name)
        arr = np.asarray(values, dtype=np.float64).reshape(-1)
        if arr.shape[0] != len(idx):
            raise ValueError(f"Group {group_name} has {len(idx)} joints, got {arr.shape[0]} values")
        target[idx] = arr

    def set_joint_group_positions(self, group_name: str, values: ArrayLike) -> None:
        self._set_group(self.positions, group_name, values)

    def set_joint_group_velocities(self, group_name: str, values: ArrayLike) -> None:
        self._set_group(self.velocities, group_name, values)

    def set_joint_group_accelerations(self, group_name: str, values: ArrayLike) -> None:
        self._set_group(self.accelerations, group_name, values)

    def joint_group_positions(self, group_name: str) -> NDArray[np.float64]:
        return self.positions[self._group_indices(group_name)].copy()

    def joint_group_velocities(self, group_name: str) -> NDArray[np.float64]:
        return self.velocities[self._group_indices(group_name)].copy()

    def joint_group_accelerations(self, group_name: str) -> NDArray[np.float64]:
        return self.accelerations[self._group_indices(group_name)].copy()

    def set_variable_positions(self, joint_values: Mapping[str, float]) -> None:
        """Set positions by name; names outside the chain raise KeyError."""
        for name, value in joint_values.items():
            self.positions[self._index[name]] = value

    def variable_position(self, name: str) -> float:
        return float(self.positions[self._index[name]])

    def variable_positions(self) -> dict[str, float]:
        return dict(zip(self._names, self.positions.tolist()))

    def copy(self) -> "RobotState":
        other = RobotState(self._chain)
        other.positions[:] = self.positions
        other.velocities[:] = self.velocities
        other.accelerations[:] = self.accelerations
        return other

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RobotState):
            return NotImplemented
        return (
            self._names == other._names
            and np.array_equal(self.positions, other.positions)
            and np.array_equal(self.velocities, other.velocities)
            and np.array_equal(self.accelerations, other.accelerations)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"RobotState(positions={self.positions.tolist()}, velocities={self.velocities.tolist()}, "
            f"accelerations={self.accelerations.tolist()})"
        )
