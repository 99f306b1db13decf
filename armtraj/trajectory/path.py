"""
Parametric Cartesian paths and velocity profiles.

A CartesianPath maps path length s in [0, length] to a pose. A velocity
profile maps time to path length. PathTrajectory combines both into a
time-parameterised Cartesian motion that the trajectory generator samples.
"""

from __future__ import annotations

import math
from typing import Protocol, runtime_checkable

import numpy as np
from numpy.typing import NDArray
from scipy.spatial.transform import Rotation, Slerp
from spatialmath import SE3

from armtraj import config as cfg
from armtraj.trajectory.types import CartesianTrajectory, CartesianTrajectoryPoint


@runtime_checkable
class CartesianPath(Protocol):
    """Finite continuous curve parameterised by path length."""

    @property
    def length(self) -> float: ...

    def pose(self, s: float) -> SE3: ...

    def twist(self, s: float, sd: float) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Linear and angular velocity at s for path speed sd."""
        ...


@runtime_checkable
class VelocityProfile(Protocol):
    """Monotonic path length over time, from 0 to distance."""

    @property
    def distance(self) -> float: ...

    @property
    def duration(self) -> float: ...

    def position(self, t: float) -> float: ...

    def velocity(self, t: float) -> float: ...


class LinearPath:
    """
    Straight line between two poses with SLERP orientation.

    The path length is the larger of the translation distance and
    eq_radius * rotation angle, so pure rotations still have a length.
    """

    def __init__(self, start: SE3, end: SE3, eq_radius: float = 1.0):
        if eq_radius <= 0:
            raise ValueError("eq_radius must be positive")
        self.start = start
        self.end = end
        self._p0 = np.array(start.t, dtype=float)
        self._dp = np.array(end.t, dtype=float) - self._p0
        self._rotvec = Rotation.from_matrix(end.R @ start.R.T).as_rotvec()

        translation = float(np.linalg.norm(self._dp))
        angle = float(np.linalg.norm(self._rotvec))
        self._length = max(translation, eq_radius * angle)

        key_rots = Rotation.from_matrix(np.stack([start.R, end.R]))
        self._slerp = Slerp(np.array([0.0, 1.0]), key_rots)

    @property
    def length(self) -> float:
        return self._length

    def _fraction(self, s: float) -> float:
        if self._length <= 0.0:
            return 0.0
        return min(max(s / self._length, 0.0), 1.0)

    def pose(self, s: float) -> SE3:
        f = self._fraction(s)
        position = self._p0 + f * self._dp
        R = self._slerp(np.array([f])).as_matrix()[0]
        return SE3.Rt(R, position)

    def twist(self, s: float, sd: float) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        if self._length <= 0.0:
            return np.zeros(3), np.zeros(3)
        scale = sd / self._length
        return self._dp * scale, self._rotvec * scale


def _trapezoid_timings(
    distance: float, v_max: float, a_max: float
) -> tuple[float, float, float, float, bool]:
    """
    Compute trapezoid or triangular profile timing.

    Returns: (T, t_a, t_c, v_peak, triangular)
      - T: total time
      - t_a: accel time
      - t_c: constant velocity time (0 for triangular)
      - v_peak: peak velocity reached
      - triangular: True if triangular profile (no cruise), else False
    """
    if distance <= 0 or v_max <= 0 or a_max <= 0:
        return 0.0, 0.0, 0.0, 0.0, True

    t_a = v_max / a_max
    s_a = 0.5 * a_max * t_a**2  # distance covered during accel

    if 2 * s_a < distance:
        # Trapezoidal: accel, cruise, decel
        s_c = distance - 2 * s_a
        t_c = s_c / v_max
        T = 2 * t_a + t_c
        return T, t_a, t_c, v_max, False
    else:
        # Triangular: peak velocity determined by distance
        v_peak = math.sqrt(a_max * distance)
        t_a = v_peak / a_max
        T = 2 * t_a
        return T, t_a, 0.0, v_peak, True


class TrapezoidalProfile:
    """Trapezoidal (or triangular, if v_max is not reached) velocity profile."""

    def __init__(self, distance: float, max_velocity: float, max_acceleration: float):
        if distance < 0:
            raise ValueError("distance must be non-negative")
        if max_velocity <= 0 or max_acceleration <= 0:
            raise ValueError("max_velocity and max_acceleration must be positive")
        self._distance = float(distance)
        self.max_velocity = float(max_velocity)
        self.max_acceleration = float(max_acceleration)
        (
            self._duration,
            self.t_accel,
            self.t_cruise,
            self.v_peak,
            self.triangular,
        ) = _trapezoid_timings(self._distance, self.max_velocity, self.max_acceleration)

    @property
    def distance(self) -> float:
        return self._distance

    @property
    def duration(self) -> float:
        return self._duration

    def position(self, t: float) -> float:
        if t <= 0.0 or self._duration <= 0.0:
            return 0.0
        if t >= self._duration:
            return self._distance
        a = self.max_acceleration
        s_a = 0.5 * a * self.t_accel**2
        if t <= self.t_accel:
            return 0.5 * a * t**2
        if t <= self.t_accel + self.t_cruise:
            return s_a + self.v_peak * (t - self.t_accel)
        td = t - (self.t_accel + self.t_cruise)
        return s_a + self.v_peak * self.t_cruise + self.v_peak * td - 0.5 * a * td**2

    def velocity(self, t: float) -> float:
        if t <= 0.0 or t >= self._duration:
            return 0.0
        if t <= self.t_accel:
            return self.max_acceleration * t
        if t <= self.t_accel + self.t_cruise:
            return self.v_peak
        td = t - (self.t_accel + self.t_cruise)
        return self.v_peak - self.max_acceleration * td


class QuinticProfile:
    """
    Quintic time-scaling with zero velocity and acceleration at endpoints.
    Uses S(τ) = 10τ^3 - 15τ^4 + 6τ^5 scaled to distance over duration.
    """

    def __init__(self, distance: float, duration: float):
        if distance < 0:
            raise ValueError("distance must be non-negative")
        if duration < 0:
            raise ValueError("duration must be non-negative")
        self._distance = float(distance)
        self._duration = float(duration) if distance > 0 else 0.0

    @property
    def distance(self) -> float:
        return self._distance

    @property
    def duration(self) -> float:
        return self._duration

    def position(self, t: float) -> float:
        if self._duration <= 0.0:
            return self._distance
        tau = min(max(t / self._duration, 0.0), 1.0)
        return self._distance * (10 * tau**3 - 15 * tau**4 + 6 * tau**5)

    def velocity(self, t: float) -> float:
        if self._duration <= 0.0 or t <= 0.0 or t >= self._duration:
            return 0.0
        tau = t / self._duration
        return self._distance / self._duration * (30 * tau**2 - 60 * tau**3 + 30 * tau**4)


class PathTrajectory:
    """A CartesianPath traversed with a VelocityProfile."""

    def __init__(self, path: CartesianPath, profile: VelocityProfile):
        if not math.isclose(profile.distance, path.length, rel_tol=1e-9, abs_tol=1e-12):
            raise ValueError(
                f"Profile distance {profile.distance} does not match path length {path.length}"
            )
        self.path = path
        self.profile = profile

    @classmethod
    def trapezoidal(
        cls, path: CartesianPath, max_velocity: float, max_acceleration: float
    ) -> "PathTrajectory":
        return cls(path, TrapezoidalProfile(path.length, max_velocity, max_acceleration))

    @property
    def duration(self) -> float:
        return self.profile.duration

    def pose(self, t: float) -> SE3:
        return self.path.pose(self.profile.position(t))

    def twist(self, t: float) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        return self.path.twist(self.profile.position(t), self.profile.velocity(t))


def time_samples(duration: float, sampling_time: float) -> list[float]:
    """
    Sample times 0, dt, 2*dt, ... strictly before duration, then duration itself.

    The last interval may be shorter than sampling_time.
    """
    if sampling_time <= 0:
        raise ValueError("sampling_time must be positive")
    samples: list[float] = []
    k = 0
    while k * sampling_time < duration - cfg.TIME_SAMPLE_EPSILON:
        samples.append(k * sampling_time)
        k += 1
    samples.append(float(duration))
    return samples


def sample_cartesian_trajectory(
    trajectory: PathTrajectory,
    group_name: str,
    link_name: str,
    sampling_time: float,
    frame_id: str | None = None,
) -> CartesianTrajectory:
    """
    Discretise a PathTrajectory into a CartesianTrajectory.

    The start (t = 0) is the initial state of the motion and is not part of
    the result; the first point is at min(sampling_time, duration).
    """
    cart = CartesianTrajectory(group_name=group_name, link_name=link_name, frame_id=frame_id)
    for t in time_samples(trajectory.duration, sampling_time):
        if t <= 0.0:
            continue
        v, w = trajectory.twist(t)
        cart.points.append(
            CartesianTrajectoryPoint(
                pose=trajectory.pose(t),
                linear_velocity=np.asarray(v, dtype=float),
                angular_velocity=np.asarray(w, dtype=float),
                time_from_start=t,
            )
        )
    return cart
