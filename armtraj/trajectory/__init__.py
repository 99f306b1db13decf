from .path import (
    CartesianPath,
    LinearPath,
    PathTrajectory,
    QuinticProfile,
    TrapezoidalProfile,
    VelocityProfile,
    sample_cartesian_trajectory,
)
from .validation import check_joint_space_continuity, check_joint_trajectory

__all__ = [
    "CartesianPath",
    "LinearPath",
    "PathTrajectory",
    "QuinticProfile",
    "TrapezoidalProfile",
    "VelocityProfile",
    "sample_cartesian_trajectory",
    "check_joint_space_continuity",
    "check_joint_trajectory",
]
