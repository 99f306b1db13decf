"""
Error taxonomy and exception types for the trajectory pipeline.

Public entry points report failures as ErrorCode values; the exceptions are
only raised when a caller opts in (e.g. TrajectoryGenerationResult.raise_for_error).
"""

from enum import Enum


class ErrorCode(Enum):
    """Result codes surfaced by kinematics and trajectory functions."""
    SUCCESS = 0
    UNKNOWN_GROUP = 1
    UNKNOWN_LINK = 2
    FRAME_MISMATCH = 3
    IK_FAILURE = 4  # no solution or timeout
    LIMIT_VIOLATION = 5  # velocity / acceleration / deceleration
    DEGENERATE_SAMPLING_DURATION = 6
    SELF_COLLISION = 7
    INCONSISTENT_SAMPLING_TIME = 8
    INPUT_SIZE_MISMATCH = 9


# Codes reported as IKError by raise_for_error()
IK_ERROR_CODES = frozenset(
    {
        ErrorCode.UNKNOWN_GROUP,
        ErrorCode.UNKNOWN_LINK,
        ErrorCode.FRAME_MISMATCH,
        ErrorCode.IK_FAILURE,
    }
)


class IKError(RuntimeError):
    """Inverse kinematics failure (no solution, unknown group/link, wrong frame)."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.IK_FAILURE):
        self.original_message = message
        self.code = code
        super().__init__(f"IK ERROR: {message}")

    def __str__(self):
        return f"IK ERROR: {self.original_message}"


class TrajectoryPlanningError(RuntimeError):
    """Trajectory generation/verification failure."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.LIMIT_VIOLATION):
        self.original_message = message
        self.code = code
        super().__init__(f"Trajectory Planning Error: {message}")

    def __str__(self):
        return f"Trajectory Planning Error: {self.original_message}"
