"""
Central configuration for armtraj tunables and shared constants.
"""

import logging
import os

TRACE: int = 5
logging.addLevelName(TRACE, "TRACE")
# Add Logger.trace if missing
if not hasattr(logging.Logger, "trace"):

    def _trace(self, msg, *args, **kwargs):
        if self.isEnabledFor(TRACE):
            self._log(TRACE, msg, args, **kwargs)

    logging.Logger.trace = _trace  # type: ignore[attr-defined]
    logging.TRACE = TRACE  # type: ignore[attr-defined]

# Sample durations at or below this are treated as zero (seconds).
SAMPLE_DURATION_EPSILON: float = 10e-6

# Keeps the final path sample from being added twice (seconds).
TIME_SAMPLE_EPSILON: float = 10e-6

# Default sampling period for path sampling (seconds).
DEFAULT_SAMPLING_TIME_S: float = float(os.getenv("ARMTRAJ_SAMPLING_TIME_S", "0.01"))

# Inverse kinematics solver settings (roboticstoolbox ik_LM)
IK_TIMEOUT_S: float = float(os.getenv("ARMTRAJ_IK_TIMEOUT_S", "0.5"))
IK_TOL: float = float(os.getenv("ARMTRAJ_IK_TOL", "1e-10"))
IK_ILIMIT: int = int(os.getenv("ARMTRAJ_IK_ILIMIT", "60"))
IK_SLIMIT: int = int(os.getenv("ARMTRAJ_IK_SLIMIT", "10"))

# Default tolerances for state comparison and sampling time checks
STATE_EPSILON: float = 1e-4
SAMPLING_TIME_EPSILON: float = 1e-4
