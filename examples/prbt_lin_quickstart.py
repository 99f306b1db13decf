"""
LIN motion quickstart for armtraj.
- Builds the reference prbt chain and its nominal joint limits
- Plans a 10 cm straight line of the flange with a trapezoidal profile
- Converts it into a joint trajectory and checks it against the limits

Run from the repository root:
    python examples/prbt_lin_quickstart.py
"""

import logging

from spatialmath import SE3

from armtraj import ErrorCode, compute_link_fk, generate_joint_trajectory
from armtraj.config import DEFAULT_SAMPLING_TIME_S
from armtraj.models import prbt
from armtraj.trajectory import LinearPath, PathTrajectory, check_joint_trajectory

MAX_VELOCITY = 0.2  # m/s
MAX_ACCELERATION = 0.5  # m/s^2


def main() -> None:
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    chain = prbt.make_chain()
    limits = prbt.make_joint_limits()

    q_start = dict(zip(prbt.JOINT_NAMES, prbt.deg(0, 40, -45, 0, -60, 0)))
    start = compute_link_fk(chain, prbt.GROUP_NAME, prbt.FLANGE_LINK, q_start)
    goal = SE3(0.1, 0.0, 0.0) * start
    print("start xyz:", start.t)
    print("goal xyz:", goal.t)

    trajectory = PathTrajectory.trapezoidal(LinearPath(start, goal), MAX_VELOCITY, MAX_ACCELERATION)
    result = generate_joint_trajectory(
        chain,
        limits,
        trajectory,
        prbt.GROUP_NAME,
        prbt.FLANGE_LINK,
        q_start,
        DEFAULT_SAMPLING_TIME_S,
    )
    print(f"generation: {result.error_code.name} ({len(result.trajectory)} points)")
    if result.error_code is not ErrorCode.SUCCESS:
        raise SystemExit(1)

    print("duration:", result.trajectory.duration)
    print("final joints:", result.trajectory.point_values(-1))
    print("within limits:", check_joint_trajectory(result.trajectory, limits))
    raise SystemExit(0)


if __name__ == "__main__":
    main()
