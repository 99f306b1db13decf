import pytest

from armtraj.trajectory.functions import determine_and_check_sampling_time
from armtraj.trajectory.types import JointTrajectory
from armtraj.utils.errors import ErrorCode

EPSILON = 1e-4


def _trajectory(times):
    trajectory = JointTrajectory(["j1"])
    for i, t in enumerate(times):
        trajectory.add_point([0.1 * i], t)
    return trajectory


def test_uniform_steps():
    first = _trajectory([0.1, 0.2, 0.3, 0.4])
    second = _trajectory([0.0, 0.1, 0.2])
    result = determine_and_check_sampling_time(first, second, EPSILON)
    assert result.ok
    assert result.sampling_time == pytest.approx(0.1)
    assert result.error_code is ErrorCode.SUCCESS


def test_gap_in_first_trajectory():
    first = _trajectory([0.1, 0.2, 1.3, 1.4])
    second = _trajectory([0.0, 0.1, 0.2])
    ok, sampling_time, code = determine_and_check_sampling_time(first, second, EPSILON)
    assert not ok
    assert code is ErrorCode.INCONSISTENT_SAMPLING_TIME
    # period found before the violating step is kept for diagnostics
    assert sampling_time == pytest.approx(0.1)


def test_gap_in_second_trajectory():
    first = _trajectory([0.1, 0.2, 0.3])
    second = _trajectory([0.0, 0.1, 1.2, 1.3])
    assert not determine_and_check_sampling_time(first, second, EPSILON).ok


def test_period_taken_from_first_trajectory():
    first = _trajectory([0.0, 0.2, 0.4])
    second = _trajectory([0.0, 0.1, 0.2])
    ok, sampling_time, _ = determine_and_check_sampling_time(first, second, EPSILON)
    assert not ok
    assert sampling_time == pytest.approx(0.2)


def test_steps_within_epsilon():
    first = _trajectory([0.0, 0.1, 0.20005])
    second = _trajectory([0.0, 0.09995])
    assert determine_and_check_sampling_time(first, second, EPSILON).ok


@pytest.mark.parametrize("first_times", [[], [0.1]])
def test_too_few_waypoints(first_times):
    result = determine_and_check_sampling_time(_trajectory(first_times), _trajectory([0.0, 0.1]), EPSILON)
    assert not result.ok
    assert result.error_code is ErrorCode.INPUT_SIZE_MISMATCH
    assert not determine_and_check_sampling_time(
        _trajectory([0.0, 0.1]), _trajectory(first_times), EPSILON
    ).ok


def test_skip_final_interval():
    first = _trajectory([0.0, 0.1, 0.2, 0.25])
    second = _trajectory([0.0, 0.1, 0.2, 0.23])
    assert not determine_and_check_sampling_time(first, second, EPSILON).ok
    result = determine_and_check_sampling_time(first, second, EPSILON, skip_final_interval=True)
    assert result.ok
    assert result.sampling_time == pytest.approx(0.1)


def test_skip_final_interval_with_two_point_trajectory():
    # nothing left to check in the first trajectory, period comes from the second
    first = _trajectory([0.0, 0.05])
    second = _trajectory([0.0, 0.1, 0.2, 0.27])
    result = determine_and_check_sampling_time(first, second, EPSILON, skip_final_interval=True)
    assert result.ok
    assert result.sampling_time == pytest.approx(0.1)

    result = determine_and_check_sampling_time(first, first, EPSILON, skip_final_interval=True)
    assert result.error_code is ErrorCode.INPUT_SIZE_MISMATCH
