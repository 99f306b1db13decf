"""
Tests for verify_sample_joint_limits with limits velocity 1, acceleration 0.5,
deceleration -1 on every prbt joint.
"""

import pytest

from armtraj.limits import JointLimit, JointLimitsContainer
from armtraj.trajectory.functions import check_sample_joint_limits, verify_sample_joint_limits
from armtraj.utils.errors import ErrorCode

J = "prbt_joint_1"


def _verify(limits, p_last, v_last, p_cur, d_last=1.0, d_cur=1.0):
    return verify_sample_joint_limits({J: p_last}, {J: v_last}, {J: p_cur}, d_last, d_cur, limits)


@pytest.mark.parametrize("duration_current", [0.0, 1e-7, 9.9e-7, 1e-5])
def test_small_sample_duration_fails(fake_limits, duration_current):
    assert not _verify(fake_limits, 0.0, 0.0, 0.0, d_cur=duration_current)
    code = check_sample_joint_limits({J: 0.0}, {J: 0.0}, {J: 0.0}, 1.0, duration_current, fake_limits)
    assert code is ErrorCode.DEGENERATE_SAMPLING_DURATION


def test_within_limits(fake_limits):
    assert _verify(fake_limits, 0.0, 0.0, 0.4)
    assert _verify(fake_limits, 0.0, 0.8, 1.0)


def test_velocity_violation(fake_limits):
    assert not _verify(fake_limits, 0.0, 1.0, 1.1)
    assert not _verify(fake_limits, 0.0, -1.0, -1.1)
    code = check_sample_joint_limits({J: 0.0}, {J: 1.0}, {J: 1.1}, 1.0, 1.0, fake_limits)
    assert code is ErrorCode.LIMIT_VIOLATION


def test_joint_without_limit_is_unconstrained(fake_limits):
    assert verify_sample_joint_limits(
        {"free_joint": 0.0}, {"free_joint": 0.0}, {"free_joint": 50.0}, 1.0, 1.0, fake_limits
    )


def test_acceleration_violation(fake_limits):
    # v = 0.6, a = 0.6 while speeding up
    assert not _verify(fake_limits, 0.0, 0.0, 0.6)


def test_deceleration_violation(fake_limits):
    # v = 0.1 from 0.9, a = -1.6 while slowing down
    assert not _verify(fake_limits, 0.0, 0.9, 0.05, d_last=0.5, d_cur=0.5)
    # same change over twice the time stays within deceleration -1
    assert _verify(fake_limits, 0.0, 0.9, 0.1)


def test_deceleration_limit_does_not_apply_when_speeding_up(fake_limits):
    # a = 0.8 would pass the deceleration limit but exceeds the acceleration limit
    assert not _verify(fake_limits, 0.0, 0.1, 0.9)


def test_negative_direction_uses_speed_magnitude(fake_limits):
    # speeding up toward negative positions: a = -0.6 checked against acceleration 0.5
    assert not _verify(fake_limits, 0.0, -0.2, -0.8)
    # slowing down from negative velocity: a = 0.8 checked against deceleration -1
    assert _verify(fake_limits, 0.0, -0.9, -0.1)


def test_disabled_flags():
    limits = JointLimitsContainer()
    limits.add_limit(J, JointLimit(has_velocity_limits=True, max_velocity=1.0))
    assert _verify(limits, 0.0, 0.0, 0.9)

    limits = JointLimitsContainer()
    limits.add_limit(J, JointLimit(has_acceleration_limits=True, max_acceleration=0.5))
    assert _verify(limits, 0.0, 0.0, 0.4)
    assert _verify(limits, 0.0, 0.9, 0.0)


def test_missing_previous_position(fake_limits):
    code = check_sample_joint_limits({}, {}, {J: 0.1}, 1.0, 1.0, fake_limits)
    assert code is ErrorCode.INPUT_SIZE_MISMATCH
    assert not verify_sample_joint_limits({}, {}, {J: 0.1}, 1.0, 1.0, fake_limits)


def test_missing_previous_velocity_skips_acceleration(fake_limits):
    assert verify_sample_joint_limits({J: 0.0}, {}, {J: 0.9}, 1.0, 1.0, fake_limits)
