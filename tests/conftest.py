"""
Pytest configuration and shared fixtures for armtraj tests.

Provides kinematic chains (the reference prbt model and a deterministic
gantry fake), matching joint limits and test markers used across the suite.
"""

import os
import sys
import logging

import pytest

# Add the parent directory to Python path so we can import the package
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from armtraj.limits import JointLimit, JointLimitsContainer
from armtraj.models import prbt
from tests.utils.fake_chain import JOINT_NAMES as GANTRY_JOINT_NAMES
from tests.utils.fake_chain import FakeGantryChain

logger = logging.getLogger(__name__)


def make_fake_limits(joint_names) -> JointLimitsContainer:
    """Limits with position +-2.967, velocity 1, acceleration 0.5, deceleration -1."""
    container = JointLimitsContainer()
    for name in joint_names:
        container.add_limit(
            name,
            JointLimit(
                has_position_limits=True,
                min_position=-2.967,
                max_position=2.967,
                has_velocity_limits=True,
                max_velocity=1.0,
                has_acceleration_limits=True,
                max_acceleration=0.5,
                has_deceleration_limits=True,
                max_deceleration=-1.0,
            ),
        )
    return container


# ============================================================================
# KINEMATIC CHAIN FIXTURES
# ============================================================================

@pytest.fixture(scope="session")
def prbt_chain():
    """Reference 6-axis chain built with roboticstoolbox (built once per session)."""
    return prbt.make_chain()


@pytest.fixture(scope="session")
def prbt_tcp_chain():
    """Reference chain with a 0.1 m tool between flange and TCP."""
    return prbt.make_chain(tool_offset=0.1)


@pytest.fixture
def gantry_chain():
    """Fresh gantry fake; counts IK calls per test."""
    return FakeGantryChain()


# ============================================================================
# JOINT LIMIT FIXTURES
# ============================================================================

@pytest.fixture
def prbt_limits():
    return prbt.make_joint_limits()


@pytest.fixture
def fake_limits():
    """Fake limits for the six prbt joints."""
    return make_fake_limits(prbt.JOINT_NAMES)


@pytest.fixture
def gantry_limits():
    return make_fake_limits(GANTRY_JOINT_NAMES)


# ============================================================================
# PYTEST CONFIGURATION HOOKS
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components in isolation"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that run the roboticstoolbox IK solver many times"
    )


def pytest_sessionstart(session):
    """Called after the Session object has been created."""
    logger.info("Starting armtraj test session")


def pytest_sessionfinish(session, exitstatus):
    """Called after whole test run finished."""
    logger.info(f"armtraj test session finished with exit status: {exitstatus}")
