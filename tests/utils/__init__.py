"""
Test utilities package.

Provides a deterministic kinematic chain fake for the armtraj tests.
"""

from .fake_chain import FakeGantryChain

__all__ = [
    "FakeGantryChain",
]
