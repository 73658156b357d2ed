"""Shared pytest fixtures for profile tests."""

from __future__ import annotations

import pytest

from motionprof.core.profiles.models import MotionNode


@pytest.fixture
def ramp_nodes() -> list[MotionNode]:
    """Two nodes ramping from 0 to 50 over 2000 ms."""
    return [MotionNode.of(0, 0), MotionNode.of(2000, 50)]


@pytest.fixture
def step_nodes() -> list[MotionNode]:
    """Flat at 0, instantaneous step to 100 at t=100, back down to 0 at t=200."""
    return [
        MotionNode.of(0, 0),
        MotionNode.of(100, 0),
        MotionNode.of(100, 100),
        MotionNode.of(200, 0),
    ]
