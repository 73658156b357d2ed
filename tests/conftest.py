"""Shared pytest fixtures for motionprof tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from motionprof.core.commands.stack import CommandStack
from motionprof.core.document.colors import ColorSequence
from motionprof.core.document.document import MotionDocument
from motionprof.core.profiles.models import MotionNode, ProfileConstraints
from motionprof.core.profiles.profile import MotorProfile

# ============================================================================
# Profile Fixtures
# ============================================================================


@pytest.fixture
def default_constraints() -> ProfileConstraints:
    """Default constraints: range [-100, 100], max slope 1000."""
    return ProfileConstraints()


@pytest.fixture
def empty_profile() -> MotorProfile:
    """Profile with default constraints and no nodes."""
    return MotorProfile("pan", "#c83232")


@pytest.fixture
def ramp_profile() -> MotorProfile:
    """Profile ramping from 0 to 50 over 2 seconds."""
    profile = MotorProfile("pan", "#c83232")
    profile.replace_nodes([MotionNode.of(0, 0), MotionNode.of(2000, 50)])
    return profile


@pytest.fixture
def three_node_profile() -> MotorProfile:
    """Profile with nodes at t=0, 1000, 2000."""
    profile = MotorProfile("tilt", "#32c832")
    profile.replace_nodes(
        [MotionNode.of(0, 0), MotionNode.of(1000, 40), MotionNode.of(2000, -20)]
    )
    return profile


# ============================================================================
# Document Fixtures
# ============================================================================


@pytest.fixture
def document() -> MotionDocument:
    """Empty document with a fixed color seed."""
    return MotionDocument(colors=ColorSequence(seed=1))


@pytest.fixture
def two_motor_document(document: MotionDocument) -> MotionDocument:
    """Document with motors "pan" and "tilt", each holding two nodes."""
    pan = document.add_motor("pan")
    pan.replace_nodes([MotionNode.of(0, 0), MotionNode.of(2000, 50)])
    tilt = document.add_motor(
        "tilt", constraints=ProfileConstraints(y_min=-45, y_max=45, max_slope=0.5)
    )
    tilt.replace_nodes([MotionNode.of(0, -10), MotionNode.of(1000, 10)])
    return document


@pytest.fixture
def stack() -> CommandStack:
    """Unlimited command stack."""
    return CommandStack()


# ============================================================================
# Path Fixtures
# ============================================================================


@pytest.fixture
def fixtures_dir() -> Path:
    """Get test fixtures directory."""
    return Path(__file__).parent / "fixtures"
