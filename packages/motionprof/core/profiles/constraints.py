"""Constraint checks and the repair sweep.

Pure functions over node sequences; MotorProfile wraps them with state and
notifications.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from motionprof.core.profiles.models import MotionNode, ProfileConstraints
from motionprof.core.utils.math import EPSILON, TIME_EPSILON, VALUE_EPSILON, clamp


def is_node_valid(node: MotionNode, constraints: ProfileConstraints) -> bool:
    """Basic validity: finite non-negative time and value inside [y_min, y_max].

    Slope is not part of basic validity.
    """
    if not math.isfinite(node.time) or node.time < 0.0:
        return False
    return constraints.contains(node.value)


def segment_slope(prev: MotionNode, curr: MotionNode) -> float | None:
    """Slope between two nodes, or None when their times coincide."""
    dt = curr.time - prev.time
    if abs(dt) < TIME_EPSILON:
        return None
    return (curr.value - prev.value) / dt


def exceeds_slope(slope: float, max_slope: float) -> bool:
    return abs(slope) > max_slope + EPSILON


def find_slope_violations(nodes: Sequence[MotionNode], max_slope: float) -> list[int]:
    """Return indices i >= 1 whose segment (i-1, i) is steeper than max_slope.

    Vertical segments (equal times) are never reported.
    """
    violations = []
    for i in range(1, len(nodes)):
        slope = segment_slope(nodes[i - 1], nodes[i])
        if slope is not None and exceeds_slope(slope, max_slope):
            violations.append(i)
    return violations


def repair_nodes(
    nodes: Sequence[MotionNode], constraints: ProfileConstraints
) -> list[MotionNode]:
    """Clamp nodes to the value range, then limit slopes in one forward pass.

    Pass 1 clamps every value into [y_min, y_max]. Pass 2 walks consecutive
    pairs left to right and, where |slope| exceeds max_slope, moves the later
    node to prev.value + clamp(slope, -max_slope, max_slope) * dt, re-clamped
    into the range. Each pair is compared against the already-corrected
    previous node. There is exactly one pass; nodes are never re-checked
    after a later node moves.

    Args:
        nodes: Nodes sorted by time.
        constraints: Range and slope limit to enforce.

    Returns:
        New list of nodes (same length and times).
    """
    y_min, y_max, max_slope = constraints.y_min, constraints.y_max, constraints.max_slope

    repaired = [
        node.with_value(clamp(node.value, y_min, y_max))
        if abs(node.value - clamp(node.value, y_min, y_max)) > VALUE_EPSILON
        else node
        for node in nodes
    ]

    for i in range(1, len(repaired)):
        prev, curr = repaired[i - 1], repaired[i]
        slope = segment_slope(prev, curr)
        if slope is None or not exceeds_slope(slope, max_slope):
            continue
        dt = curr.time - prev.time
        limited = prev.value + clamp(slope, -max_slope, max_slope) * dt
        repaired[i] = curr.with_value(clamp(limited, y_min, y_max))

    return repaired
