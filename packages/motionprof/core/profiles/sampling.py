"""Curve sampling.

Linear interpolation between profile nodes and generation of the uniform
sample grid used by the sampled export. Times are in milliseconds.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from motionprof.core.profiles.models import MotionNode
from motionprof.core.utils.math import TIME_EPSILON, lerp

# Sample periods below this (ms) fall back to 1 ms.
MIN_SAMPLE_PERIOD_MS = 1e-3


def interpolate_linear(nodes: Sequence[MotionNode], time: float) -> float:
    """Linearly interpolate the value at time.

    Nodes must have non-decreasing times. Before the first node the first
    value is held, after the last node the last value is held. When the
    bracketing pair shares the same time the earlier node's value is used.

    Args:
        nodes: Nodes sorted by time.
        time: Time in ms.

    Returns:
        Interpolated value, or 0.0 if there are no nodes.

    Example:
        >>> nodes = [MotionNode(time=0, value=0), MotionNode(time=2000, value=50)]
        >>> interpolate_linear(nodes, 1000)
        25.0
    """
    if not nodes:
        return 0.0

    if time <= nodes[0].time:
        return nodes[0].value
    if time >= nodes[-1].time:
        return nodes[-1].value

    for prev, nxt in zip(nodes, nodes[1:]):
        if prev.time <= time <= nxt.time:
            span = nxt.time - prev.time
            if abs(span) < TIME_EPSILON:
                return prev.value
            alpha = (time - prev.time) / span
            return lerp(prev.value, nxt.value, alpha)

    # Unreachable for sorted input
    return nodes[-1].value


def sample_period_ms(sample_rate_hz: float) -> float:
    """Return the sample period in ms for a rate in Hz.

    Raises:
        ValueError: If sample_rate_hz <= 0.
    """
    if sample_rate_hz <= 0:
        raise ValueError(f"sample_rate_hz must be > 0, got {sample_rate_hz}")
    period = 1000.0 / sample_rate_hz
    return period if period >= MIN_SAMPLE_PERIOD_MS else 1.0


def sample_times(sample_rate_hz: float, end_time_ms: float) -> list[float]:
    """Generate export sample times 0, dt, 2dt, ... ending exactly at end_time_ms.

    The final sample is always end_time_ms itself, added explicitly when it
    does not fall on a step boundary.

    Args:
        sample_rate_hz: Sample rate (> 0).
        end_time_ms: Last sample time (>= 0).

    Returns:
        Sample times in ms.

    Raises:
        ValueError: If sample_rate_hz <= 0 or end_time_ms < 0.

    Example:
        >>> sample_times(100, 25)
        [0.0, 10.0, 20.0, 25.0]
    """
    if end_time_ms < 0:
        raise ValueError(f"end_time_ms must be >= 0, got {end_time_ms}")
    dt = sample_period_ms(sample_rate_hz)

    if end_time_ms == 0:
        return [0.0]

    # Steps strictly before the end, indexed to avoid accumulated drift
    count = int(np.ceil(end_time_ms / dt))
    times = (np.arange(count, dtype=float) * dt).tolist()
    times = [t for t in times if t < end_time_ms - TIME_EPSILON]
    times.append(float(end_time_ms))
    return times


def sample_nodes(
    nodes: Sequence[MotionNode], sample_rate_hz: float, end_time_ms: float
) -> list[tuple[float, float]]:
    """Sample a node sequence on the export grid.

    Returns an empty list for a non-positive rate or negative end time, which
    is how the export treats unusable parameters.

    Returns:
        List of (time_ms, value) rows.
    """
    if sample_rate_hz <= 0 or end_time_ms < 0:
        return []
    return [(t, interpolate_linear(nodes, t)) for t in sample_times(sample_rate_hz, end_time_ms)]
