"""Math utilities for common operations."""

from __future__ import annotations

import math
from typing import TypeVar

import numpy as np

Number = TypeVar("Number", int, float, np.number)

# Tolerances used across the model. Values are in real units (ms, value units).
EPSILON = 1e-9
TIME_EPSILON = 1e-6
VALUE_EPSILON = 1e-6


def clamp(value: Number, min_val: Number, max_val: Number) -> Number:
    """Clamp value to range [min_val, max_val].

    Args:
        value: Value to clamp
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        Clamped value
    """
    return max(min_val, min(max_val, value))


def lerp(a: Number, b: Number, t: float) -> float:
    """Linear interpolation between a and b.

    Args:
        a: Start value
        b: End value
        t: Interpolation factor [0, 1]

    Returns:
        Interpolated value
    """
    return float(a) + (float(b) - float(a)) * t


def is_close(a: float, b: float, tol: float = EPSILON) -> bool:
    """Return True when |a - b| is within tol."""
    return abs(a - b) <= tol


def snap_to_grid(value: float, step: float) -> float:
    """Round value to the nearest multiple of step.

    A non-positive step disables snapping and returns the value unchanged.

    Example:
        >>> snap_to_grid(74.0, 50.0)
        50.0
        >>> snap_to_grid(76.0, 50.0)
        100.0
    """
    if step <= 0:
        return value
    # Halves round away from zero.
    q = value / step
    return math.copysign(math.floor(abs(q) + 0.5), q) * step
