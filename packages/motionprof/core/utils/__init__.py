"""Shared utilities for motionprof."""

from motionprof.core.utils.json import read_json, write_json
from motionprof.core.utils.math import clamp, is_close, lerp, snap_to_grid

__all__ = [
    "clamp",
    "is_close",
    "lerp",
    "read_json",
    "snap_to_grid",
    "write_json",
]
