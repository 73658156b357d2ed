"""Coordinate transform between real profile values and display units."""

from motionprof.core.display.transform import (
    DEFAULT_REFERENCE_VALUE,
    constrain_display_point,
    display_range,
    grid_step_y,
    node_to_display,
    safe_scale,
    snap_point,
    to_display,
    to_real,
    visual_scale,
)

__all__ = [
    "DEFAULT_REFERENCE_VALUE",
    "constrain_display_point",
    "display_range",
    "grid_step_y",
    "node_to_display",
    "safe_scale",
    "snap_point",
    "to_display",
    "to_real",
    "visual_scale",
]
