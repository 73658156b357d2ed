"""Real <-> display coordinate transform.

Every profile is drawn so that its largest absolute bound maps onto a shared
reference value; the per-profile factor is its "visual scale". Time is not
scaled. All functions are pure and never divide by a near-zero quantity.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from motionprof.core.profiles.models import MotionNode
from motionprof.core.utils.math import EPSILON, clamp, snap_to_grid

if TYPE_CHECKING:
    from motionprof.core.profiles.profile import MotorProfile

DEFAULT_REFERENCE_VALUE = 100.0
DEFAULT_GRID_STEP_Y = 50.0


def visual_scale(
    profile: MotorProfile | None, reference_value: float = DEFAULT_REFERENCE_VALUE
) -> float:
    """Display units per real value unit for profile.

    Args:
        profile: Profile to scale, or None.
        reference_value: Display value that the profile's largest absolute
            bound is mapped to.

    Returns:
        reference_value / max(|y_min|, |y_max|), or reference_value / 100
        when there is no profile or its range is ~0.

    Example:
        >>> visual_scale(MotorProfile("tilt", constraints=ProfileConstraints(y_min=-50, y_max=25)))
        2.0
    """
    if profile is None:
        return reference_value / 100.0
    max_abs = profile.max_abs_value()
    if max_abs < EPSILON:
        return reference_value / 100.0
    return reference_value / max_abs


def safe_scale(scale: float) -> float:
    """Return scale, or 1.0 if it is ~0."""
    return 1.0 if abs(scale) < EPSILON else scale


def to_display(real_value: float, scale: float) -> float:
    return real_value * safe_scale(scale)


def to_real(display_value: float, scale: float) -> float:
    return display_value / safe_scale(scale)


def node_to_display(node: MotionNode, scale: float) -> tuple[float, float]:
    """Display position (time, display value) of a real node."""
    return (node.time, to_display(node.value, scale))


def display_range(profile: MotorProfile, scale: float) -> tuple[float, float]:
    """The profile's [y_min, y_max] in display units."""
    return (to_display(profile.y_min, scale), to_display(profile.y_max, scale))


def grid_step_y(reference_value: float, divisions: int) -> float:
    """Vertical grid spacing in display units.

    Falls back to 50.0 when divisions <= 0 or the result is ~0.
    """
    if divisions <= 0:
        return DEFAULT_GRID_STEP_Y
    step = reference_value / divisions
    return DEFAULT_GRID_STEP_Y if abs(step) < EPSILON else step


def snap_point(
    time: float, display_value: float, step_x: float = 0.0, step_y: float = 0.0
) -> tuple[float, float]:
    """Snap each axis independently to its grid. A step <= 0 leaves that axis alone."""
    return (snap_to_grid(time, step_x), snap_to_grid(display_value, step_y))


def constrain_display_point(
    profile: MotorProfile,
    time: float,
    display_value: float,
    scale: float,
    *,
    snap_step_x: float = 0.0,
    snap_step_y: float = 0.0,
) -> MotionNode:
    """Turn a display-space edit into a valid real node.

    Applies optional grid snapping, clamps time to >= 0 and the display
    value into the profile's display range, then converts to real units.
    This is what an editing surface does with a dragged point before wrapping
    it in a command.

    Args:
        profile: Target profile.
        time: Time in ms (display and real time are identical).
        display_value: Value in display units.
        scale: Visual scale of profile.
        snap_step_x: Time grid step (0 disables snapping).
        snap_step_y: Display value grid step (0 disables snapping).

    Returns:
        The constrained node in real coordinates.
    """
    time, display_value = snap_point(time, display_value, snap_step_x, snap_step_y)
    time = max(0.0, time)
    low, high = display_range(profile, scale)
    display_value = clamp(display_value, min(low, high), max(low, high))
    # Converting back can overshoot the bounds by rounding
    value = clamp(to_real(display_value, scale), profile.y_min, profile.y_max)
    return MotionNode(time=time, value=value)
