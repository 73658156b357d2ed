"""Profile data models.

- MotionNode: one (time, value) vertex of a piecewise-linear curve, time in ms
- ProfileConstraints: value bounds and maximum slope for one motor

Both models are immutable. A MotionNode is not validated against any profile
on construction: candidates for an edit must be representable so that the
profile can reject them.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_Y_MIN = -100.0
DEFAULT_Y_MAX = 100.0
DEFAULT_MAX_SLOPE = 1000.0


class MotionNode(BaseModel):
    """A single (time, value) node in real units.

    Attributes:
        time: Time in milliseconds.
        value: Motor value in real units.

    Example:
        >>> node = MotionNode(time=2000.0, value=50.0)
        >>> node.as_pair()
        (2000.0, 50.0)
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    time: float
    value: float

    @classmethod
    def of(cls, time: float, value: float) -> MotionNode:
        """Positional shorthand for MotionNode(time=..., value=...)."""
        return cls(time=time, value=value)

    def as_pair(self) -> tuple[float, float]:
        return (self.time, self.value)

    def with_value(self, value: float) -> MotionNode:
        return MotionNode(time=self.time, value=value)


class ProfileConstraints(BaseModel):
    """Value range and slope limit of a motor.

    y_min <= y_max is the convention but is not enforced; a profile whose
    range is inverted simply rejects every value until it is fixed.

    Attributes:
        y_min: Lowest allowed value.
        y_max: Highest allowed value.
        max_slope: Maximum |dvalue/dtime| in value units per ms. Zero means
            no slope is allowed, not "unconstrained".
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    y_min: float = Field(default=DEFAULT_Y_MIN, description="Lowest allowed value")
    y_max: float = Field(default=DEFAULT_Y_MAX, description="Highest allowed value")
    max_slope: float = Field(
        default=DEFAULT_MAX_SLOPE, ge=0.0, description="Maximum slope (value units per ms)"
    )

    def contains(self, value: float) -> bool:
        return self.y_min <= value <= self.y_max
