"""Configuration models for motionprof."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from motionprof.core.display.transform import DEFAULT_REFERENCE_VALUE
from motionprof.core.profiles.models import (
    DEFAULT_MAX_SLOPE,
    DEFAULT_Y_MAX,
    DEFAULT_Y_MIN,
    ProfileConstraints,
)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Root log level",
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Format string for text logs",
    )
    structured: bool = Field(default=False, description="Emit JSON lines instead of text")
    filename: str | None = Field(default=None, description="Log file (stdout if None)")


class ViewConfig(BaseModel):
    """Editing surface settings.

    These drive the display transform and grid snapping; persisted so the
    editor reopens with the same view.

    Example:
        >>> view = ViewConfig()
        >>> view.reference_value
        100.0
    """

    reference_value: float = Field(
        default=DEFAULT_REFERENCE_VALUE,
        gt=0.0,
        description="Display value the largest profile bound is mapped to",
    )
    y_divisions: int = Field(default=10, ge=1, description="Horizontal grid lines above zero")
    grid_size_x: float = Field(default=50.0, gt=0.0, description="Minor time grid step (ms)")
    major_grid_x: float = Field(default=1000.0, gt=0.0, description="Major time grid step (ms)")
    snap_to_grid: bool = Field(default=False, description="Snap edited nodes to the grid")


class ProfileDefaults(BaseModel):
    """Constraints given to newly created or loaded motors."""

    model_config = ConfigDict(frozen=True)

    y_min: float = DEFAULT_Y_MIN
    y_max: float = DEFAULT_Y_MAX
    max_slope: float = Field(default=DEFAULT_MAX_SLOPE, ge=0.0)

    @model_validator(mode="after")
    def _validate_range(self) -> ProfileDefaults:
        if self.y_min > self.y_max:
            raise ValueError(f"y_min ({self.y_min}) must be <= y_max ({self.y_max})")
        return self

    def to_constraints(self) -> ProfileConstraints:
        return ProfileConstraints(y_min=self.y_min, y_max=self.y_max, max_slope=self.max_slope)


class ExportConfig(BaseModel):
    """Sampled export defaults."""

    sample_rate_hz: float = Field(default=100.0, gt=0.0, description="Samples per second")
    default_id: str = Field(default="default_id", min_length=1, description="Document id")
    min_end_time_ms: float = Field(
        default=2000.0, ge=0.0, description="Lower bound for the suggested export end time"
    )


class EditingConfig(BaseModel):
    """Undo history and motor creation settings."""

    history_limit: int = Field(default=0, ge=0, description="Max undo steps (0 = unlimited)")
    color_seed: int = Field(default=0, description="Seed for motor color assignment")


class AppConfig(BaseModel):
    """Application configuration.

    Every section has defaults, so an empty file (or no file) is valid.
    """

    model_config = ConfigDict(extra="forbid")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    view: ViewConfig = Field(default_factory=ViewConfig)
    profile_defaults: ProfileDefaults = Field(default_factory=ProfileDefaults)
    export: ExportConfig = Field(default_factory=ExportConfig)
    editing: EditingConfig = Field(default_factory=EditingConfig)
