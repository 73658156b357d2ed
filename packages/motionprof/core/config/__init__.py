"""Application configuration."""

from motionprof.core.config.loader import (
    configure_logging,
    detect_format,
    load_app_config,
    load_config,
    save_app_config,
)
from motionprof.core.config.models import (
    AppConfig,
    EditingConfig,
    ExportConfig,
    LoggingConfig,
    ProfileDefaults,
    ViewConfig,
)

__all__ = [
    "AppConfig",
    "EditingConfig",
    "ExportConfig",
    "LoggingConfig",
    "ProfileDefaults",
    "ViewConfig",
    "configure_logging",
    "detect_format",
    "load_app_config",
    "load_config",
    "save_app_config",
]
