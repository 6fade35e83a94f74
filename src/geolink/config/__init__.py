"""Configuration models and the lazily loaded global settings."""

from __future__ import annotations

from .config import (
    Config,
    ExpanderConfig,
    GoogleMapsConfig,
    MonitoringConfig,
    WebUIConfig,
    find_config_file,
    load_config,
    settings,
)

__all__ = [
    "Config",
    "ExpanderConfig",
    "GoogleMapsConfig",
    "MonitoringConfig",
    "WebUIConfig",
    "find_config_file",
    "load_config",
    "settings",
]
