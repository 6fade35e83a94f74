"""
Configuration management for GeoLink using Pydantic.
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Any, ClassVar, List, Optional, cast

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Setup Logging ---
log = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# --- Nested Configuration Models ---


class GoogleMapsConfig(BaseModel):
    """Google Maps Web Services configuration."""

    api_key: Optional[str] = Field(
        default_factory=lambda: os.getenv("GOOGLE_MAPS_API_KEY") or None,
        description="API key for the Geocoding and Places APIs. None disables the API-backed strategies.",
    )
    base_url: str = Field(
        default="https://maps.googleapis.com/maps/api",
        description="Base URL of the Google Maps Web Services.",
    )
    language: str = Field(default="en", description="Language requested from the reverse geocoding API.")
    timeout: float = Field(default=10.0, gt=0, description="Per-request timeout in seconds.")

    @field_validator("api_key", mode="before")
    @classmethod
    def blank_key_is_none(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class ExpanderConfig(BaseModel):
    """Short-link expansion configuration."""

    max_redirects: int = Field(default=10, ge=0, description="Maximum redirects followed when expanding a short link.")
    timeout: float = Field(default=10.0, gt=0, description="Expansion request timeout in seconds.")
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="Browser-like User-Agent; short links are served differently to bots.",
    )
    short_link_markers: List[str] = Field(
        default=["maps.app.goo.gl", "goo.gl/maps"],
        description="Substrings identifying a Google Maps short link.",
    )

    @field_validator("short_link_markers")
    @classmethod
    def validate_markers(cls, v: List[str]) -> List[str]:
        """Ensure at least one marker is configured."""
        if not v:
            raise ValueError("short_link_markers must contain at least one marker")
        return v


class WebUIConfig(BaseModel):
    """Configuration for the HTTP API server."""

    host: str = Field(default="127.0.0.1", description="Host for the web server.")
    port: int = Field(default=8000, description="Port for the web server.")
    cors_origins: List[str] = Field(
        default=["http://localhost:3000"],
        description="Origins allowed to call the API from a browser.",
    )


class MonitoringConfig(BaseModel):
    """Configuration for logging and metrics."""

    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(
        default=None,
        description="Path to log file. If None, logs to console.",
    )
    web_ui: WebUIConfig = Field(default_factory=WebUIConfig)

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)


# --- Main Configuration Class ---


class Config(BaseSettings):
    project_name: str = "GeoLink"
    version: str = "0.1.0"
    google: GoogleMapsConfig = Field(default_factory=GoogleMapsConfig)
    expander: ExpanderConfig = Field(default_factory=ExpanderConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    model_config = SettingsConfigDict(env_prefix="GEOLINK_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls.model_validate({})
        return cls.model_validate(yaml_data or {})

    def redacted(self) -> dict[str, Any]:
        """Dump the configuration with the API key masked."""
        data = self.model_dump(mode="json")
        if data["google"].get("api_key"):
            data["google"]["api_key"] = "***"
        return data


def find_config_file() -> Path | None:
    current_dir = Path.cwd()
    paths_to_check = [
        current_dir / "config.yaml",
        current_dir / "config.yml",
    ]
    for path in paths_to_check:
        if path.exists():
            return path
    return None


def load_config(path: Path | None = None) -> Config:
    """Load configuration from ``path``, a discovered config file, or defaults."""
    config_path = path or find_config_file()
    if config_path:
        return Config.from_yaml(config_path)
    return Config()


# --- Lazy Configuration Loader ---


class LazyConfig:
    """
    A proxy for the Config object that delays its loading and validation
    until an attribute is first accessed. This prevents configuration errors
    from crashing the application on import.
    """

    _config: ClassVar[Config | None] = None
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __getattr__(self, name: str) -> Any:
        if self.__class__._config is None:
            with self.__class__._lock:
                if self.__class__._config is None:
                    self.__class__._config = self._load_config_with_fallback()
        return getattr(self.__class__._config, name)

    def _load_config_with_fallback(self) -> Config:
        """Load configuration from file or fall back to defaults."""
        config_path = find_config_file()
        if config_path:
            try:
                log.info("Lazy loading configuration from: %s", config_path)
                return Config.from_yaml(config_path)
            except (ValidationError, FileNotFoundError, yaml.YAMLError) as e:
                log.error(
                    "Failed to load or validate configuration from '%s': %s. "
                    "Falling back to default settings. Please check your config file.",
                    config_path,
                    e,
                    exc_info=log.getEffectiveLevel() <= logging.DEBUG,
                )
        else:
            log.info("No config file found. Using default settings for lazy load.")

        # Fallback to default settings
        try:
            return Config()
        except ValidationError as e:
            log.critical("FATAL: Default configuration is invalid: %s", e, exc_info=True)
            raise RuntimeError(f"Default configuration is invalid, cannot start: {e}") from e


# --- Global Settings Instance ---
settings: "Config" = cast("Config", LazyConfig())
