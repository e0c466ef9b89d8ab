"""Settings management using Pydantic for type validation and configuration."""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..utils.exceptions import ConfigurationError


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    # Console Logging
    console_enabled: bool = Field(default=True, description="Enable console logging")
    console_level: str = Field(
        default="INFO",
        description="Console log level: DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL",
    )
    console_colors: bool = Field(
        default=True, description="Enable colored console output (auto-detected)"
    )

    # File Logging
    file_enabled: bool = Field(default=False, description="Enable file logging")
    file_level: str = Field(
        default="DEBUG",
        description="File log level: DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL",
    )
    file_directory: Optional[str] = Field(
        default=None, description="Custom log directory (defaults to data_dir/logs)"
    )
    file_prefix: str = Field(default="displaysync", description="Log file prefix")
    max_log_files: int = Field(default=5, description="Maximum number of log files to keep")
    include_function_names: bool = Field(
        default=True, description="Include function names and line numbers in file logs"
    )

    # Third-party Libraries
    third_party_level: str = Field(
        default="WARNING", description="Log level for third-party libraries"
    )


class DisplaySyncSettings(BaseSettings):
    """Application settings with environment variable and YAML support."""

    # Private attributes
    _explicit_args: set = PrivateAttr(default_factory=set)
    _env_vars_set: set = PrivateAttr(default_factory=set)

    # Application Configuration
    app_name: str = Field(default="DisplaySync", description="Application name")

    # File Paths
    config_dir: Path = Field(default_factory=lambda: Path.home() / ".config" / "displaysync")
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".local" / "share" / "displaysync")
    config_file: Optional[Path] = Field(
        default=None, description="Explicit YAML config file; must exist when given"
    )

    # Logging Configuration
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings, description="Logging settings"
    )

    # Surface Settings
    protocol_major_version: int = Field(
        default=5, ge=1, description="Major protocol version spoken by the display surface"
    )
    supersede_pending_updates: bool = Field(
        default=True, description="Cancel queued display updates when a newer one arrives"
    )

    model_config = SettingsConfigDict(
        env_prefix="DISPLAYSYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    def __init__(self, **kwargs: Any) -> None:
        # Track which environment variables are set before calling parent
        env_vars_set = set()
        for key in os.environ:
            if key.startswith("DISPLAYSYNC_"):
                env_vars_set.add(key.replace("DISPLAYSYNC_", "").lower())

        super().__init__(**kwargs)

        # Explicit arguments and environment variables win over YAML values
        self._explicit_args = set(kwargs.keys())
        self._env_vars_set = env_vars_set

        self._load_yaml_config()

    def _find_config_file(self) -> Optional[Path]:
        """Find config file: explicit path, then project directory, then user config dir.

        Raises:
            ConfigurationError: If an explicit config file does not exist
        """
        if self.config_file is not None:
            if not self.config_file.exists():
                raise ConfigurationError(f"Config file not found: {self.config_file}")
            return self.config_file

        # Check project root directory first (go up from displaysync/config to project root)
        project_root = Path(__file__).parent.parent.parent
        project_config = project_root / "config" / "config.yaml"
        if project_config.exists():
            return project_config

        user_config = self.config_dir / "config.yaml"
        if user_config.exists():
            return user_config

        return None

    def _is_overridden(self, setting: str) -> bool:
        return setting in self._explicit_args or setting in self._env_vars_set

    def _load_basic_settings(self, config_data: dict) -> None:
        """Load basic application settings from YAML data."""
        basic_settings = ["app_name", "protocol_major_version", "supersede_pending_updates"]

        for setting in basic_settings:
            if setting in config_data and not self._is_overridden(setting):
                setattr(self, setting, config_data[setting])

    def _load_logging_config(self, config_data: dict) -> None:
        """Load logging configuration from YAML data."""
        if self._is_overridden("logging"):
            return

        # Legacy flat log level, the logging section wins when both are present
        if "log_level" in config_data:
            self.logging.console_level = config_data["log_level"]
            self.logging.file_level = config_data["log_level"]

        logging_config = config_data.get("logging") or {}
        for setting in LoggingSettings.model_fields:
            if setting in logging_config:
                setattr(self.logging, setting, logging_config[setting])

    def _load_yaml_config(self) -> None:
        """Load configuration from YAML file if it exists."""
        config_file = self._find_config_file()
        if not config_file:
            return

        try:
            with config_file.open() as f:
                config_data = yaml.safe_load(f)

            if not config_data:
                return

            if not isinstance(config_data, dict):
                raise ConfigurationError(f"Config file {config_file} must contain a mapping")

            self._load_basic_settings(config_data)
            self._load_logging_config(config_data)

        except ConfigurationError:
            raise
        except Exception as e:
            if self.config_file is not None:
                raise ConfigurationError(f"Could not load config from {config_file}: {e}") from e
            # Don't fail on discovered config files, continue with defaults/env vars
            logging.warning(f"Could not load YAML config from {config_file}: {e}")

    @property
    def log_directory(self) -> Path:
        """Directory for log files."""
        if self.logging.file_directory:
            return Path(self.logging.file_directory)
        return self.data_dir / "logs"


# Global settings management
_settings_instance: Optional[DisplaySyncSettings] = None


def get_settings() -> DisplaySyncSettings:
    """Get the global settings instance, creating it lazily if needed.

    Returns:
        DisplaySyncSettings: The global settings instance
    """
    if globals()["_settings_instance"] is None:
        globals()["_settings_instance"] = DisplaySyncSettings()
    return globals()["_settings_instance"]


def reset_settings() -> None:
    """Reset the global settings instance (primarily for testing)."""
    globals()["_settings_instance"] = None
