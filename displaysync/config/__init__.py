"""Configuration management package."""

from .settings import DisplaySyncSettings, LoggingSettings, get_settings, reset_settings

__all__ = ["DisplaySyncSettings", "LoggingSettings", "get_settings", "reset_settings"]
