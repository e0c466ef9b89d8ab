"""Utility functions and helpers package."""

from .exceptions import ConfigurationError, DisplaySyncError, ScenarioError
from .logging import get_logger, setup_logging

__all__ = [
    "ConfigurationError",
    "DisplaySyncError",
    "ScenarioError",
    "get_logger",
    "setup_logging",
]
