"""Command handlers for the displaysync CLI."""

from .show import run_show_mode

__all__ = ["run_show_mode"]
