"""Show mode: run one display update for a scenario file."""

import logging
import sys
from typing import Any, Optional

from pydantic import ValidationError

from ...config.settings import DisplaySyncSettings
from ...display.capabilities import (
    ImageFieldName,
    TextFieldName,
    WindowCapability,
)
from ...display.console_transport import ConsoleTransport, LocalArtworkStore
from ...display.manager import DisplayUpdateManager
from ...display.scenario import DisplayScenario, load_scenario
from ...utils.exceptions import ConfigurationError, DisplaySyncError
from ...utils.logging import apply_command_line_overrides, setup_logging

logger = logging.getLogger(__name__)

_EXTRA_TEXT_FIELDS = (TextFieldName.TEMPLATE_TITLE, TextFieldName.MEDIA_TRACK)


def build_capabilities(
    scenario: DisplayScenario, lines: Optional[int]
) -> Optional[WindowCapability]:
    """Capabilities for the run, with --lines replacing the main line count.

    The scenario's non-main text fields and image slots are kept; without
    scenario capabilities every other field is assumed supported.
    """
    if lines is None:
        return scenario.capabilities

    if scenario.capabilities is None:
        return WindowCapability.with_lines(
            lines, extra_text_fields=_EXTRA_TEXT_FIELDS, image_fields=list(ImageFieldName)
        )

    extras = [name for name in scenario.capabilities.text_fields if name in _EXTRA_TEXT_FIELDS]
    return WindowCapability.with_lines(
        lines, extra_text_fields=extras, image_fields=scenario.capabilities.image_fields
    )


def load_settings(args: Any) -> DisplaySyncSettings:
    """Build settings and apply command line overrides."""
    config_file = getattr(args, "config", None)
    try:
        if config_file:
            settings = DisplaySyncSettings(config_file=config_file)
        else:
            settings = DisplaySyncSettings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e

    settings = apply_command_line_overrides(settings, args)
    if getattr(args, "protocol_version", None) is not None:
        settings.protocol_major_version = args.protocol_version
    return settings


async def run_show_mode(args: Any, stream: Any = None) -> int:
    """Run the show command.

    Args:
        args: Parsed command line arguments
        stream: Where payloads are written, stdout by default

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        settings = load_settings(args)
    except DisplaySyncError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(settings)

    try:
        scenario = load_scenario(args.scenario)
    except DisplaySyncError as e:
        logger.error(f"Cannot load scenario: {e}")
        return 1

    capabilities = build_capabilities(scenario, getattr(args, "lines", None))
    transport = ConsoleTransport(stream=stream)
    manager = DisplayUpdateManager(
        transport=transport,
        uploader=LocalArtworkStore(base_dir=scenario.base_dir),
        capabilities=capabilities,
        settings=settings,
        current_state=scenario.current,
    )

    success = await manager.update(scenario.desired)
    if success:
        logger.info(f"Display update finished with {len(transport.sent)} payload(s)")
        return 0

    logger.error("Display update failed")
    return 1
