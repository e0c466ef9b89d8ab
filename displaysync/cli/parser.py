"""Command line argument parsing for displaysync."""

import argparse

from .. import __version__
from ..display.capabilities import MAX_MAIN_FIELD_LINES

LOG_LEVELS = ["DEBUG", "VERBOSE", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _line_count(value: str) -> int:
    """Validate a --lines argument."""
    try:
        lines = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid line count '{value}'") from None
    if not 1 <= lines <= MAX_MAIN_FIELD_LINES:
        raise argparse.ArgumentTypeError(
            f"Line count must be between 1 and {MAX_MAIN_FIELD_LINES}, got {lines}"
        )
    return lines


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid number '{value}'") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"Expected a positive number, got {number}")
    return number


def create_parser() -> argparse.ArgumentParser:
    """Create the command line parser.

    Returns:
        argparse.ArgumentParser: Parser with the ``show`` command and logging options

    Example:
        >>> parser = create_parser()
        >>> args = parser.parse_args(["show", "scenario.yaml", "--lines", "2"])
        >>> args.lines
        2
    """
    parser = argparse.ArgumentParser(
        prog="displaysync",
        description="DisplaySync - push text and artwork to capability-limited display surfaces",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s show scenario.yaml                 # Print the updates for a scenario
  %(prog)s show scenario.yaml --lines 2       # Pretend the surface has two lines
  %(prog)s show scenario.yaml --protocol-version 4 --verbose
        """,
    )

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}", help="Show version"
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    show = subparsers.add_parser(
        "show", help="Run one display update for a scenario and print the payloads"
    )
    show.add_argument("scenario", help="Scenario YAML file")
    show.add_argument(
        "--lines",
        type=_line_count,
        default=None,
        help="Override the number of main text lines the surface shows (1-4)",
    )
    show.add_argument(
        "--protocol-version",
        dest="protocol_version",
        type=_positive_int,
        default=None,
        help="Major protocol version of the surface (default from settings)",
    )
    show.add_argument("--config", default=None, help="Explicit YAML config file")

    logging_group = show.add_argument_group("logging", "Logging configuration options")
    logging_group.add_argument(
        "--log-level", choices=LOG_LEVELS, help="Set both console and file log levels"
    )
    logging_group.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )
    logging_group.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only show errors on console (sets console level to ERROR)",
    )
    logging_group.add_argument(
        "--log-dir", default=None, help="Write log files to this directory"
    )
    logging_group.add_argument(
        "--no-log-colors", action="store_true", help="Disable colored console output"
    )

    return parser
