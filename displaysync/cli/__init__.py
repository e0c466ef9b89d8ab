"""Command line interface for displaysync."""

from typing import List, Optional

from .modes import run_show_mode
from .parser import create_parser


async def main_entry(argv: Optional[List[str]] = None) -> int:
    """Parse arguments and run the requested command.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command == "show":
        return await run_show_mode(args)

    parser.error(f"Unknown command: {args.command}")
    return 1


__all__ = ["create_parser", "main_entry", "run_show_mode"]
