"""Command line interface for booking-ical."""

import argparse
import sys

from booking_ical import __version__
from booking_ical.cli.commands import list_commands, setup_export_parser
from booking_ical.utils.logging import DEFAULT_RETENTION, DEFAULT_ROTATION, get_logger, setup_logger

logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the command line argument parser.

    Returns:
        An argparse.ArgumentParser object.
    """
    parser = argparse.ArgumentParser(
        prog="booking-ical",
        description="Export course booking options as iCalendar attachments",
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Set the logging level (default: INFO)",
    )
    parser.add_argument(
        "--log-file",
        help="Also write logs to this file",
    )
    parser.add_argument(
        "--log-rotation",
        default=DEFAULT_ROTATION,
        help=f"Rotate the log file at this size or interval (default: {DEFAULT_ROTATION})",
    )
    parser.add_argument(
        "--log-retention",
        default=DEFAULT_RETENTION,
        help=f"Keep rotated log files this long (default: {DEFAULT_RETENTION})",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        dest="command",
        help="Command to execute",
        required=False,
    )

    setup_export_parser(subparsers)

    return parser


def main(args: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command line arguments. If None, sys.argv[1:] is used.

    Returns:
        Exit code.
    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    setup_logger(
        log_level=parsed_args.log_level,
        log_file=parsed_args.log_file,
        rotation=parsed_args.log_rotation,
        retention=parsed_args.log_retention,
    )

    # No command given
    if not hasattr(parsed_args, "func"):
        parser.print_help()
        list_commands()
        return 0

    try:
        parsed_args.func(parsed_args)
        return 0
    except Exception as e:
        logger.exception(f"Error executing command: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
