"""Utility functions for CLI commands."""

from booking_ical.utils.logging import get_logger

logger = get_logger(__name__)


def list_commands() -> None:
    """Print available commands."""
    logger.debug("Listing available commands")
    print("Available commands:")
    print("  export   - Export a booking option as an iCalendar document")
    print("\nFor more information on a command, use: <command> --help")
