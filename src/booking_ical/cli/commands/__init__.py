"""Command modules for the booking-ical CLI."""

from booking_ical.cli.commands.export_commands import export_command, setup_export_parser
from booking_ical.cli.commands.utils import list_commands

__all__ = [
    "export_command",
    "setup_export_parser",
    "list_commands",
]
