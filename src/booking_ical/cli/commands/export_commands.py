"""Export command for booking-ical."""

import argparse
from pathlib import Path
from typing import Any

from booking_ical.config import load_booking_file, load_config
from booking_ical.ical.exporter import CalendarExporter
from booking_ical.utils.logging import get_logger

logger = get_logger(__name__)


def setup_export_parser(subparsers: Any) -> None:
    """Set up the parser for the export command.

    Args:
        subparsers: Subparser object to add the export command to.
    """
    export_parser = subparsers.add_parser(
        "export", help="Export a booking option as an iCalendar document"
    )

    export_parser.add_argument(
        "booking_file",
        help="YAML file with the booking, option, session dates and users",
    )
    export_parser.add_argument(
        "--config",
        default="config.yaml",
        help="Path to the site configuration file (default: config.yaml)",
    )
    export_parser.add_argument(
        "--cancel",
        action="store_true",
        help="Export a cancellation instead of a publication",
    )
    output_group = export_parser.add_mutually_exclusive_group()
    output_group.add_argument(
        "--output",
        help="Write the document to this file instead of stdout",
    )
    output_group.add_argument(
        "--attachment",
        action="store_true",
        help="Write a temporary attachment file and print its path",
    )
    export_parser.set_defaults(func=export_command)


def export_command(args: argparse.Namespace) -> None:
    """Execute the export command.

    Args:
        args: Command line arguments.
    """
    site = load_config(args.config)
    record = load_booking_file(args.booking_file)

    exporter = CalendarExporter(
        booking=record.booking,
        option=record.option,
        user=record.user,
        from_user=record.from_user,
        site=site,
        session_dates=record.session_dates,
    )

    if not exporter.dates_are_set:
        print(f"Option {record.option.id} has no dates set, nothing to export.")
        return

    if args.attachment:
        path = exporter.get_attachment(cancel=args.cancel)
        print(path)
        return

    content = exporter.export(cancel=args.cancel)
    if args.output:
        with open(Path(args.output), "w", encoding="utf-8", newline="") as f:
            f.write(content)
        logger.info("Wrote {} to {}", exporter.get_name(), args.output)
        print(f"Saved calendar to {args.output}")
    else:
        print(content, end="")
