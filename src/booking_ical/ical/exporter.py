"""iCalendar export of booking options, attached to booking notification mails.

A CalendarExporter is built for one option and one recipient. It renders a
VCALENDAR document with one VEVENT per session date, or a single VEVENT
spanning the option's course range when the option has no session dates.
Documents are deterministic for a given option state: DTSTAMP comes from the
option's last-modified time and UIDs are hashes of stable identifiers, so
calendar clients treat a re-export as an update of the same events.
"""

import hashlib
import re
import time
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple
from urllib.parse import urlencode

from booking_ical.exceptions import MalformedSessionDateError, MissingIdentityError, StorageError
from booking_ical.ical.formatting import escape, format_timestamp
from booking_ical.models.booking import Booking, BookingOption, Identity, SessionDate, SiteConfig
from booking_ical.utils.logging import get_logger

logger = get_logger(__name__)

ATTACHMENT_NAME = "booking.ics"
UID_SALT = "booking_option"

ROLE_PARTICIPANT = "REQ-PARTICIPANT"
ROLE_NON_PARTICIPANT = "NON-PARTICIPANT"

Field = Tuple[str, str]

_LINE_BREAK = re.compile(r"\r\n|[\r\n]")


def format_block(component: str, fields: Iterable[Field]) -> List[str]:
    """Wrap content lines in BEGIN/END markers.

    Args:
        component: Component name, e.g. VEVENT.
        fields: Ordered (name, value) pairs. The name may carry parameters.

    Returns:
        List of content lines.
    """
    lines = [f"BEGIN:{component}"]
    lines.extend(f"{name}:{value}" for name, value in fields)
    lines.append(f"END:{component}")
    return lines


def format_document(lines: Iterable[str]) -> str:
    """Join content lines, terminating every physical line with CRLF."""
    text = "\n".join(lines)
    return "\r\n".join(text.split("\n")) + "\r\n"


def single_line(value: str) -> str:
    """Replace line breaks so a value cannot end its content line."""
    return _LINE_BREAK.sub(" ", value)


def quote_param(value: str) -> str:
    """Quote a parameter value when it contains a delimiter."""
    value = single_line(value).replace('"', "'")
    if any(char in value for char in ":;,"):
        return f'"{value}"'
    return value


class CalendarExporter:
    """Builds the calendar attachment for a booking notification."""

    def __init__(
        self,
        booking: Booking,
        option: BookingOption,
        user: Identity,
        from_user: Identity,
        site: SiteConfig,
        session_dates: Sequence[SessionDate] = (),
    ) -> None:
        """Initialize the exporter and precompute the shared event fields.

        Args:
            booking: The booking activity the option belongs to.
            option: The option that is booked or cancelled.
            user: The user the booking is for.
            from_user: The identity the notification is sent from.
            site: Site configuration.
            session_dates: Session dates of the option, if any.
        """
        self.booking = booking
        self.option = option
        self.user = user
        self.from_user = from_user
        self.site = site
        self.session_dates = list(session_dates)

        self.dates_are_set = option.has_course_dates() or bool(self.session_dates)

        self.dtstamp = ""
        self.summary = ""
        self.description = ""
        self.location = ""
        self.host = ""
        self.user_fullname = ""

        if self.dates_are_set:
            self.dtstamp = format_timestamp(option.time_modified)
            self.summary = escape(option.title or booking.name)
            self.description = escape(option.description, convert_html=True)
            if option.course_id:
                self.location = escape(self.course_url(option.course_id))
            self.host = site.host
            self.user_fullname = user.fullname

    def course_url(self, course_id: int) -> str:
        return f"{self.site.wwwroot}/course/view.php?{urlencode({'id': course_id})}"

    def get_name(self) -> str:
        return ATTACHMENT_NAME

    def make_uid(self, session_id: Optional[int] = None) -> str:
        """Build a globally unique, stable event identifier.

        Args:
            session_id: Session date id, for multi-session options.

        Returns:
            The UID value.
        """
        key = f"{self.site.site_identifier}{self.option.id}"
        if session_id is not None:
            key += str(session_id)
        digest = hashlib.md5(f"{key}{UID_SALT}".encode("utf-8")).hexdigest()
        return f"{digest}@{self.host}"

    def calendar_fields(self, cancel: bool = False) -> List[Field]:
        return [
            ("VERSION", "2.0"),
            ("PRODID", self.site.product_id),
            ("CALSCALE", "GREGORIAN"),
            ("METHOD", "CANCEL" if cancel else "PUBLISH"),
        ]

    def event_fields(self, start: int, end: int, uid: str, cancel: bool = False) -> List[Field]:
        """Build the ordered fields of one VEVENT.

        Args:
            start: Start time in seconds since the epoch.
            end: End time in seconds since the epoch.
            uid: Event UID.
            cancel: Build a cancelled event.

        Returns:
            Ordered (name, value) pairs.

        Raises:
            MissingIdentityError: If sender or recipient has no email.
        """
        if not self.from_user.email:
            raise MissingIdentityError("organizer")
        if not self.user.email:
            raise MissingIdentityError("recipient")

        role = ROLE_NON_PARTICIPANT if cancel else ROLE_PARTICIPANT

        fields = [
            ("UID", uid),
            ("DTSTAMP", self.dtstamp),
            ("DTSTART", format_timestamp(start)),
            ("DTEND", format_timestamp(end)),
            ("SUMMARY", self.summary),
            ("LOCATION", self.location),
            ("DESCRIPTION", self.description),
            ("CLASS", "PRIVATE"),
            ("TRANSP", "OPAQUE"),
        ]
        if cancel:
            fields.append(("STATUS", "CANCELLED"))
        fields.append(
            (
                f"ORGANIZER;CN={quote_param(self.from_user.fullname)}",
                f"MAILTO:{single_line(self.from_user.email)}",
            )
        )
        fields.append(
            (
                f"ATTENDEE;CUTYPE=INDIVIDUAL;ROLE={role};PARTSTAT=NEEDS-ACTION;RSVP=false;"
                f"CN={quote_param(self.user_fullname)};LANGUAGE=en",
                f"MAILTO:{single_line(self.user.email)}",
            )
        )
        return fields

    def _event_ranges(self) -> List[Tuple[int, int, str]]:
        if not self.session_dates:
            return [
                (
                    self.option.course_start_time,
                    self.option.course_end_time,
                    self.make_uid(),
                )
            ]

        for session in self.session_dates:
            if not session.course_start_time:
                raise MalformedSessionDateError(session.id, "start")
            if not session.course_end_time:
                raise MalformedSessionDateError(session.id, "end")

        ordered = sorted(self.session_dates, key=lambda session: session.course_start_time)
        return [
            (session.course_start_time, session.course_end_time, self.make_uid(session.id))
            for session in ordered
        ]

    def export(self, cancel: bool = False) -> Optional[str]:
        """Render the calendar document.

        Args:
            cancel: Render a CANCEL document instead of a PUBLISH one.

        Returns:
            The CRLF terminated document, or None if the option has no dates.

        Raises:
            MissingIdentityError: If sender or recipient has no email.
            MalformedSessionDateError: If a session date lacks start or end.
        """
        if not self.dates_are_set:
            logger.debug("Option {} has no dates, nothing to export", self.option.id)
            return None

        try:
            events = [
                self.event_fields(start, end, uid, cancel)
                for start, end, uid in self._event_ranges()
            ]
        except (MissingIdentityError, MalformedSessionDateError) as e:
            logger.error("Cannot export option {}: {}", self.option.id, e)
            raise

        lines = ["BEGIN:VCALENDAR"]
        lines.extend(f"{name}:{value}" for name, value in self.calendar_fields(cancel))
        for fields in events:
            lines.extend(format_block("VEVENT", fields))
        lines.append("END:VCALENDAR")

        logger.debug(
            "Rendered {} event(s) for option {} (cancel={})", len(events), self.option.id, cancel
        )
        return format_document(lines)

    def get_attachment(self, cancel: bool = False) -> Optional[Path]:
        """Write the calendar document to a new temporary file.

        The caller owns the returned file and must delete it when done.

        Args:
            cancel: Write a CANCEL document instead of a PUBLISH one.

        Returns:
            Path to the file, or None if the option has no dates.

        Raises:
            StorageError: If the file could not be written.
        """
        content = self.export(cancel)
        if content is None:
            return None

        directory = Path(self.site.tempdir)
        attempt = 0
        while True:
            attempt += 1
            name = hashlib.md5(f"{content}{time.time_ns()}{attempt}".encode("utf-8")).hexdigest()
            path = directory / name
            try:
                with open(path, "x", encoding="utf-8", newline="") as f:
                    f.write(content)
                break
            except FileExistsError:
                continue
            except OSError as e:
                logger.error("Failed to write calendar attachment {}: {}", path, e)
                path.unlink(missing_ok=True)
                raise StorageError(f"Failed to write calendar attachment {path}: {e}") from e

        logger.info("Wrote calendar attachment for option {} to {}", self.option.id, path)
        return path
