"""Exceptions raised while exporting bookings to iCalendar."""


class CalendarExportError(Exception):
    """Base class for all export failures."""


class MissingIdentityError(CalendarExportError):
    """The organizer or the recipient has no email address."""

    def __init__(self, role: str) -> None:
        self.role = role
        super().__init__(f"Cannot export calendar: the {role} has no email address")


class MalformedSessionDateError(CalendarExportError):
    """A session date lacks its start or end time."""

    def __init__(self, session_id: int, missing: str) -> None:
        self.session_id = session_id
        self.missing = missing
        super().__init__(f"Session date {session_id} has no {missing} time")


class StorageError(CalendarExportError):
    """The attachment file could not be written."""


class ConfigError(CalendarExportError):
    """A configuration or booking file is missing or invalid."""
