"""iCalendar rendering of booking options."""

from booking_ical.ical.exporter import CalendarExporter
from booking_ical.ical.formatting import escape, fold, format_timestamp, unescape_text, unfold

__all__ = ["CalendarExporter", "escape", "fold", "format_timestamp", "unescape_text", "unfold"]
