"""iCalendar export for course booking options."""

__version__ = "0.1.0"
