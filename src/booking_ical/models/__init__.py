"""Input models for the calendar exporter."""

from booking_ical.models.booking import (
    Booking,
    BookingOption,
    BookingRecord,
    Identity,
    SessionDate,
    SiteConfig,
)

__all__ = ["Booking", "BookingOption", "BookingRecord", "Identity", "SessionDate", "SiteConfig"]
