"""Command line interface for booking-ical."""
