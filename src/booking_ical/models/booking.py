"""Booking data models."""

import tempfile
from typing import Annotated, List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator

DEFAULT_PRODUCT_ID = "-//Moodle//NONSGML Booking//EN"

# 9999-12-31T23:59:59Z
MAX_TIMESTAMP = 253402300799

# Seconds since the epoch
Timestamp = Annotated[int, Field(ge=0, le=MAX_TIMESTAMP)]


class Booking(BaseModel):
    """The booking activity an option belongs to."""

    id: int
    name: str = ""


class BookingOption(BaseModel):
    """A bookable option with its course range."""

    id: int
    title: str = ""
    # May contain HTML
    description: str = ""
    course_id: Optional[int] = None

    # 0 or None when unset
    course_start_time: Optional[Timestamp] = None
    course_end_time: Optional[Timestamp] = None
    time_modified: Timestamp

    def has_course_dates(self) -> bool:
        """Check whether both ends of the course range are set.

        Returns:
            True if start and end are both non-zero.
        """
        return bool(self.course_start_time) and bool(self.course_end_time)


class SessionDate(BaseModel):
    """One session of a multi-session option."""

    id: int
    course_start_time: Optional[Timestamp] = None
    course_end_time: Optional[Timestamp] = None


class Identity(BaseModel):
    """A user taking part in a booking, as sender or recipient."""

    email: Optional[str] = None
    firstname: str = ""
    lastname: str = ""

    @property
    def fullname(self) -> str:
        """Display name, falling back to the email address."""
        name = f"{self.firstname} {self.lastname}".strip()
        return name or (self.email or "")


class SiteConfig(BaseModel):
    """Site-wide values the exporter needs."""

    site_identifier: str
    wwwroot: str
    tempdir: str = Field(default_factory=tempfile.gettempdir)
    product_id: str = DEFAULT_PRODUCT_ID

    @field_validator("wwwroot")
    @classmethod
    def wwwroot_has_host(cls, value: str) -> str:
        if not urlparse(value).hostname:
            raise ValueError(f"wwwroot has no hostname: {value!r}")
        return value.rstrip("/")

    @property
    def host(self) -> str:
        return urlparse(self.wwwroot).hostname


class BookingRecord(BaseModel):
    """Everything needed to export one option for one user."""

    booking: Booking
    option: BookingOption
    user: Identity
    from_user: Identity
    session_dates: List[SessionDate] = Field(default_factory=list)
