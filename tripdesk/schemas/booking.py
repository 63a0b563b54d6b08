from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from ..models.base import to_naive_utc
from ..models.booking import BookingStatus
from .base import ApiModel


def normalize_booking_status(value) -> BookingStatus:
    """Unknown or empty values fall back to PENDING."""
    if isinstance(value, BookingStatus):
        return value
    try:
        return BookingStatus(str(value or "").strip().upper())
    except ValueError:
        return BookingStatus.PENDING


class BookingProgressCreate(ApiModel):
    date: datetime
    service: str = ""
    status: BookingStatus = BookingStatus.PENDING
    dmc_notes: Optional[str] = None
    enquiry_id: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, v):
        return normalize_booking_status(v)

    @field_validator("date")
    @classmethod
    def utc_date(cls, v):
        return to_naive_utc(v)


class BookingProgressUpdate(ApiModel):
    date: Optional[datetime] = None
    service: Optional[str] = None
    status: Optional[BookingStatus] = None
    dmc_notes: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, v):
        return None if v is None else normalize_booking_status(v)

    @field_validator("date")
    @classmethod
    def utc_date(cls, v):
        return None if v is None else to_naive_utc(v)


class BookingFeedbackCreate(ApiModel):
    note: str = Field(..., min_length=1)
    enquiry_id: Optional[str] = None


class BookingReminderCreate(ApiModel):
    date: datetime
    note: str = Field(..., min_length=1)
    enquiry_id: Optional[str] = None

    @field_validator("date")
    @classmethod
    def utc_date(cls, v):
        return to_naive_utc(v)
