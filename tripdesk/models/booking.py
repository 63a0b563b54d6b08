from enum import Enum

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy import Enum as SAEnum

from ..database import Base
from .base import TimestampMixin


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    NOT_INCLUDED = "NOT_INCLUDED"
    CANCELLED = "CANCELLED"


class BookingProgress(TimestampMixin, Base):
    """Progress of one booked service on an itinerary."""
    __tablename__ = "booking_progress"

    itinerary_id = Column(String(32), nullable=False, index=True)
    enquiry_id = Column(String(32), nullable=True, index=True)
    date = Column(DateTime, nullable=False)
    service = Column(String(255), nullable=False, default="")
    status = Column(SAEnum(BookingStatus, native_enum=False, length=16), nullable=False, default=BookingStatus.PENDING)
    dmc_notes = Column(Text, nullable=True)


class BookingFeedback(TimestampMixin, Base):
    __tablename__ = "booking_feedback"

    itinerary_id = Column(String(32), nullable=False, index=True)
    enquiry_id = Column(String(32), nullable=True, index=True)
    note = Column(Text, nullable=False)


class BookingReminder(TimestampMixin, Base):
    __tablename__ = "booking_reminders"

    itinerary_id = Column(String(32), nullable=False, index=True)
    enquiry_id = Column(String(32), nullable=True, index=True)
    date = Column(DateTime, nullable=False)
    note = Column(Text, nullable=False)
