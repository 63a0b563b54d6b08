from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, String, Text

from ..database import Base
from .base import TimestampMixin


class SentItinerary(TimestampMixin, Base):
    """A record of an itinerary sent to the customer of an enquiry."""
    __tablename__ = "sent_itineraries"

    enquiry_id = Column(String(32), nullable=False, index=True)
    itinerary_id = Column(String(32), nullable=True, index=True)
    customer_name = Column(String(255), nullable=False, default="Unknown Customer")
    email = Column(String(255), nullable=True)
    whatsapp_number = Column(String(32), nullable=True)
    notes = Column(Text, nullable=False, default="")
    status = Column(String(32), nullable=False, default="sent")
    email_sent = Column(Boolean, nullable=False, default=False)
    whatsapp_sent = Column(Boolean, nullable=False, default=False)
    sent_date = Column(DateTime, nullable=False, default=datetime.utcnow)
    created_by = Column(String(32), nullable=False)


class CustomerFeedback(TimestampMixin, Base):
    """Feedback or a change request from the customer of an enquiry."""
    __tablename__ = "customer_feedbacks"

    enquiry_id = Column(String(32), nullable=False, index=True)
    itinerary_id = Column(String(32), nullable=True, index=True)
    type = Column(String(32), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(32), nullable=False, default="pending")
    document_file_id = Column(String(32), nullable=True)
    document_name = Column(String(255), nullable=True)
