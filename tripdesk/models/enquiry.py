from sqlalchemy import Column, Float, Integer, String, Text

from ..database import Base
from .base import TimestampMixin


class Enquiry(TimestampMixin, Base):
    """A customer lead captured by an agency."""
    __tablename__ = "enquiries"

    name = Column(String(255), nullable=False)
    phone = Column(String(32), nullable=True)
    email = Column(String(255), nullable=True)
    locations = Column(Text, nullable=True)
    tour_type = Column(String(64), nullable=True)
    estimated_dates = Column(String(128), nullable=True)
    currency = Column(String(8), nullable=True)
    budget = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    assigned_staff = Column(String(32), nullable=True)
    point_of_contact = Column(String(255), nullable=True)
    pickup_location = Column(String(255), nullable=True)
    drop_location = Column(String(255), nullable=True)
    number_of_travellers = Column(Integer, nullable=True)
    number_of_kids = Column(Integer, nullable=True)
    traveling_with_pets = Column(String(16), nullable=True)
    flights_required = Column(String(16), nullable=True)
    lead_source = Column(String(64), nullable=True)
    tags = Column(String(255), nullable=True)
    must_see_spots = Column(Text, nullable=True)
    status = Column(String(32), nullable=False, default="enquiry")
    enquiry_date = Column(String(32), nullable=True)
    agency_id = Column(String(32), nullable=True, index=True)
    user_id = Column(String(32), nullable=False, index=True)
