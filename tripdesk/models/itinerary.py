from sqlalchemy import JSON, Column, Float, Integer, String, Text

from ..database import Base
from .base import TimestampMixin


class Itinerary(TimestampMixin, Base):
    """A generated/edited day-by-day travel plan tied to an enquiry."""
    __tablename__ = "itineraries"

    enquiry_id = Column(String(32), nullable=True, index=True)
    user_id = Column(String(32), nullable=False, index=True)

    # Traveller request
    destinations = Column(Text, nullable=False)
    start_date = Column(String(32), nullable=False)
    end_date = Column(String(32), nullable=False)
    travel_type = Column(String(64), nullable=True)
    adults = Column(Integer, nullable=False, default=0)
    children = Column(Integer, nullable=False, default=0)
    under6 = Column(Integer, nullable=False, default=0)
    from7to12 = Column(Integer, nullable=False, default=0)
    flights_required = Column(String(16), nullable=False, default="no")
    pickup_location = Column(String(255), nullable=True)
    drop_location = Column(String(255), nullable=True)
    currency = Column(String(8), nullable=False, default="USD")
    budget = Column(Float, nullable=False, default=0)
    activity_preferences = Column(Text, nullable=True)
    hotel_preferences = Column(Text, nullable=True)
    meal_preference = Column(Text, nullable=True)
    dietary_preference = Column(Text, nullable=True)
    transport_preferences = Column(Text, nullable=True)
    traveling_with_pets = Column(String(16), nullable=False, default="no")
    additional_requests = Column(Text, nullable=True)
    more_details = Column(Text, nullable=True)
    must_see_spots = Column(Text, nullable=True)
    status = Column(String(32), nullable=False, default="draft")

    # Generated plan
    daily_itinerary = Column(JSON, nullable=False, default=list)
    accommodation = Column(JSON, nullable=False, default=list)
    budget_estimation = Column(JSON, nullable=True)
    model_used = Column(String(64), nullable=True)
    generation_cost = Column(Float, nullable=True)

    # Cancellation policy
    cancellation_policy_type = Column(String(32), nullable=False, default="DEFAULT")
    custom_cancellation_deadline = Column(Integer, nullable=True)
    custom_cancellation_terms = Column(Text, nullable=True)

    pdf_file_id = Column(String(32), nullable=True)
