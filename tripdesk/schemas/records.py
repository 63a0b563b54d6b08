"""
Bodies for enquiries, itineraries and quotes.
"""
from typing import Any, Optional

from pydantic import Field

from .base import ApiModel


class EnquiryUpdate(ApiModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    locations: Optional[str] = None
    tour_type: Optional[str] = None
    estimated_dates: Optional[str] = None
    currency: Optional[str] = None
    budget: Optional[float] = None
    notes: Optional[str] = None
    assigned_staff: Optional[str] = None
    point_of_contact: Optional[str] = None
    pickup_location: Optional[str] = None
    drop_location: Optional[str] = None
    number_of_travellers: Optional[int] = Field(None, ge=0)
    number_of_kids: Optional[int] = Field(None, ge=0)
    traveling_with_pets: Optional[str] = None
    flights_required: Optional[str] = None
    lead_source: Optional[str] = None
    tags: Optional[str] = None
    must_see_spots: Optional[str] = None
    status: Optional[str] = None
    enquiry_date: Optional[str] = None


class EnquiryCreate(EnquiryUpdate):
    name: str = Field(..., min_length=1)


class ItineraryUpdate(ApiModel):
    enquiry_id: Optional[str] = None
    destinations: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    travel_type: Optional[str] = None
    adults: Optional[int] = Field(None, ge=0)
    children: Optional[int] = Field(None, ge=0)
    under6: Optional[int] = Field(None, ge=0)
    from7to12: Optional[int] = Field(None, ge=0)
    flights_required: Optional[str] = None
    pickup_location: Optional[str] = None
    drop_location: Optional[str] = None
    currency: Optional[str] = None
    budget: Optional[float] = Field(None, ge=0)
    activity_preferences: Optional[str] = None
    hotel_preferences: Optional[str] = None
    meal_preference: Optional[str] = None
    dietary_preference: Optional[str] = None
    transport_preferences: Optional[str] = None
    traveling_with_pets: Optional[str] = None
    additional_requests: Optional[str] = None
    more_details: Optional[str] = None
    must_see_spots: Optional[str] = None
    status: Optional[str] = None
    daily_itinerary: Optional[list[dict[str, Any]]] = None
    accommodation: Optional[list[dict[str, Any]]] = None
    budget_estimation: Optional[dict[str, Any]] = None
    cancellation_policy_type: Optional[str] = None
    custom_cancellation_deadline: Optional[int] = None
    custom_cancellation_terms: Optional[str] = None


class ItineraryCreate(ItineraryUpdate):
    destinations: str = Field(..., min_length=1)
    start_date: str = Field(..., min_length=1)
    end_date: str = Field(..., min_length=1)


class QuoteCreate(ApiModel):
    enquiry_id: str = Field(..., min_length=1)
    dmc_id: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)
    currency: Optional[str] = None
    comments: Optional[str] = None


class QuoteUpdate(ApiModel):
    id: str = Field(..., min_length=1)
    amount: Optional[float] = Field(None, ge=0)
    currency: Optional[str] = None
    comments: Optional[str] = None
    status: Optional[str] = None
