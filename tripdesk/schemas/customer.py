from typing import Optional

from pydantic import Field, field_validator

from .base import ApiModel


class SendToCustomer(ApiModel):
    enquiry_id: str = Field(..., min_length=1)
    itinerary_id: Optional[str] = None
    type: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    customer_name: Optional[str] = None
    email: Optional[str] = None
    whatsapp_number: Optional[str] = None
    notes: str = ""

    @field_validator("type")
    @classmethod
    def channel(cls, v):
        v = v.lower()
        if v not in ("email", "whatsapp"):
            raise ValueError("type must be email or whatsapp")
        return v


class FeedbackCreate(ApiModel):
    enquiry_id: str = Field(..., min_length=1)
    itinerary_id: Optional[str] = None
    type: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: Optional[str] = None


class FeedbackUpdate(ApiModel):
    feedback_id: str = Field(..., min_length=1)
    status: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
