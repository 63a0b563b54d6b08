from typing import Optional

from pydantic import Field, field_validator

from ..models.dmc import SharedDmcStatus
from .base import ApiModel


class DmcCreate(ApiModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    destinations: Optional[str] = None


class ShareDmcCreate(ApiModel):
    itinerary_id: str = Field(..., min_length=1)
    dmc_ids: list[str] = Field(..., min_length=1)
    enquiry_id: Optional[str] = None


class ShareDmcUpdate(ApiModel):
    shared_dmc_id: str = Field(..., min_length=1)
    dmc_id: str = Field(..., min_length=1)
    status: SharedDmcStatus

    @field_validator("status", mode="before")
    @classmethod
    def upper_status(cls, v):
        return v.strip().upper() if isinstance(v, str) else v
