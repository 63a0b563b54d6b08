"""
Agency registration form, posted as multipart form data.
"""
from typing import Optional

from pydantic import Field, field_validator

from ..models.agency import AgencyType, PanType
from .base import ApiModel

REQUIRED_FIELDS = (
    "name",
    "contact_person",
    "email",
    "phone_number",
    "owner_name",
    "company_phone",
    "website",
    "headquarters",
    "country",
)

FILE_FIELDS = ("logo", "businessLicense")


class AgencyFormData(ApiModel):
    name: Optional[str] = None
    contact_person: Optional[str] = None
    designation: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    phone_country_code: Optional[str] = None
    owner_name: Optional[str] = None
    company_phone: Optional[str] = None
    company_phone_code: Optional[str] = None
    website: Optional[str] = None
    landing_page_color: Optional[str] = None
    gst_registered: Optional[bool] = None
    gst_number: Optional[str] = None
    year_of_registration: Optional[int] = Field(None, ge=1800, le=2100)
    pan_number: Optional[str] = None
    pan_type: Optional[PanType] = None
    headquarters: Optional[str] = None
    country: Optional[str] = None
    years_of_operation: Optional[int] = Field(None, ge=0)
    agency_type: Optional[AgencyType] = None

    @field_validator("pan_type", "agency_type", mode="before")
    @classmethod
    def upper_enum(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v


def form_fields(form) -> dict:
    """Non-empty text fields of a submitted form, files excluded."""
    return {
        key: value
        for key, value in form.items()
        if key not in FILE_FIELDS and isinstance(value, str) and value.strip()
    }


def missing_required(data: AgencyFormData) -> list[str]:
    return [name for name in REQUIRED_FIELDS if not getattr(data, name)]
