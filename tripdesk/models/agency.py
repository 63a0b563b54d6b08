from enum import Enum

from sqlalchemy import Boolean, Column, Integer, String, Text
from sqlalchemy import Enum as SAEnum

from ..database import Base
from .base import TimestampMixin


class AgencyStatus(str, Enum):
    """Approval state of an agency registration."""
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    REJECTED = "REJECTED"
    MODIFY = "MODIFY"


class AgencyType(str, Enum):
    PRIVATE_LIMITED = "PRIVATE_LIMITED"
    PROPRIETORSHIP = "PROPRIETORSHIP"
    PARTNERSHIP = "PARTNERSHIP"
    PUBLIC_LIMITED = "PUBLIC_LIMITED"
    LLP = "LLP"
    TOUR_OPERATOR = "TOUR_OPERATOR"
    TRAVEL_AGENT = "TRAVEL_AGENT"
    DMC = "DMC"
    OTHER = "OTHER"
    ONLINE_TRAVEL_AGENCY = "ONLINE_TRAVEL_AGENCY"
    CORPORATE_TRAVEL = "CORPORATE_TRAVEL"
    ADVENTURE_TRAVEL = "ADVENTURE_TRAVEL"
    LUXURY_TRAVEL = "LUXURY_TRAVEL"
    BUDGET_TRAVEL = "BUDGET_TRAVEL"
    SPECIALIZED_TRAVEL = "SPECIALIZED_TRAVEL"


class PanType(str, Enum):
    INDIVIDUAL = "INDIVIDUAL"
    COMPANY = "COMPANY"
    TRUST = "TRUST"
    OTHER = "OTHER"
    ASSOCIATION = "ASSOCIATION"
    HUF = "HUF"
    GOVERNMENT = "GOVERNMENT"
    PARTNERSHIP = "PARTNERSHIP"


class AgencyForm(TimestampMixin, Base):
    """An agency's registration details and approval status."""
    __tablename__ = "agency_forms"

    name = Column(String(255), nullable=False)
    contact_person = Column(String(255), nullable=False)
    designation = Column(String(255), nullable=True)
    email = Column(String(255), nullable=False)
    phone_number = Column(String(32), nullable=False)
    phone_country_code = Column(String(8), nullable=False, default="+91")
    owner_name = Column(String(255), nullable=False)
    company_phone = Column(String(32), nullable=False)
    company_phone_code = Column(String(8), nullable=False, default="+91")
    website = Column(String(255), nullable=False)
    landing_page_color = Column(String(16), nullable=False, default="#4ECDC4")
    gst_registered = Column(Boolean, nullable=False, default=False)
    gst_number = Column(String(32), nullable=True)
    year_of_registration = Column(Integer, nullable=True)
    pan_number = Column(String(16), nullable=True)
    pan_type = Column(SAEnum(PanType, native_enum=False, length=32), nullable=True)
    headquarters = Column(Text, nullable=False)
    country = Column(String(64), nullable=False, default="INDIA")
    years_of_operation = Column(Integer, nullable=True)
    agency_type = Column(SAEnum(AgencyType, native_enum=False, length=32), nullable=True)
    logo_path = Column(String(512), nullable=True)
    business_license_path = Column(String(512), nullable=True)
    status = Column(
        SAEnum(AgencyStatus, native_enum=False, length=16, validate_strings=True),
        nullable=False,
        default=AgencyStatus.PENDING,
    )
    created_by = Column(String(32), nullable=False, index=True)
