from enum import Enum

from sqlalchemy import Boolean, Column, String, Text
from sqlalchemy import Enum as SAEnum

from ..database import Base
from .base import TimestampMixin


class Dmc(TimestampMixin, Base):
    """A destination management company in an agency's directory."""
    __tablename__ = "dmcs"

    name = Column(String(255), nullable=False)
    contact_person = Column(String(255), nullable=True)
    email = Column(String(255), nullable=False)
    phone = Column(String(32), nullable=True)
    destinations = Column(Text, nullable=True)
    agency_id = Column(String(32), nullable=True, index=True)
    created_by = Column(String(32), nullable=False, index=True)


class SharedDmcStatus(str, Enum):
    PENDING = "PENDING"
    QUOTED = "QUOTED"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class SharedDmc(TimestampMixin, Base):
    """An itinerary sent to one or more DMCs for quoting."""
    __tablename__ = "shared_dmcs"

    itinerary_id = Column(String(32), nullable=False, index=True)
    enquiry_id = Column(String(32), nullable=False, index=True)
    status = Column(String(32), nullable=False, default="AWAITING_QUOTES")
    created_by = Column(String(32), nullable=False, index=True)


class SharedDmcItem(TimestampMixin, Base):
    __tablename__ = "shared_dmc_items"

    shared_dmc_id = Column(String(32), nullable=False, index=True)
    dmc_id = Column(String(32), nullable=False, index=True)
    status = Column(SAEnum(SharedDmcStatus, native_enum=False, length=16), nullable=False, default=SharedDmcStatus.PENDING)
    email_sent = Column(Boolean, nullable=False, default=False)
