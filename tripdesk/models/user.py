from enum import Enum

from sqlalchemy import Boolean, Column, String
from sqlalchemy import Enum as SAEnum

from ..database import Base
from .base import TimestampMixin


class Role(str, Enum):
    """Platform roles and user types."""
    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    AGENCY_ADMIN = "AGENCY_ADMIN"
    MANAGER = "MANAGER"
    EXECUTIVE = "EXECUTIVE"
    TEAM_LEAD = "TEAM_LEAD"
    TL = "TL"
    DMC = "DMC"
    AGENT_USER = "AGENT_USER"
    USER = "USER"


# Roles an agency admin may create for its own staff
STAFF_ROLES = (Role.MANAGER, Role.EXECUTIVE, Role.TEAM_LEAD, Role.TL)


class UserStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class User(TimestampMixin, Base):
    __tablename__ = "users"

    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(SAEnum(Role, native_enum=False, length=32), nullable=False, default=Role.USER)
    user_type = Column(String(32), nullable=True)
    agency_id = Column(String(32), nullable=True, index=True)
    company_name = Column(String(255), nullable=True)
    status = Column(SAEnum(UserStatus, native_enum=False, length=16), nullable=False, default=UserStatus.ACTIVE)
    profile_completed = Column(Boolean, nullable=False, default=True)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.pop("password_hash", None)
        return data
