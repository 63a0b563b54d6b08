"""
Auth helpers shared by the API handlers.
"""
import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..models import AgencyForm, Role, User, UserStatus
from ..services.security import decode_session_token

logger = logging.getLogger(__name__)

ADMIN_ROLES = (Role.SUPER_ADMIN, Role.ADMIN)


def session_token(request: Request) -> Optional[str]:
    """Session JWT from the cookie or an ``Authorization: Bearer`` header."""
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        return token
    auth = request.headers.get("authorization", "")
    if auth.lower().startswith("bearer "):
        return auth[7:].strip() or None
    return None


def get_optional_user(request: Request, db: Session = Depends(get_db)) -> Optional[User]:
    payload = decode_session_token(session_token(request))
    if not payload:
        return None
    user = db.get(User, payload["sub"])
    if user is None or user.status != UserStatus.ACTIVE:
        return None
    return user


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


def require_roles(*roles: Role):
    """Dependency that lets only the given roles through."""
    allowed = {r.value for r in roles}

    def checker(user: User = Depends(get_current_user)) -> User:
        if role_of(user) not in allowed:
            raise HTTPException(status_code=403, detail="Forbidden")
        return user

    return checker


def role_of(user: User) -> str:
    return user.role.value if hasattr(user.role, "value") else str(user.role)


def is_admin(user: Optional[User]) -> bool:
    return user is not None and role_of(user) in {r.value for r in ADMIN_ROLES}


def get_or_404(db: Session, model, record_id: str, label: str):
    record = db.get(model, record_id) if record_id else None
    if record is None:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return record


def ensure_owner(record, user: User) -> None:
    """Only the creating user may read or change the record."""
    if record.user_id != user.id:
        raise HTTPException(status_code=403, detail="Forbidden")


def agency_owner_id(user: User) -> str:
    """Id of the agency admin whose agency this user belongs to."""
    if role_of(user) == Role.AGENCY_ADMIN.value:
        return user.id
    return user.agency_id or user.id


def ensure_agency(record, user: User) -> None:
    """Only members of the record's agency may read or change it."""
    if record.agency_id != agency_owner_id(user):
        raise HTTPException(status_code=403, detail="Forbidden")


def find_agency_form(db: Session, owner_id: str) -> Optional[AgencyForm]:
    return db.scalars(
        select(AgencyForm).where(AgencyForm.created_by == owner_id).order_by(AgencyForm.created_at)
    ).first()
