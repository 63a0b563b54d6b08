"""
Agency staff accounts, managed by the agency admin.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import STAFF_ROLES, Role, User, UserStatus
from ..schemas.auth import StaffCreate
from ..services import email
from ..services.security import generate_password, hash_password
from .auth import find_user_by_email
from .deps import find_agency_form, get_or_404, require_roles

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth/agency-add-user", tags=["staff"])

STAFF_ROLE_VALUES = {r.value for r in STAFF_ROLES}


@router.get("")
async def list_staff(user: User = Depends(require_roles(Role.AGENCY_ADMIN)), db: Session = Depends(get_db)):
    staff = db.scalars(
        select(User)
        .where(User.agency_id == user.id, User.id != user.id)
        .order_by(User.created_at.desc())
    ).all()
    return {"users": [s.to_dict() for s in staff]}


@router.post("", status_code=201)
async def add_staff(
    body: StaffCreate,
    user: User = Depends(require_roles(Role.AGENCY_ADMIN)),
    db: Session = Depends(get_db),
):
    """Create a staff login and mail the credentials."""
    if body.role not in STAFF_ROLE_VALUES:
        raise HTTPException(status_code=400, detail=f"Role must be one of: {', '.join(sorted(STAFF_ROLE_VALUES))}")
    if find_user_by_email(db, body.email):
        raise HTTPException(status_code=400, detail="User with this email already exists")

    password = body.password or generate_password()
    agency = find_agency_form(db, user.id)
    agency_name = agency.name if agency else (user.company_name or "Your agency")

    staff = User(
        name=body.name,
        email=body.email,
        password_hash=hash_password(password),
        role=Role(body.role),
        user_type=body.role,
        agency_id=user.id,
        company_name=agency_name,
        status=UserStatus.ACTIVE,
    )
    db.add(staff)
    db.commit()
    db.refresh(staff)
    logger.info(f"Agency {user.id} added {body.role} {staff.id}")

    sent, _ = await run_in_threadpool(email.send_staff_credentials, staff, password, agency_name)
    return {"user": staff.to_dict(), "email_sent": sent}


@router.delete("/{user_id}")
async def remove_staff(
    user_id: str,
    user: User = Depends(require_roles(Role.AGENCY_ADMIN)),
    db: Session = Depends(get_db),
):
    staff = get_or_404(db, User, user_id, "User")
    if staff.agency_id != user.id or staff.id == user.id:
        raise HTTPException(status_code=403, detail="Forbidden")
    db.delete(staff)
    db.commit()
    logger.info(f"Agency {user.id} removed user {user_id}")
    return {"message": "User deleted successfully"}
