"""
Sign up, log in and session endpoints.
"""
import logging
from typing import Optional, Union

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Response
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..models import Role, User, UserStatus
from ..schemas.auth import LoginRequest, PasswordResetConfirm, ResetPasswordRequest, SignupRequest
from ..services import email
from ..services.access import post_login_redirect
from ..services.security import (
    create_password_reset_token,
    create_session_token,
    hash_password,
    verify_password,
    verify_password_reset_token,
)
from .deps import agency_owner_id, find_agency_form, get_current_user, get_optional_user, role_of

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

# User types open to self sign-up; staff and platform admins are created by others
SIGNUP_TYPES = {Role.AGENCY_ADMIN.value, Role.DMC.value, Role.USER.value, Role.AGENT_USER.value}


def find_user_by_email(db: Session, address: str) -> Optional[User]:
    return db.scalars(select(User).where(User.email == address.strip().lower())).first()


def session_info(db: Session, user: User) -> dict:
    """The user's profile plus what the front end needs to route them."""
    role = role_of(user)
    submitted = None
    agency_status = None
    if role == Role.AGENCY_ADMIN.value or user.agency_id:
        form = find_agency_form(db, agency_owner_id(user))
        submitted = form is not None
        agency_status = form.status.value if form else None
    return {
        "user": user.to_dict(),
        "agency_form_submitted": submitted,
        "agency_status": agency_status,
        "redirect_to": post_login_redirect(role, user.user_type, submitted),
    }


@router.post("/signup", status_code=201)
async def signup(body: SignupRequest, background_tasks: BackgroundTasks, db: Session = Depends(get_db)):
    """Create an account."""
    user_type = (body.user_type or Role.AGENCY_ADMIN.value).upper()
    if user_type not in SIGNUP_TYPES:
        raise HTTPException(status_code=400, detail=f"User type must be one of: {', '.join(sorted(SIGNUP_TYPES))}")

    if find_user_by_email(db, body.email):
        raise HTTPException(status_code=400, detail="User with this email already exists")

    user = User(
        name=body.name,
        email=body.email,
        password_hash=hash_password(body.password),
        role=Role(user_type),
        user_type=user_type,
        company_name=body.company_name,
        status=UserStatus.ACTIVE,
        profile_completed=user_type != Role.AGENCY_ADMIN.value,
    )
    db.add(user)
    db.flush()
    if user_type == Role.AGENCY_ADMIN.value:
        user.agency_id = user.id
    db.commit()
    db.refresh(user)
    logger.info(f"New {user_type} account {user.id}")

    background_tasks.add_task(email.send_welcome, user)
    return {"message": "User created successfully", "user": user.to_dict()}


@router.post("/login")
async def login(body: LoginRequest, response: Response, db: Session = Depends(get_db)):
    user = find_user_by_email(db, body.email)
    if user is None or not verify_password(body.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")
    if user.status != UserStatus.ACTIVE:
        raise HTTPException(status_code=403, detail="Account is inactive")

    token = create_session_token(user)
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        samesite="lax",
        secure=not settings.debug,
    )
    logger.info(f"User {user.id} logged in")
    return {"token": token, **session_info(db, user)}


@router.post("/logout")
async def logout(response: Response):
    response.delete_cookie(settings.session_cookie_name)
    return {"message": "Logged out"}


@router.get("/session")
async def get_session(user: Optional[User] = Depends(get_optional_user), db: Session = Depends(get_db)):
    """Current session, or ``authenticated: false``."""
    if user is None:
        return {"authenticated": False, "user": None}
    return {"authenticated": True, **session_info(db, user)}


@router.get("/whoami")
async def whoami(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return session_info(db, user)


@router.post("/reset-password")
async def reset_password(
    body: Union[PasswordResetConfirm, ResetPasswordRequest],
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    """
    Two steps on one endpoint: ``{email}`` mails a reset link,
    ``{token, password}`` sets the new password.
    """
    if isinstance(body, ResetPasswordRequest):
        user = find_user_by_email(db, body.email)
        if user is not None:
            background_tasks.add_task(email.send_password_reset, user, create_password_reset_token(user))
            logger.info(f"Password reset requested for {user.id}")
        # Same answer whether or not the address is known
        return {"message": "If the email exists, a reset link has been sent"}

    payload = verify_password_reset_token(body.token)
    user = db.get(User, payload["sub"]) if payload else None
    if user is None or payload.get("pwd") != user.password_hash[-12:]:
        raise HTTPException(status_code=400, detail="Invalid or expired reset token")

    user.password_hash = hash_password(body.password)
    db.commit()
    logger.info(f"Password reset for {user.id}")
    return {"message": "Password reset successfully"}
