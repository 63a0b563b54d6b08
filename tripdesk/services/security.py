"""
Password hashing and signed tokens.

Three kinds of JWT are issued with the same secret:
- session tokens (``scope=session``) carried in the session cookie or a
  bearer header, holding the user's id, role and user type;
- approval-link tokens (``scope=agency-action``) embedded in the admin email,
  bound to one agency id and one action;
- password-reset tokens (``scope=password-reset``) mailed to the user.
"""
import logging
import secrets
import string
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from ..config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

SESSION_SCOPE = "session"
AGENCY_ACTION_SCOPE = "agency-action"
PASSWORD_RESET_SCOPE = "password-reset"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False
    return pwd_context.verify(password, password_hash)


def generate_password(length: int = 12) -> str:
    """Generate a reasonably strong password."""
    length = max(10, int(length or 12))
    alphabet = string.ascii_letters + string.digits
    symbols = "@#$%&*_-+!"
    # Ensure complexity: 1 upper, 1 lower, 1 digit, 1 symbol
    pw = [
        secrets.choice(string.ascii_uppercase),
        secrets.choice(string.ascii_lowercase),
        secrets.choice(string.digits),
        secrets.choice(symbols),
    ]
    for _ in range(length - len(pw)):
        pw.append(secrets.choice(alphabet + symbols))
    secrets.SystemRandom().shuffle(pw)
    return "".join(pw)


def _encode(claims: dict, max_age_seconds: int) -> str:
    now = datetime.now(timezone.utc)
    payload = dict(claims)
    payload["iat"] = now
    payload["exp"] = now + timedelta(seconds=max_age_seconds)
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def _decode(token: str, scope: str) -> Optional[dict]:
    if not token:
        return None
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        logger.debug(f"Rejected {scope} token: {e}")
        return None
    if payload.get("scope") != scope:
        return None
    return payload


def create_session_token(user) -> str:
    """Sign the session claims for a logged-in user."""
    return _encode(
        {
            "sub": user.id,
            "scope": SESSION_SCOPE,
            "email": user.email,
            "role": user.role.value if hasattr(user.role, "value") else user.role,
            "user_type": user.user_type,
            "agency_id": user.agency_id,
        },
        settings.session_max_age_seconds,
    )


def decode_session_token(token: str) -> Optional[dict]:
    payload = _decode(token, SESSION_SCOPE)
    if payload and payload.get("sub"):
        return payload
    return None


def create_agency_action_token(agency_id: str, action: str) -> str:
    return _encode(
        {"sub": agency_id, "scope": AGENCY_ACTION_SCOPE, "action": action},
        settings.approval_link_max_age_seconds,
    )


def verify_agency_action_token(token: str, agency_id: str, action: str) -> bool:
    """True when the token was issued for exactly this agency and action."""
    payload = _decode(token, AGENCY_ACTION_SCOPE)
    if not payload:
        return False
    return payload.get("sub") == agency_id and payload.get("action") == action


def create_password_reset_token(user) -> str:
    # Bound to the current hash so the link stops working once used
    return _encode(
        {"sub": user.id, "scope": PASSWORD_RESET_SCOPE, "pwd": user.password_hash[-12:]},
        settings.password_reset_max_age_seconds,
    )


def verify_password_reset_token(token: str) -> Optional[dict]:
    return _decode(token, PASSWORD_RESET_SCOPE)
