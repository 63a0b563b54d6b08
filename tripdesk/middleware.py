"""
Access gate for page requests.

API routes do their own auth and always pass through; page paths are checked
against the static role table and, for agency admins, their agency's
approval status.
"""
import logging
from typing import Optional

from fastapi import Request
from fastapi.responses import RedirectResponse
from sqlalchemy import select
from starlette.middleware.base import BaseHTTPMiddleware

from .api.deps import session_token
from .models import AgencyForm, AgencyStatus
from .services.access import (
    agency_gate_redirect,
    dashboard_for,
    is_authorized_for,
    login_redirect,
    post_login_redirect,
    protected_area,
    resolve_role,
)
from .services.security import decode_session_token

logger = logging.getLogger(__name__)

PASS_THROUGH_PREFIXES = ("/api/", "/static/", "/docs", "/redoc", "/openapi.json")
PASS_THROUGH_PATHS = {"/health", "/favicon.ico"}


def _agency_status(request: Request, owner_id: str) -> tuple[bool, Optional[AgencyStatus]]:
    """(form submitted, status) for the agency owned by ``owner_id``."""
    db = request.app.state.session_factory()
    try:
        status = db.scalars(
            select(AgencyForm.status).where(AgencyForm.created_by == owner_id).order_by(AgencyForm.created_at)
        ).first()
    finally:
        db.close()
    return status is not None, status


class AccessGateMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        path = request.url.path

        if path in PASS_THROUGH_PATHS or path.startswith(PASS_THROUGH_PREFIXES):
            return await call_next(request)

        payload = decode_session_token(session_token(request))
        role = resolve_role(payload.get("role"), payload.get("user_type")) if payload else None
        is_agency_admin = role == "AGENCY_ADMIN"

        if path == "/login":
            if payload:
                submitted = _agency_status(request, payload["sub"])[0] if is_agency_admin else None
                return RedirectResponse(post_login_redirect(role, None, submitted), status_code=303)
            return await call_next(request)

        if protected_area(path) is None:
            return await call_next(request)

        if not payload:
            return RedirectResponse(login_redirect(path), status_code=303)

        if not is_authorized_for(path, role):
            logger.info(f"Role {role} may not open {path}")
            return RedirectResponse(dashboard_for(role), status_code=303)

        if is_agency_admin:
            _, status = _agency_status(request, payload["sub"])
            target = agency_gate_redirect(path, status)
            if target and target != path:
                return RedirectResponse(target, status_code=303)

        return await call_next(request)
