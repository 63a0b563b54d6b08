"""
Server-rendered placeholder pages the access gate redirects to.
"""
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.templating import Jinja2Templates

from ..config import settings
from ..services.access import AGENCY_FORM_PATH, DEFAULT_DASHBOARD, ROLE_DASHBOARDS, UNDER_REVIEW_PATH

router = APIRouter(tags=["pages"], include_in_schema=False)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates" / "pages"))

PAGES = {
    "/login": ("Log in", "Sign in with your email and password."),
    "/reset-password": ("Reset password", "Choose a new password."),
    AGENCY_FORM_PATH: ("Agency registration", "Tell us about your agency to get started."),
    UNDER_REVIEW_PATH: ("Under review", "Your agency registration is being reviewed. This page updates automatically."),
    "/agency-approved": ("Agency approved", "The agency has been approved."),
    "/agency-rejected": ("Agency rejected", "The agency registration was rejected."),
    "/agency-modification-required": ("Changes requested", "The agency has been asked to update its registration."),
    "/already-processed": ("Already processed", "This registration has already been processed."),
    "/unauthorized": ("Unauthorized", "You do not have access to this page."),
    DEFAULT_DASHBOARD: ("Dashboard", "Welcome back."),
}
PAGES.update({path: ("Dashboard", "Welcome back.") for path in ROLE_DASHBOARDS.values()})


def _render(request: Request, title: str, message: str, status: Optional[str] = None, poll: bool = False):
    return templates.TemplateResponse(
        request,
        "page.html",
        {
            "title": title,
            "message": message,
            "status": status,
            "app_name": settings.app_name,
            "poll_seconds": settings.agency_status_poll_seconds if poll else None,
        },
    )


def _page_handler(title: str, message: str, poll: bool):
    async def handler(request: Request, status: Optional[str] = None):
        return _render(request, title, message, status, poll)
    return handler


for _path, (_title, _message) in PAGES.items():
    router.add_api_route(
        _path,
        _page_handler(_title, _message, _path == UNDER_REVIEW_PATH),
        methods=["GET"],
        name=f"page:{_path}",
    )
