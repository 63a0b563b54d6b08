"""
Role-based route gate.

A static lookup from role / user type to the dashboard a user lands on and
the page areas they may open. Pure functions; the middleware does the I/O.
"""
from typing import Optional
from urllib.parse import quote

from ..models.agency import AgencyStatus

DEFAULT_DASHBOARD = "/dashboard"

ROLE_DASHBOARDS = {
    "SUPER_ADMIN": "/super-admin/dashboard",
    "ADMIN": "/admin/dashboard",
    "AGENCY_ADMIN": "/agency-admin/dashboard",
    "MANAGER": "/agency/dashboard",
    "EXECUTIVE": "/executive/dashboard",
    "TEAM_LEAD": "/teamlead/dashboard",
    "TL": "/telecaller/dashboard",
    "DMC": "/dmc/dashboard",
}

# Every page area that needs a session
PROTECTED_PREFIXES = (
    "/super-admin",
    "/admin",
    "/agency-admin",
    "/agency",
    "/executive",
    "/teamlead",
    "/telecaller",
    "/dmc",
    "/dashboard",
)

_AGENCY_AREAS = ["/agency-admin", "/agency", "/executive", "/teamlead", "/telecaller"]

ALLOWED_PREFIXES = {
    "SUPER_ADMIN": list(PROTECTED_PREFIXES),
    "ADMIN": ["/admin", "/dmc"] + _AGENCY_AREAS,
    "AGENCY_ADMIN": list(_AGENCY_AREAS),
    "MANAGER": ["/agency", "/executive", "/teamlead", "/telecaller"],
    "EXECUTIVE": ["/executive"],
    "TEAM_LEAD": ["/teamlead", "/telecaller"],
    "TL": ["/telecaller"],
    "DMC": ["/dmc"],
}

# Agency-admin pages reachable whatever the approval status
AGENCY_FORM_PATH = "/agency-admin/agency-form"
UNDER_REVIEW_PATH = "/agency-admin/under-review"
AGENCY_GATE_EXEMPT = {AGENCY_FORM_PATH, UNDER_REVIEW_PATH}


def _under(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix + "/")


def resolve_role(role: Optional[str], user_type: Optional[str] = None) -> str:
    """User type wins over role when it names a known entry."""
    if user_type and user_type.upper() in ROLE_DASHBOARDS:
        return user_type.upper()
    return (role or "").upper()


def dashboard_for(role: Optional[str], user_type: Optional[str] = None) -> str:
    return ROLE_DASHBOARDS.get(resolve_role(role, user_type), DEFAULT_DASHBOARD)


def allowed_prefixes(role: Optional[str], user_type: Optional[str] = None) -> list[str]:
    key = resolve_role(role, user_type)
    return ALLOWED_PREFIXES.get(key, [DEFAULT_DASHBOARD])


def protected_area(path: str) -> Optional[str]:
    """Return the protected prefix a path lives under, if any."""
    for prefix in PROTECTED_PREFIXES:
        if _under(path, prefix):
            return prefix
    return None


def is_authorized_for(path: str, role: Optional[str], user_type: Optional[str] = None) -> bool:
    area = protected_area(path)
    if area is None:
        return True
    return area in allowed_prefixes(role, user_type)


def login_redirect(path: str) -> str:
    return f"/login?callbackUrl={quote(path)}"


def post_login_redirect(role: Optional[str], user_type: Optional[str] = None, agency_form_submitted: Optional[bool] = None) -> str:
    """Where to send a user right after login."""
    if resolve_role(role, user_type) == "AGENCY_ADMIN" and agency_form_submitted is False:
        return AGENCY_FORM_PATH
    return dashboard_for(role, user_type)


def agency_gate_redirect(path: str, status: Optional[AgencyStatus]) -> Optional[str]:
    """Redirect for an agency admin whose registration is not yet approved.

    Returns None when the page may be served.
    """
    if not _under(path, "/agency-admin") or path in AGENCY_GATE_EXEMPT:
        return None
    if status is None:
        return AGENCY_FORM_PATH
    status = AgencyStatus(status)
    if status == AgencyStatus.PENDING:
        return UNDER_REVIEW_PATH
    if status == AgencyStatus.MODIFY:
        return AGENCY_FORM_PATH
    if status == AgencyStatus.REJECTED:
        return "/agency-rejected"
    return None
