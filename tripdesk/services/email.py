"""
Email notifications.

Messages are rendered from Jinja2 templates in ``templates/emails`` and sent
over SMTP with STARTTLS. Every sender returns ``(ok, message)`` and never
raises, so a mail outage cannot fail the request that triggered it.
"""
import logging
import smtplib
from email.message import EmailMessage
from pathlib import Path
from urllib.parse import urlencode

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..config import settings
from .security import create_agency_action_token

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates" / "emails"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
)

STATUS_SUBJECTS = {
    "ACTIVE": "Your agency has been approved",
    "REJECTED": "Your agency registration was not approved",
    "MODIFY": "Changes needed on your agency registration",
    "PENDING": "Your agency registration is under review",
}


def render(template: str, **context) -> str:
    context.setdefault("app_name", settings.app_name)
    context.setdefault("app_url", settings.app_url)
    return _env.get_template(template).render(**context)


def send_email(to_email: str, subject: str, html: str) -> tuple[bool, str]:
    """Send one HTML email."""
    to_email = (to_email or "").strip()
    if not to_email:
        return False, "Missing recipient email"

    if not settings.smtp_host:
        logger.info(f"SMTP not configured, skipping email to {to_email}: {subject}")
        return False, "SMTP is not configured"

    msg = EmailMessage()
    msg["From"] = settings.smtp_from
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.set_content("This message requires an HTML-capable email client.")
    msg.add_alternative(html, subtype="html")

    try:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=25) as server:
            if settings.smtp_starttls:
                server.starttls()
            if settings.smtp_user:
                server.login(settings.smtp_user, settings.smtp_password)
            server.send_message(msg)
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Failed to send email to {to_email}: {e}")
        return False, str(e)

    logger.info(f"Sent email to {to_email}: {subject}")
    return True, "sent"


def approval_link(agency_id: str, action: str) -> str:
    """Absolute URL of an admin transition endpoint for one agency."""
    params = {"agencyId": agency_id}
    if settings.approval_links_require_token:
        params["token"] = create_agency_action_token(agency_id, action)
    return f"{settings.app_url}/api/agencyform/{action}?{urlencode(params)}"


def send_approval_request(agency) -> tuple[bool, str]:
    """Ask the platform admin to review a submitted agency form."""
    links = {action: approval_link(agency.id, action) for action in ("approve", "reject", "modify")}
    html = render("approval_request.html", agency=agency, links=links)
    return send_email(settings.admin_notification_email, f"New agency registration: {agency.name}", html)


def send_agency_status(agency) -> tuple[bool, str]:
    status = agency.status.value if hasattr(agency.status, "value") else agency.status
    html = render("agency_status.html", agency=agency, status=status)
    return send_email(agency.email, STATUS_SUBJECTS.get(status, "Agency registration update"), html)


def send_welcome(user) -> tuple[bool, str]:
    html = render("welcome.html", user=user)
    return send_email(user.email, f"Welcome to {settings.app_name}", html)


def send_staff_credentials(user, password: str, agency_name: str) -> tuple[bool, str]:
    html = render("staff_credentials.html", user=user, password=password, agency_name=agency_name)
    return send_email(user.email, f"Your {agency_name} account", html)


def send_password_reset(user, token: str) -> tuple[bool, str]:
    link = f"{settings.app_url}/reset-password?{urlencode({'token': token})}"
    html = render("password_reset.html", user=user, link=link)
    return send_email(user.email, "Reset your password", html)


def send_enquiry_assigned(staff, enquiry) -> tuple[bool, str]:
    html = render("enquiry_assigned.html", staff=staff, enquiry=enquiry)
    return send_email(staff.email, f"New enquiry assigned: {enquiry.name}", html)


def send_dmc_share(dmc, itinerary, agency_name: str) -> tuple[bool, str]:
    html = render("dmc_share.html", dmc=dmc, itinerary=itinerary, agency_name=agency_name)
    return send_email(dmc.email, f"Quote request from {agency_name}", html)


def send_payment_confirmation(to_email: str, payment) -> tuple[bool, str]:
    html = render("payment_confirmation.html", payment=payment)
    return send_email(to_email, "Payment received", html)


def send_customer_itinerary(to_email: str, customer_name: str, itinerary, agency_name: str, notes: str = "") -> tuple[bool, str]:
    html = render(
        "customer_itinerary.html",
        customer_name=customer_name,
        itinerary=itinerary,
        agency_name=agency_name,
        notes=notes,
    )
    return send_email(to_email, f"Your travel plan from {agency_name}", html)
