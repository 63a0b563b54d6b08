"""Tests for email rendering and delivery."""
from types import SimpleNamespace
from unittest.mock import MagicMock, patch
from urllib.parse import parse_qs, urlparse

from tripdesk.config import settings
from tripdesk.models import AgencyStatus
from tripdesk.services import email
from tripdesk.services.security import verify_agency_action_token


def _agency(**overrides):
    values = {
        "id": "agency-1",
        "name": "Sunrise Holidays",
        "contact_person": "Asha Rao",
        "email": "contact@sunrise.example",
        "phone_number": "9876543210",
        "website": "https://sunrise.example",
        "headquarters": "Bengaluru",
        "country": "INDIA",
        "status": AgencyStatus.PENDING,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


class TestSendEmail:
    """Test SMTP delivery."""

    def test_skips_without_smtp(self):
        ok, message = email.send_email("a@example.com", "Hi", "<p>Hi</p>")

        assert ok is False
        assert message == "SMTP is not configured"

    def test_missing_recipient(self):
        ok, _ = email.send_email("", "Hi", "<p>Hi</p>")

        assert ok is False

    def test_sends_with_starttls(self, monkeypatch):
        monkeypatch.setattr(settings, "smtp_host", "smtp.example.com")
        monkeypatch.setattr(settings, "smtp_user", "mailer")
        monkeypatch.setattr(settings, "smtp_password", "pw")

        with patch("tripdesk.services.email.smtplib.SMTP") as mock_smtp:
            server = MagicMock()
            mock_smtp.return_value.__enter__.return_value = server
            ok, message = email.send_email("a@example.com", "Hi", "<p>Hi</p>")

        assert (ok, message) == (True, "sent")
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("mailer", "pw")
        server.send_message.assert_called_once()

    def test_smtp_failure_is_reported(self, monkeypatch):
        """Test a mail outage returns an error instead of raising."""
        monkeypatch.setattr(settings, "smtp_host", "smtp.example.com")

        with patch("tripdesk.services.email.smtplib.SMTP", side_effect=OSError("connection refused")):
            ok, message = email.send_email("a@example.com", "Hi", "<p>Hi</p>")

        assert ok is False
        assert "connection refused" in message


class TestApprovalEmail:
    """Test the admin approval request."""

    def test_links_carry_signed_tokens(self):
        link = email.approval_link("agency-1", "approve")
        query = parse_qs(urlparse(link).query)

        assert urlparse(link).path == "/api/agencyform/approve"
        assert query["agencyId"] == ["agency-1"]
        assert verify_agency_action_token(query["token"][0], "agency-1", "approve")

    def test_links_without_tokens_when_disabled(self, monkeypatch):
        monkeypatch.setattr(settings, "approval_links_require_token", False)

        assert "token=" not in email.approval_link("agency-1", "reject")

    def test_request_lists_three_actions(self):
        with patch("tripdesk.services.email.send_email", return_value=(True, "sent")) as mock_send:
            email.send_approval_request(_agency())

        to, subject, html = mock_send.call_args.args
        assert to == settings.admin_notification_email
        assert "Sunrise Holidays" in subject
        for action in ("approve", "reject", "modify"):
            assert f"/api/agencyform/{action}" in html

    def test_status_subject(self):
        with patch("tripdesk.services.email.send_email", return_value=(True, "sent")) as mock_send:
            email.send_agency_status(_agency(status=AgencyStatus.ACTIVE))

        to, subject, _ = mock_send.call_args.args
        assert to == "contact@sunrise.example"
        assert subject == "Your agency has been approved"


class TestOtherEmails:
    """Test the remaining templates render."""

    def test_password_reset_link(self):
        user = SimpleNamespace(name="Ravi", email="ravi@example.com")

        with patch("tripdesk.services.email.send_email", return_value=(True, "sent")) as mock_send:
            email.send_password_reset(user, "tok123")

        _, subject, html = mock_send.call_args.args
        assert subject == "Reset your password"
        assert "/reset-password?token=tok123" in html

    def test_staff_credentials_include_password(self):
        user = SimpleNamespace(name="Ravi", email="ravi@example.com", role="EXECUTIVE")

        with patch("tripdesk.services.email.send_email", return_value=(True, "sent")) as mock_send:
            email.send_staff_credentials(user, "Pw#12345xyz", "Sunrise Holidays")

        _, _, html = mock_send.call_args.args
        assert "Pw#12345xyz" in html

    def test_customer_itinerary_lists_days(self):
        itinerary = SimpleNamespace(
            destinations="Alleppey",
            start_date="2025-01-10",
            end_date="2025-01-11",
            daily_itinerary=[{"day": 1, "date": "10 Jan 25", "title": "Houseboat cruise"}],
        )

        with patch("tripdesk.services.email.send_email", return_value=(True, "sent")) as mock_send:
            email.send_customer_itinerary("meera@example.com", "Meera", itinerary, "Sunrise Holidays", "See you soon")

        to_email, subject, html = mock_send.call_args.args
        assert to_email == "meera@example.com"
        assert subject == "Your travel plan from Sunrise Holidays"
        assert "Houseboat cruise" in html
        assert "See you soon" in html
