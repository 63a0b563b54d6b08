"""Tests for the page access gate."""
from tripdesk.config import settings
from tripdesk.models import AgencyStatus, Role


class TestAccessGate:
    """Test redirects applied to page requests."""

    def test_public_page_is_served(self, client):
        response = client.get("/agency-approved")

        assert response.status_code == 200
        assert "Agency approved" in response.text

    def test_protected_page_requires_login(self, client):
        response = client.get("/dmc/dashboard", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/login?callbackUrl=/dmc/dashboard"

    def test_api_routes_pass_through(self, client):
        """Test the gate leaves API auth to the handlers."""
        assert client.get("/api/enquiries").status_code == 401
        assert client.get("/health").json()["status"] == "healthy"

    def test_wrong_role_goes_to_own_dashboard(self, client, make_user, auth_headers):
        user = make_user(Role.EXECUTIVE)

        response = client.get("/dmc/dashboard", headers=auth_headers(user), follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/executive/dashboard"

    def test_allowed_role_is_served(self, client, make_user, auth_headers):
        user = make_user(Role.DMC)

        response = client.get("/dmc/dashboard", headers=auth_headers(user), follow_redirects=False)

        assert response.status_code == 200

    def test_session_cookie_is_accepted(self, client, make_user):
        from tripdesk.services.security import create_session_token

        user = make_user(Role.DMC)
        client.cookies.set(settings.session_cookie_name, create_session_token(user))

        response = client.get("/dmc/dashboard", follow_redirects=False)

        assert response.status_code == 200

    def test_logged_in_user_skips_login_page(self, client, make_user, auth_headers):
        user = make_user(Role.TEAM_LEAD)

        response = client.get("/login", headers=auth_headers(user), follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/teamlead/dashboard"


class TestAgencyAdminGate:
    """Test agency admins are held back until their agency is approved."""

    def test_no_form_redirects_to_form(self, client, make_user, auth_headers):
        owner = make_user(Role.AGENCY_ADMIN)

        response = client.get("/agency-admin/dashboard", headers=auth_headers(owner), follow_redirects=False)

        assert response.headers["location"] == "/agency-admin/agency-form"

    def test_pending_redirects_to_review(self, client, make_user, make_agency, auth_headers):
        owner = make_user(Role.AGENCY_ADMIN)
        make_agency(owner, AgencyStatus.PENDING)

        response = client.get("/agency-admin/dashboard", headers=auth_headers(owner), follow_redirects=False)

        assert response.headers["location"] == "/agency-admin/under-review"

    def test_review_page_polls_access(self, client, make_user, make_agency, auth_headers):
        owner = make_user(Role.AGENCY_ADMIN)
        make_agency(owner, AgencyStatus.PENDING)

        response = client.get("/agency-admin/under-review", headers=auth_headers(owner))

        assert response.status_code == 200
        assert "/api/agency/access" in response.text

    def test_rejected_redirects_to_rejected_page(self, client, make_user, make_agency, auth_headers):
        owner = make_user(Role.AGENCY_ADMIN)
        make_agency(owner, AgencyStatus.REJECTED)

        response = client.get("/agency-admin/dashboard", headers=auth_headers(owner), follow_redirects=False)

        assert response.headers["location"] == "/agency-rejected"

    def test_active_agency_reaches_dashboard(self, client, make_user, make_agency, auth_headers):
        owner = make_user(Role.AGENCY_ADMIN)
        make_agency(owner, AgencyStatus.ACTIVE)

        response = client.get("/agency-admin/dashboard", headers=auth_headers(owner), follow_redirects=False)

        assert response.status_code == 200

    def test_login_without_form_goes_to_form(self, client, make_user, auth_headers):
        owner = make_user(Role.AGENCY_ADMIN)

        response = client.get("/login", headers=auth_headers(owner), follow_redirects=False)

        assert response.headers["location"] == "/agency-admin/agency-form"
