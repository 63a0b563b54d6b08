"""Tests for sharing itineraries with customers and their feedback."""
from unittest.mock import patch

from tripdesk.models import CustomerFeedback, Enquiry, Itinerary, Role


def _enquiry(db, owner, email="meera@example.com"):
    enquiry = Enquiry(name="Meera Nair", email=email, phone="9845012345", user_id=owner.id, agency_id=owner.id)
    db.add(enquiry)
    db.commit()
    return enquiry


def _itinerary(db, owner, enquiry):
    itinerary = Itinerary(
        user_id=owner.id,
        enquiry_id=enquiry.id,
        destinations="Alleppey",
        start_date="2025-01-10",
        end_date="2025-01-11",
        daily_itinerary=[{"day": 1, "date": "10 Jan 25", "title": "Houseboat", "activities": []}],
        accommodation=[],
    )
    db.add(itinerary)
    db.commit()
    return itinerary


class TestSendToCustomer:
    """Test recording itineraries sent to a customer."""

    def test_email_channel_mails_the_customer(self, client, db, make_user, make_agency, auth_headers):
        owner = make_user(Role.AGENCY_ADMIN)
        make_agency(owner)
        enquiry = _enquiry(db, owner)
        itinerary = _itinerary(db, owner, enquiry)

        with patch("tripdesk.api.customers.email.send_customer_itinerary") as mock_send:
            mock_send.return_value = (True, "sent")
            response = client.post(
                "/api/share-customer",
                json={"enquiryId": enquiry.id, "itineraryId": itinerary.id, "type": "email", "title": "Kerala plan"},
                headers=auth_headers(owner),
            )

        assert response.status_code == 201
        sent = response.json()["sent_itinerary"]
        assert sent["email"] == "meera@example.com"
        assert sent["customer_name"] == "Meera Nair"
        assert sent["email_sent"] is True
        assert sent["whatsapp_sent"] is False
        to_email, name, mailed, agency_name, _ = mock_send.call_args.args
        assert (to_email, name, mailed.id, agency_name) == ("meera@example.com", "Meera Nair", itinerary.id, "Sunrise Holidays")

    def test_whatsapp_channel_is_only_recorded(self, client, db, make_user, auth_headers):
        owner = make_user(Role.AGENCY_ADMIN)
        enquiry = _enquiry(db, owner)

        with patch("tripdesk.api.customers.email.send_customer_itinerary") as mock_send:
            response = client.post(
                "/api/share-customer",
                json={"enquiryId": enquiry.id, "type": "WhatsApp", "title": "Kerala plan"},
                headers=auth_headers(owner),
            )

        sent = response.json()["sent_itinerary"]
        assert sent["whatsapp_sent"] is True
        assert sent["whatsapp_number"] == "9845012345"
        mock_send.assert_not_called()

    def test_email_needs_an_address(self, client, db, make_user, auth_headers):
        owner = make_user(Role.AGENCY_ADMIN)
        enquiry = _enquiry(db, owner, email=None)

        response = client.post(
            "/api/share-customer",
            json={"enquiryId": enquiry.id, "type": "email", "title": "Kerala plan"},
            headers=auth_headers(owner),
        )

        assert response.status_code == 400

    def test_unknown_channel(self, client, db, make_user, auth_headers):
        owner = make_user(Role.AGENCY_ADMIN)
        enquiry = _enquiry(db, owner)

        response = client.post(
            "/api/share-customer",
            json={"enquiryId": enquiry.id, "type": "fax", "title": "Kerala plan"},
            headers=auth_headers(owner),
        )

        assert response.status_code == 400

    def test_itinerary_of_another_enquiry(self, client, db, make_user, auth_headers):
        owner = make_user(Role.AGENCY_ADMIN)
        enquiry, other = _enquiry(db, owner), _enquiry(db, owner)
        itinerary = _itinerary(db, owner, other)

        response = client.post(
            "/api/share-customer",
            json={"enquiryId": enquiry.id, "itineraryId": itinerary.id, "type": "whatsapp", "title": "Plan"},
            headers=auth_headers(owner),
        )

        assert response.status_code == 400


class TestCustomerDashboard:
    """Test the per-customer overview."""

    def test_lists_itineraries_feedback_and_history(self, client, db, make_user, auth_headers):
        owner = make_user(Role.AGENCY_ADMIN)
        enquiry = _enquiry(db, owner)
        itinerary = _itinerary(db, owner, enquiry)
        headers = auth_headers(owner)
        client.post(
            "/api/share-customer",
            json={"enquiryId": enquiry.id, "itineraryId": itinerary.id, "type": "whatsapp", "title": "Plan"},
            headers=headers,
        )
        client.post(
            "/api/share-customer/feedback",
            json={"enquiryId": enquiry.id, "itineraryId": itinerary.id, "type": "change", "title": "Add a spa day"},
            headers=headers,
        )

        body = client.get("/api/share-customer", params={"enquiryId": enquiry.id}, headers=headers).json()

        assert body["customer"]["name"] == "Meera Nair"
        assert body["customer"]["whatsapp_number"] == "9845012345"
        assert [i["id"] for i in body["itineraries"]] == [itinerary.id]
        assert body["itineraries"][0]["pdf_status"] == "missing"
        assert [f["title"] for f in body["feedbacks"]] == ["Add a spa day"]
        assert body["feedbacks"][0]["status"] == "pending"
        assert len(body["sent_itineraries"]) == 1

    def test_itinerary_only_finds_its_enquiry(self, client, db, make_user, auth_headers):
        owner = make_user(Role.AGENCY_ADMIN)
        enquiry = _enquiry(db, owner)
        itinerary = _itinerary(db, owner, enquiry)

        body = client.get(
            "/api/share-customer", params={"itineraryId": itinerary.id}, headers=auth_headers(owner)
        ).json()

        assert body["customer"]["id"] == enquiry.id

    def test_needs_an_enquiry(self, client, make_user, auth_headers):
        response = client.get("/api/share-customer", headers=auth_headers(make_user(Role.AGENCY_ADMIN)))

        assert response.status_code == 400

    def test_other_agency_is_forbidden(self, client, db, make_user, auth_headers):
        enquiry = _enquiry(db, make_user(Role.AGENCY_ADMIN))

        response = client.get(
            "/api/share-customer", params={"enquiryId": enquiry.id}, headers=auth_headers(make_user(Role.AGENCY_ADMIN))
        )

        assert response.status_code == 403


class TestCustomerFeedback:
    """Test editing and removing customer feedback."""

    def _feedback(self, client, headers, enquiry):
        return client.post(
            "/api/share-customer/feedback",
            json={"enquiryId": enquiry.id, "type": "query", "title": "Is breakfast included?"},
            headers=headers,
        ).json()["feedback"]

    def test_update_keeps_blank_fields(self, client, db, make_user, auth_headers):
        owner = make_user(Role.AGENCY_ADMIN)
        headers = auth_headers(owner)
        feedback = self._feedback(client, headers, _enquiry(db, owner))

        response = client.put(
            "/api/share-customer", json={"feedbackId": feedback["id"], "status": "resolved", "title": ""}, headers=headers
        )

        body = response.json()["feedback"]
        assert body["status"] == "resolved"
        assert body["title"] == "Is breakfast included?"

    def test_delete(self, client, db, make_user, auth_headers):
        owner = make_user(Role.AGENCY_ADMIN)
        headers = auth_headers(owner)
        feedback = self._feedback(client, headers, _enquiry(db, owner))

        response = client.delete("/api/share-customer", params={"feedbackId": feedback["id"]}, headers=headers)

        assert response.status_code == 200
        db.expire_all()
        assert db.get(CustomerFeedback, feedback["id"]) is None

    def test_other_agency_cannot_touch_feedback(self, client, db, make_user, auth_headers):
        owner = make_user(Role.AGENCY_ADMIN)
        feedback = self._feedback(client, auth_headers(owner), _enquiry(db, owner))
        headers = auth_headers(make_user(Role.AGENCY_ADMIN))

        update = client.put("/api/share-customer", json={"feedbackId": feedback["id"], "status": "closed"}, headers=headers)
        delete = client.delete("/api/share-customer", params={"feedbackId": feedback["id"]}, headers=headers)

        assert update.status_code == 403
        assert delete.status_code == 403
