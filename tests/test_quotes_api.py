"""Tests for DMC quotes, sharing, booking progress and reminders."""
from unittest.mock import patch

from tripdesk.models import BookingStatus, Dmc, Enquiry, Itinerary, Role
from tripdesk.schemas.booking import normalize_booking_status


def _itinerary(db, user, enquiry_id="enq-1"):
    itinerary = Itinerary(
        user_id=user.id,
        enquiry_id=enquiry_id,
        destinations="Kochi, Munnar",
        start_date="2025-01-10",
        end_date="2025-01-12",
        daily_itinerary=[{"day": 1, "date": "10 Jan 25", "title": "Arrival", "activities": []}],
        accommodation=[],
    )
    db.add(itinerary)
    db.commit()
    return itinerary


def _dmc(db, owner, name="Kerala Trails"):
    dmc = Dmc(name=name, email=f"{name.split()[0].lower()}@dmc.example", agency_id=owner.id, created_by=owner.id)
    db.add(dmc)
    db.commit()
    return dmc


def _enquiry(db, owner):
    enquiry = Enquiry(name="Meera Nair", user_id=owner.id, agency_id=owner.id)
    db.add(enquiry)
    db.commit()
    return enquiry


def _quote(client, headers, enquiry_id, amount=100, dmc_id="dmc-1"):
    return client.post(
        "/api/quotes", json={"enquiryId": enquiry_id, "dmcId": dmc_id, "amount": amount}, headers=headers
    )


class TestQuotes:
    """Test one quote per DMC per enquiry."""

    def test_create_and_filter(self, client, db, make_user, auth_headers):
        owner = make_user(Role.AGENCY_ADMIN)
        first, second = _enquiry(db, owner), _enquiry(db, owner)
        headers = auth_headers(owner)

        response = client.post(
            "/api/quotes", json={"enquiryId": first.id, "dmcId": "dmc-1", "amount": 1250.5, "currency": "USD"}, headers=headers
        )

        assert response.status_code == 201
        assert response.json()["quote"]["status"] == "PENDING"
        quotes = client.get("/api/quotes", params={"enquiryId": first.id}, headers=headers).json()["quotes"]
        assert len(quotes) == 1
        assert client.get("/api/quotes", params={"enquiryId": second.id}, headers=headers).json()["quotes"] == []

    def test_staff_see_agency_quotes(self, client, db, make_user, auth_headers):
        owner = make_user(Role.AGENCY_ADMIN)
        staff = make_user(Role.EXECUTIVE, agency_id=owner.id)
        _quote(client, auth_headers(owner), _enquiry(db, owner).id)

        quotes = client.get("/api/quotes", headers=auth_headers(staff)).json()["quotes"]

        assert len(quotes) == 1

    def test_duplicate_returns_existing(self, client, db, make_user, auth_headers):
        """Test a second quote for the same pair is refused with the first one."""
        owner = make_user(Role.AGENCY_ADMIN)
        enquiry = _enquiry(db, owner)
        headers = auth_headers(owner)
        first = _quote(client, headers, enquiry.id).json()["quote"]

        response = _quote(client, headers, enquiry.id, amount=90)

        assert response.status_code == 400
        assert response.json()["quote"]["id"] == first["id"]
        assert response.json()["quote"]["amount"] == 100

    def test_update_status(self, client, db, make_user, auth_headers):
        owner = make_user(Role.AGENCY_ADMIN)
        headers = auth_headers(owner)
        quote = _quote(client, headers, _enquiry(db, owner).id).json()["quote"]

        response = client.put("/api/quotes", json={"id": quote["id"], "status": "accepted"}, headers=headers)

        assert response.json()["quote"]["status"] == "ACCEPTED"

    def test_unknown_enquiry(self, client, make_user, auth_headers):
        response = _quote(client, auth_headers(make_user(Role.AGENCY_ADMIN)), "missing")

        assert response.status_code == 404

    def test_other_agency_is_shut_out(self, client, db, make_user, auth_headers):
        """Test quotes stay inside the agency that owns the enquiry."""
        owner = make_user(Role.AGENCY_ADMIN)
        outsider = make_user(Role.AGENCY_ADMIN)
        enquiry = _enquiry(db, owner)
        quote = _quote(client, auth_headers(owner), enquiry.id).json()["quote"]
        headers = auth_headers(outsider)

        assert client.get("/api/quotes", headers=headers).json()["quotes"] == []
        assert _quote(client, headers, enquiry.id, dmc_id="dmc-2").status_code == 403
        response = client.put("/api/quotes", json={"id": quote["id"], "status": "rejected"}, headers=headers)
        assert response.status_code == 403


class TestShareDmc:
    """Test sending an itinerary to DMCs."""

    def test_share_emails_each_dmc(self, client, db, make_user, auth_headers):
        owner = make_user(Role.AGENCY_ADMIN)
        itinerary = _itinerary(db, owner)
        first, second = _dmc(db, owner, "Kerala Trails"), _dmc(db, owner, "Munnar Escapes")

        with patch("tripdesk.api.dmcs.email.send_dmc_share") as mock_send:
            mock_send.return_value = (True, "sent")
            response = client.post(
                "/api/share-dmc",
                json={"itineraryId": itinerary.id, "dmcIds": [first.id, second.id]},
                headers=auth_headers(owner),
            )

        assert response.status_code == 201
        share = response.json()["share"]
        assert share["enquiry_id"] == "enq-1"
        assert share["status"] == "AWAITING_QUOTES"
        assert sorted(i["dmc_id"] for i in share["items"]) == sorted([first.id, second.id])
        assert all(i["email_sent"] for i in share["items"])
        assert mock_send.call_count == 2

    def test_unknown_dmc(self, client, db, make_user, auth_headers):
        owner = make_user(Role.AGENCY_ADMIN)
        itinerary = _itinerary(db, owner)

        response = client.post(
            "/api/share-dmc", json={"itineraryId": itinerary.id, "dmcIds": ["nope"]}, headers=auth_headers(owner)
        )

        assert response.status_code == 400

    def test_other_agency_dmc_is_unknown(self, client, db, make_user, auth_headers):
        owner = make_user(Role.AGENCY_ADMIN)
        itinerary = _itinerary(db, owner)
        foreign = _dmc(db, make_user(Role.AGENCY_ADMIN), "Goa Coastline")

        with patch("tripdesk.api.dmcs.email.send_dmc_share") as mock_send:
            response = client.post(
                "/api/share-dmc", json={"itineraryId": itinerary.id, "dmcIds": [foreign.id]}, headers=auth_headers(owner)
            )

        assert response.status_code == 400
        assert foreign.id in response.json()["detail"]
        mock_send.assert_not_called()

    def test_accepting_a_dmc_marks_share(self, client, db, make_user, auth_headers):
        owner = make_user(Role.AGENCY_ADMIN)
        itinerary = _itinerary(db, owner)
        dmc = _dmc(db, owner)
        headers = auth_headers(owner)
        share = client.post(
            "/api/share-dmc", json={"itineraryId": itinerary.id, "dmcIds": [dmc.id]}, headers=headers
        ).json()["share"]

        response = client.put(
            "/api/share-dmc",
            json={"sharedDmcId": share["id"], "dmcId": dmc.id, "status": "accepted"},
            headers=headers,
        )

        body = response.json()["share"]
        assert body["status"] == "DMC_SELECTED"
        assert body["items"][0]["status"] == "ACCEPTED"

        listed = client.get("/api/share-dmc", params={"itineraryId": itinerary.id}, headers=headers).json()
        assert [s["id"] for s in listed["shares"]] == [share["id"]]

        assert client.delete("/api/share-dmc", params={"id": share["id"]}, headers=headers).status_code == 200
        assert client.get("/api/share-dmc", headers=headers).json()["shares"] == []


class TestBookingProgress:
    """Test booking progress and feedback on an itinerary."""

    def test_unknown_status_is_pending(self):
        assert normalize_booking_status("whatever") == BookingStatus.PENDING
        assert normalize_booking_status("confirmed") == BookingStatus.CONFIRMED

    def test_add_and_update_progress(self, client, db, make_user, auth_headers):
        user = make_user(Role.DMC)
        itinerary = _itinerary(db, user)
        headers = auth_headers(user)

        response = client.post(
            f"/api/booking-progress/{itinerary.id}",
            json={"date": "2025-01-10T09:00:00Z", "service": "Airport transfer", "status": "bogus"},
            headers=headers,
        )

        assert response.status_code == 201
        progress = response.json()["progress"]
        assert progress["status"] == "PENDING"
        assert progress["enquiry_id"] == "enq-1"

        response = client.put(
            f"/api/booking-progress/{itinerary.id}/{progress['id']}", json={"status": "confirmed"}, headers=headers
        )
        assert response.json()["progress"]["status"] == "CONFIRMED"
        assert response.json()["progress"]["service"] == "Airport transfer"

        listed = client.get(f"/api/booking-progress/{itinerary.id}", headers=headers).json()["progress"]
        assert len(listed) == 1

    def test_progress_on_other_itinerary_is_404(self, client, db, make_user, auth_headers):
        user = make_user(Role.DMC)
        first, second = _itinerary(db, user), _itinerary(db, user)
        headers = auth_headers(user)
        progress = client.post(
            f"/api/booking-progress/{first.id}", json={"date": "2025-01-10T09:00:00"}, headers=headers
        ).json()["progress"]

        response = client.put(
            f"/api/booking-progress/{second.id}/{progress['id']}", json={"status": "confirmed"}, headers=headers
        )

        assert response.status_code == 404

    def test_feedback(self, client, db, make_user, auth_headers):
        user = make_user(Role.AGENCY_ADMIN)
        itinerary = _itinerary(db, user)
        headers = auth_headers(user)

        response = client.post(f"/api/booking-feedback/{itinerary.id}", json={"note": "Hotel upgraded"}, headers=headers)

        assert response.status_code == 201
        feedback = client.get(f"/api/booking-feedback/{itinerary.id}", headers=headers).json()["feedback"]
        assert [f["note"] for f in feedback] == ["Hotel upgraded"]

    def test_offset_dates_are_stored_in_utc(self, client, db, make_user, auth_headers):
        user = make_user(Role.AGENCY_ADMIN)
        itinerary = _itinerary(db, user)

        response = client.post(
            f"/api/booking-progress/{itinerary.id}",
            json={"date": "2025-01-10T10:00:00+05:30", "service": "Houseboat"},
            headers=auth_headers(user),
        )

        assert response.json()["progress"]["date"] == "2025-01-10T04:30:00"

    def test_other_user_is_forbidden(self, client, db, make_user, auth_headers):
        """Test another account can neither read nor change an itinerary's booking."""
        itinerary = _itinerary(db, make_user(Role.AGENCY_ADMIN))
        headers = auth_headers(make_user(Role.USER))

        response = client.post(
            f"/api/booking-progress/{itinerary.id}",
            json={"date": "2025-01-10T09:00:00", "status": "cancelled"},
            headers=headers,
        )

        assert response.status_code == 403
        assert client.get(f"/api/booking-progress/{itinerary.id}", headers=headers).status_code == 403
        assert client.get(f"/api/booking-feedback/{itinerary.id}", headers=headers).status_code == 403
        assert client.post(
            f"/api/booking-feedback/{itinerary.id}", json={"note": "hi"}, headers=headers
        ).status_code == 403


class TestBookingReminders:
    """Test reminders on an itinerary."""

    def test_add_and_list_in_date_order(self, client, db, make_user, auth_headers):
        user = make_user(Role.AGENCY_ADMIN)
        itinerary = _itinerary(db, user)
        headers = auth_headers(user)

        for date, note in (("2025-01-09T09:00:00Z", "Confirm houseboat"), ("2025-01-05T09:00:00Z", "Collect balance")):
            response = client.post(
                f"/api/booking-reminder/{itinerary.id}", json={"date": date, "note": note}, headers=headers
            )
            assert response.status_code == 201

        reminders = client.get(f"/api/booking-reminder/{itinerary.id}", headers=headers).json()["reminders"]
        assert [r["note"] for r in reminders] == ["Collect balance", "Confirm houseboat"]
        assert reminders[0]["enquiry_id"] == "enq-1"

    def test_filter_by_enquiry(self, client, db, make_user, auth_headers):
        user = make_user(Role.AGENCY_ADMIN)
        itinerary = _itinerary(db, user)
        headers = auth_headers(user)
        client.post(
            f"/api/booking-reminder/{itinerary.id}",
            params={"enquiryId": "enq-2"},
            json={"date": "2025-01-05T09:00:00", "note": "Call guest"},
            headers=headers,
        )

        listed = client.get(f"/api/booking-reminder/{itinerary.id}", params={"enquiryId": "enq-2"}, headers=headers)
        assert [r["note"] for r in listed.json()["reminders"]] == ["Call guest"]
        other = client.get(f"/api/booking-reminder/{itinerary.id}", params={"enquiryId": "enq-1"}, headers=headers)
        assert other.json()["reminders"] == []

    def test_missing_note(self, client, db, make_user, auth_headers):
        user = make_user(Role.AGENCY_ADMIN)
        itinerary = _itinerary(db, user)

        response = client.post(
            f"/api/booking-reminder/{itinerary.id}", json={"date": "2025-01-05T09:00:00"}, headers=auth_headers(user)
        )

        assert response.status_code == 400

    def test_other_user_is_forbidden(self, client, db, make_user, auth_headers):
        itinerary = _itinerary(db, make_user(Role.AGENCY_ADMIN))

        response = client.get(f"/api/booking-reminder/{itinerary.id}", headers=auth_headers(make_user(Role.USER)))

        assert response.status_code == 403
