"""
HTTP tests for /api/v1/bookings.

Errors come back as problem+json documents carrying the domain ``code``.
"""

from datetime import date
from decimal import Decimal

import pytest

MONDAY = date(2024, 1, 1)
UNKNOWN_ULID = "01ARZ3NDEKTSV4RRFFQ69G5FAV"
BASE = "/api/v1/bookings"


@pytest.fixture
def priced_court(court, make_segment):
    make_segment(court, MONDAY, "08:00", "12:00", "50")
    return court


def create(client, payload):
    return client.post(BASE, json=payload)


class TestCreateBooking:
    def test_created(self, client, priced_court, booking_payload):
        response = create(client, booking_payload())

        assert response.status_code == 201
        body = response.json()
        booking = body["booking"]
        assert Decimal(str(booking["amount"])) == Decimal("100.00")
        assert booking["court_id"] == priced_court.id
        assert booking["start_time"] == "08:00"
        assert booking["end_time"] == "10:00"
        assert booking["status"] == "pending"
        assert body["partial"] is False
        assert body["recurring_results"] == []

    def test_client_amount_rejected(self, client, priced_court, booking_payload):
        response = create(client, booking_payload(amount="1.00"))

        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"

    def test_malformed_date_rejected(self, client, priced_court, booking_payload):
        response = create(client, booking_payload(on_date="01/01/2024"))
        assert response.status_code == 422

    def test_off_hour_time_rejected(self, client, priced_court, booking_payload):
        response = create(client, booking_payload(start="08:30"))

        assert response.status_code == 400
        assert response.json()["code"] == "TIME_NOT_ON_HOUR"

    def test_conflict(self, client, priced_court, booking_payload, make_booking):
        existing = make_booking(priced_court, MONDAY, "09:00", "10:00")

        response = create(client, booking_payload())

        assert response.status_code == 409
        body = response.json()
        assert body["code"] == "BOOKING_CONFLICT"
        assert body["status"] == 409
        assert body["instance"] == BASE
        assert body["errors"]["conflicting_bookings"][0]["booking_id"] == existing.id

    def test_no_pricing(self, client, court, booking_payload):
        response = create(client, booking_payload())

        assert response.status_code == 422
        assert response.json()["code"] == "NO_PRICING_AVAILABLE"

    def test_unknown_court(self, client, booking_payload):
        payload = booking_payload()
        payload["court_id"] = UNKNOWN_ULID

        response = create(client, payload)

        assert response.status_code == 404
        assert response.json()["code"] == "COURT_NOT_FOUND"

    def test_monthly_partial_returns_multi_status(
        self, client, priced_court, booking_payload, make_booking
    ):
        make_booking(priced_court, date(2024, 1, 8), "08:00", "09:00")

        response = create(
            client, booking_payload(is_monthly=True, subscription_end_date="2024-01-15")
        )

        assert response.status_code == 207
        body = response.json()
        assert body["partial"] is True
        assert "1 of 2" in body["warning"]
        assert Decimal(str(body["booking"]["amount"])) == Decimal("300.00")
        outcomes = {r["booking_date"]: r["success"] for r in body["recurring_results"]}
        assert outcomes == {"2024-01-08": False, "2024-01-15": True}


class TestQuote:
    def test_quote(self, client, priced_court):
        response = client.post(
            f"{BASE}/quote",
            json={
                "court_id": priced_court.id,
                "booking_date": "2024-01-01",
                "start_time": "08:00",
                "end_time": "10:00",
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert Decimal(str(body["amount"])) == Decimal("100.00")
        assert body["week_count"] == 1
        assert body["occurrence_dates"] == ["2024-01-01"]
        assert [h["hour_start"] for h in body["hourly_breakdown"]] == ["08:00", "09:00"]

    def test_quote_does_not_persist(self, client, priced_court):
        client.post(
            f"{BASE}/quote",
            json={
                "court_id": priced_court.id,
                "booking_date": "2024-01-01",
                "start_time": "08:00",
                "end_time": "10:00",
            },
        )
        listing = client.get(BASE, params={"court_id": priced_court.id, "booking_date": "2024-01-01"})
        assert listing.json() == []


class TestReadBookings:
    def test_get_by_id(self, client, priced_court, booking_payload):
        booking_id = create(client, booking_payload()).json()["booking"]["id"]

        response = client.get(f"{BASE}/{booking_id}")

        assert response.status_code == 200
        assert response.json()["id"] == booking_id

    def test_get_unknown(self, client):
        response = client.get(f"{BASE}/{UNKNOWN_ULID}")

        assert response.status_code == 404
        assert response.json()["code"] == "BOOKING_NOT_FOUND"

    def test_get_malformed_id(self, client):
        assert client.get(f"{BASE}/not-a-ulid").status_code == 422

    def test_list_for_court_and_date(self, client, priced_court, booking_payload):
        create(client, booking_payload(start="08:00", end="09:00"))
        create(client, booking_payload(start="10:00", end="11:00"))

        response = client.get(
            BASE, params={"court_id": priced_court.id, "booking_date": "2024-01-01"}
        )

        assert response.status_code == 200
        assert [b["start_time"] for b in response.json()] == ["08:00", "10:00"]

    def test_list_bad_date(self, client, priced_court):
        response = client.get(BASE, params={"court_id": priced_court.id, "booking_date": "tomorrow"})

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_BOOKING_DATE"

    def test_list_bad_court_id(self, client):
        response = client.get(BASE, params={"court_id": "court-1", "booking_date": "2024-01-01"})

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_IDENTIFIER"


class TestChangeBookings:
    def test_edit(self, client, priced_court, booking_payload):
        booking_id = create(client, booking_payload()).json()["booking"]["id"]

        response = client.put(f"{BASE}/{booking_id}", json=booking_payload(end="11:00"))

        assert response.status_code == 200
        booking = response.json()["booking"]
        assert booking["id"] == booking_id
        assert Decimal(str(booking["amount"])) == Decimal("150.00")

    def test_edit_without_status_keeps_payment_state(self, client, priced_court, booking_payload):
        booking_id = create(
            client, booking_payload(status="confirmed", payment_status="paid")
        ).json()["booking"]["id"]

        response = client.put(f"{BASE}/{booking_id}", json=booking_payload(start="09:00", end="11:00"))

        assert response.status_code == 200
        booking = response.json()["booking"]
        assert booking["status"] == "confirmed"
        assert booking["payment_status"] == "paid"

    def test_cancel(self, client, priced_court, booking_payload):
        booking_id = create(client, booking_payload()).json()["booking"]["id"]

        response = client.post(f"{BASE}/{booking_id}/cancel")
        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"

        again = client.post(f"{BASE}/{booking_id}/cancel")
        assert again.status_code == 422
        assert again.json()["code"] == "ALREADY_CANCELLED"

        assert create(client, booking_payload()).status_code == 201

    def test_status_transition(self, client, priced_court, booking_payload):
        booking_id = create(client, booking_payload()).json()["booking"]["id"]

        response = client.patch(
            f"{BASE}/{booking_id}/status", json={"status": "confirmed", "payment_status": "paid"}
        )

        assert response.status_code == 200
        assert response.json()["status"] == "confirmed"
        assert response.json()["payment_status"] == "paid"

    def test_empty_status_update_rejected(self, client, priced_court, booking_payload):
        booking_id = create(client, booking_payload()).json()["booking"]["id"]
        assert client.patch(f"{BASE}/{booking_id}/status", json={}).status_code == 422
