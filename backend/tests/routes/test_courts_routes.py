from datetime import date
from decimal import Decimal

from app.core.exceptions import RepositoryException
from app.repositories.conflict_checker_repository import ConflictCheckerRepository

MONDAY = date(2024, 1, 1)


def availability_url(court_id: str) -> str:
    return f"/api/v1/courts/{court_id}/availability"


def test_availability(client, court, make_segment, make_booking):
    make_segment(court, MONDAY, "08:00", "10:00", "50")
    make_booking(court, MONDAY, "09:00", "10:00")

    response = client.get(availability_url(court.id), params={"date": "2024-01-01"})

    assert response.status_code == 200
    body = response.json()
    assert body["court_id"] == court.id
    assert body["date"] == "2024-01-01"
    assert body["day_of_week"] == 1
    assert body["is_holiday"] is False
    assert [(s["start_time"], s["available"], s["reason"]) for s in body["slots"]] == [
        ("08:00", True, None),
        ("09:00", False, "Already booked"),
    ]
    assert Decimal(str(body["slots"][0]["price"])) == Decimal("50")


def test_availability_without_segments(client, court):
    response = client.get(availability_url(court.id), params={"date": "2024-01-07"})

    assert response.status_code == 200
    assert response.json()["day_of_week"] == 0
    assert response.json()["slots"] == []


def test_availability_bad_date(client, court):
    response = client.get(availability_url(court.id), params={"date": "2024-13-01"})

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_DATE"


def test_availability_unknown_court(client):
    response = client.get(
        availability_url("01ARZ3NDEKTSV4RRFFQ69G5FAV"), params={"date": "2024-01-01"}
    )

    assert response.status_code == 404
    assert response.json()["code"] == "COURT_NOT_FOUND"


def test_availability_lookup_failure_is_coded_500(client, court, make_segment, monkeypatch):
    def failing_lookup(self, court_id, window_start, window_end):
        raise RepositoryException("db down")

    make_segment(court, MONDAY, "08:00", "10:00")
    monkeypatch.setattr(ConflictCheckerRepository, "get_blocks_in_window", failing_lookup)

    response = client.get(availability_url(court.id), params={"date": "2024-01-01"})

    assert response.status_code == 500
    assert response.json()["code"] == "AVAILABILITY_LOOKUP_FAILED"
