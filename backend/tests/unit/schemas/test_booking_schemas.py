from datetime import date, time

from pydantic import ValidationError
import pytest

from app.schemas.booking import BookingCreate, BookingStatusUpdate

BASE = {
    "court_id": "01HCOURTCOURTCOURTCOURTCOU",
    "user_id": "01HUSERUSERUSERUSERUSERUSE",
    "booking_date": "2024-01-01",
    "start_time": "08:00",
    "end_time": "10:00",
}


def test_parses_dates_and_times():
    request = BookingCreate(**BASE)
    assert request.booking_date == date(2024, 1, 1)
    assert request.start_time == time(8)
    assert request.is_monthly is False
    assert request.status.value == "pending"


def test_amount_is_not_accepted():
    with pytest.raises(ValidationError):
        BookingCreate(**BASE, amount="10.00")


@pytest.mark.parametrize("value", ["2024-01-01T08:00:00", "01/01/2024", "2024-1-1"])
def test_rejects_non_iso_dates(value):
    with pytest.raises(ValidationError):
        BookingCreate(**{**BASE, "booking_date": value})


def test_rejects_bad_time():
    with pytest.raises(ValidationError):
        BookingCreate(**{**BASE, "start_time": "8am"})


def test_cannot_create_cancelled():
    with pytest.raises(ValidationError):
        BookingCreate(**BASE, status="cancelled")


def test_status_update_needs_a_field():
    with pytest.raises(ValidationError):
        BookingStatusUpdate()
    assert BookingStatusUpdate(payment_status="paid").status is None
