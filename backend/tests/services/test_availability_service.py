from datetime import date, datetime, time
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from app.core.exceptions import (
    BusinessRuleException,
    NotFoundException,
    RepositoryException,
    ServiceException,
)
from app.models import Court
from app.repositories.booking_repository import BookingRepository
from app.repositories.conflict_checker_repository import ConflictCheckerRepository
from app.services.availability_service import AvailabilityService

MONDAY = date(2024, 1, 1)
SATURDAY = date(2024, 1, 6)


def slot_times(availability):
    return [(s.start_time, s.end_time) for s in availability.slots]


class TestListAvailableSlots:
    def test_segment_cut_into_hour_slots(self, db, court, make_segment):
        make_segment(court, MONDAY, "08:00", "11:00", "50")

        availability = AvailabilityService(db).list_available_slots(court.id, MONDAY)

        assert availability.court_id == court.id
        assert availability.is_holiday is False
        assert slot_times(availability) == [
            (time(8), time(9)),
            (time(9), time(10)),
            (time(10), time(11)),
        ]
        assert all(s.available and s.reason is None for s in availability.slots)
        assert {s.price for s in availability.slots} == {Decimal("50")}
        assert {s.price_kind for s in availability.slots} == {"standard"}

    def test_last_slot_truncated_at_segment_end(self, db, court, make_segment):
        make_segment(court, MONDAY, "08:00", "11:00", min_booking_time=90)
        availability = AvailabilityService(db).list_available_slots(court.id, MONDAY)
        assert slot_times(availability) == [(time(8), time(9, 30)), (time(9, 30), time(11))]

    def test_booked_and_blocked_slots_marked(self, db, court, make_segment, make_booking, make_block):
        make_segment(court, MONDAY, "08:00", "12:00")
        make_booking(court, MONDAY, "09:00", "10:00")
        make_booking(court, MONDAY, "10:00", "11:00", status="cancelled")
        make_block(court, datetime(2024, 1, 1, 11), datetime(2024, 1, 1, 12), "Coaching clinic")

        slots = AvailabilityService(db).list_available_slots(court.id, MONDAY).slots

        assert [(s.available, s.reason) for s in slots] == [
            (True, None),
            (False, "Already booked"),
            (True, None),
            (False, "Coaching clinic"),
        ]

    def test_weekend_price(self, db, court, make_segment):
        make_segment(court, SATURDAY, "08:00", "09:00", "50", price_weekend="70")
        (slot,) = AvailabilityService(db).list_available_slots(court.id, SATURDAY).slots
        assert slot.price == Decimal("70")
        assert slot.price_kind == "weekend"

    def test_holiday_price(self, db, court, make_segment, make_holiday):
        make_segment(court, MONDAY, "08:00", "09:00", "50", price_holiday="90")
        make_holiday(MONDAY)

        availability = AvailabilityService(db).list_available_slots(court.id, MONDAY)

        assert availability.is_holiday is True
        assert availability.slots[0].price_kind == "holiday"
        assert availability.slots[0].price == Decimal("90")

    def test_blocked_segment_not_listed(self, db, court, make_segment):
        make_segment(court, MONDAY, "08:00", "09:00")
        make_segment(court, MONDAY, "09:00", "10:00", is_blocked=True)
        availability = AvailabilityService(db).list_available_slots(court.id, MONDAY)
        assert slot_times(availability) == [(time(8), time(9))]

    def test_no_segments_means_no_slots(self, db, court):
        assert AvailabilityService(db).list_available_slots(court.id, MONDAY).slots == []

    def test_overnight_segment(self, db, court, make_segment):
        make_segment(court, MONDAY, "23:00", "01:00")
        slots = AvailabilityService(db).list_available_slots(court.id, MONDAY).slots
        assert [s.start for s in slots] == [datetime(2024, 1, 1, 23), datetime(2024, 1, 2, 0)]

    def test_unknown_court(self, db):
        with pytest.raises(NotFoundException):
            AvailabilityService(db).list_available_slots("01HNOTACOURTNOTACOURTNOTAC", MONDAY)

    def test_inactive_court(self, db):
        closed = Court(name="Closed", is_active=False)
        db.add(closed)
        db.commit()
        with pytest.raises(BusinessRuleException):
            AvailabilityService(db).list_available_slots(closed.id, MONDAY)


class TestLookupFailures:
    def test_block_lookup_failure_is_coded(self, db, court, make_segment):
        make_segment(court, MONDAY, "08:00", "10:00")
        repository = MagicMock(spec=ConflictCheckerRepository)
        repository.get_blocks_in_window.side_effect = RepositoryException("db down")
        service = AvailabilityService(db, conflict_repository=repository)

        with pytest.raises(ServiceException) as exc_info:
            service.list_available_slots(court.id, MONDAY)

        assert exc_info.value.code == "AVAILABILITY_LOOKUP_FAILED"
        assert exc_info.value.details["court_id"] == court.id

    def test_booking_lookup_failure_is_coded(self, db, court, make_segment):
        make_segment(court, MONDAY, "08:00", "10:00")
        repository = MagicMock(spec=BookingRepository)
        repository.get_bookings_for_court_and_date.side_effect = RepositoryException("db down")
        service = AvailabilityService(db, booking_repository=repository)

        with pytest.raises(ServiceException) as exc_info:
            service.list_available_slots(court.id, MONDAY)

        assert exc_info.value.code == "AVAILABILITY_LOOKUP_FAILED"
