# backend/app/services/availability_service.py
"""
Availability Service for the court booking engine

Lists the bookable slots of a court for one date. Each non-blocked rate segment
of the day is cut into slots of its ``min_booking_time``. Each slot is priced
with holiday, then weekend, then standard precedence. A slot is marked
unavailable when an administrator block or an active booking overlaps it.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import RepositoryException, ServiceException
from ..domain.intervals import absolute_range, ranges_overlap
from ..domain.rates import is_weekend, select_price, sort_segments
from ..models.rate_schedule import DEFAULT_MIN_BOOKING_MINUTES
from ..repositories.booking_repository import BookingRepository
from ..repositories.conflict_checker_repository import ConflictCheckerRepository
from ..repositories.factory import RepositoryFactory
from ..utils.time_helpers import format_date
from .base import BaseService
from .pricing_service import PricingService

logger = logging.getLogger(__name__)

ALREADY_BOOKED_REASON = "Already booked"
BLOCKED_REASON = "Blocked"


@dataclass(frozen=True)
class AvailableSlot:
    start: datetime
    end: datetime
    price: Decimal
    price_kind: str
    available: bool
    reason: Optional[str] = None
    schedule_id: Optional[str] = None

    @property
    def start_time(self) -> time:
        return self.start.time()

    @property
    def end_time(self) -> time:
        return self.end.time()


@dataclass(frozen=True)
class CourtAvailability:
    court_id: str
    on_date: date
    is_holiday: bool
    slots: List[AvailableSlot]


class AvailabilityService(BaseService):
    def __init__(
        self,
        db: Session,
        pricing_service: Optional[PricingService] = None,
        booking_repository: Optional[BookingRepository] = None,
        conflict_repository: Optional[ConflictCheckerRepository] = None,
    ):
        super().__init__(db)
        self.pricing_service = pricing_service or PricingService(db)
        self.booking_repository = (
            booking_repository or RepositoryFactory.create_booking_repository(db)
        )
        self.conflict_repository = (
            conflict_repository or RepositoryFactory.create_conflict_checker_repository(db)
        )

    @BaseService.measure_operation("list_available_slots")
    def list_available_slots(self, court_id: str, on_date: date) -> CourtAvailability:
        self.pricing_service.get_bookable_court(court_id)

        segments = sort_segments(self.pricing_service.load_segments(court_id, on_date))
        holiday = self.pricing_service.is_holiday(on_date)
        if not segments:
            return CourtAvailability(court_id=court_id, on_date=on_date, is_holiday=holiday, slots=[])

        weekend = is_weekend(on_date, settings.weekend_day_set)
        ranges = [absolute_range(on_date, s.start_time, s.end_time) for s in segments]
        window_start = min(start for start, _ in ranges)
        window_end = max(end for _, end in ranges)

        try:
            blocks = self.conflict_repository.get_blocks_in_window(
                court_id, window_start, window_end
            )
            bookings = self.booking_repository.get_bookings_for_court_and_date(court_id, on_date)
        except RepositoryException as exc:
            self.logger.error(
                f"Availability lookup failed for court {court_id} on {format_date(on_date)}: {exc}"
            )
            raise ServiceException(
                "Failed to load bookings and blocks",
                code="AVAILABILITY_LOOKUP_FAILED",
                details={"court_id": court_id, "date": format_date(on_date)},
            ) from exc
        booked = [absolute_range(b.booking_date, b.start_time, b.end_time) for b in bookings]

        slots: List[AvailableSlot] = []
        for segment, (seg_start, seg_end) in zip(segments, ranges):
            price, kind = select_price(segment, weekend=weekend, holiday=holiday)
            step = timedelta(minutes=segment.min_booking_time or DEFAULT_MIN_BOOKING_MINUTES)
            current = seg_start
            while current < seg_end:
                slot_end = min(current + step, seg_end)
                available, reason = True, None

                for block in blocks:
                    if ranges_overlap(current, slot_end, block.start_datetime, block.end_datetime):
                        available, reason = False, block.reason or BLOCKED_REASON
                        break

                if available and any(
                    ranges_overlap(current, slot_end, b_start, b_end) for b_start, b_end in booked
                ):
                    available, reason = False, ALREADY_BOOKED_REASON

                slots.append(
                    AvailableSlot(
                        start=current,
                        end=slot_end,
                        price=price,
                        price_kind=kind,
                        available=available,
                        reason=reason,
                        schedule_id=segment.id,
                    )
                )
                current += step

        return CourtAvailability(court_id=court_id, on_date=on_date, is_holiday=holiday, slots=slots)
