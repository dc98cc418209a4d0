"""
Pricing service: request validation, rate lookup and quote computation.

The arithmetic lives in ``app.domain.rates``; this service supplies its inputs
(segments for the court/day, weekend set, holiday flag, week count) and turns
empty lookups into NoPricingAvailableException.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import (
    BusinessRuleException,
    NoPricingAvailableException,
    NotFoundException,
    RepositoryException,
    ServiceException,
    ValidationException,
)
from ..domain.intervals import duration_hours
from ..domain.rates import PriceBreakdown, calculate_total, filter_overlapping_segments
from ..domain.recurrence import generate_weekly_dates
from ..models.court import Court
from ..models.rate_schedule import RateSchedule
from ..repositories.base_repository import BaseRepository
from ..repositories.factory import RepositoryFactory
from ..repositories.rate_schedule_repository import RateScheduleRepository
from ..schemas.booking import BookingRequestBase
from ..utils.time_helpers import day_of_week, format_date, is_full_hour, time_to_string
from .base import BaseService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriceQuote:
    amount: Decimal
    week_count: int
    occurrence_dates: List[date]
    breakdown: PriceBreakdown
    segments: List[RateSchedule]
    is_holiday: bool


class PricingService(BaseService):
    def __init__(
        self,
        db: Session,
        rate_repository: Optional[RateScheduleRepository] = None,
        court_repository: Optional[BaseRepository[Court]] = None,
    ) -> None:
        super().__init__(db)
        self.rate_repository = rate_repository or RepositoryFactory.create_rate_schedule_repository(
            db
        )
        self.court_repository = court_repository or RepositoryFactory.create_court_repository(db)

    def validate_request(self, request: BookingRequestBase) -> None:
        """
        Input checks that need no data access.

        Raises:
            ValidationException: off-hour times, empty or short ranges, or a monthly
                booking without a valid subscription end date
        """
        for field_name, value in (("start_time", request.start_time), ("end_time", request.end_time)):
            if not is_full_hour(value):
                raise ValidationException(
                    f"{field_name} must be an exact hour (HH:00)",
                    code="TIME_NOT_ON_HOUR",
                    details={field_name: time_to_string(value)},
                )

        if request.start_time == request.end_time:
            raise ValidationException(
                "Start and end time must differ",
                code="INVALID_TIME_RANGE",
                details={"start_time": time_to_string(request.start_time)},
            )

        hours = duration_hours(request.booking_date, request.start_time, request.end_time)
        if hours < settings.min_booking_hours:
            raise ValidationException(
                f"Minimum booking duration is {settings.min_booking_hours} hour(s)",
                code="BOOKING_TOO_SHORT",
                details={"duration_hours": hours, "minimum_hours": settings.min_booking_hours},
            )

        if request.is_monthly:
            if request.subscription_end_date is None:
                raise ValidationException(
                    "Subscription end date is required for monthly bookings",
                    code="SUBSCRIPTION_END_DATE_REQUIRED",
                )
            if request.subscription_end_date < request.booking_date:
                raise ValidationException(
                    "Subscription end date cannot be before the booking date",
                    code="SUBSCRIPTION_END_BEFORE_START",
                    details={
                        "booking_date": format_date(request.booking_date),
                        "subscription_end_date": format_date(request.subscription_end_date),
                    },
                )

    def get_bookable_court(self, court_id: str) -> Court:
        try:
            court = self.court_repository.get_by_id(court_id)
        except RepositoryException as exc:
            raise ServiceException(
                "Failed to load court", code="COURT_LOOKUP_FAILED", details={"court_id": court_id}
            ) from exc
        if court is None:
            raise NotFoundException(
                "Court not found", code="COURT_NOT_FOUND", details={"court_id": court_id}
            )
        if not court.is_active:
            raise BusinessRuleException(
                "Court is not available for booking",
                code="COURT_INACTIVE",
                details={"court_id": court_id},
            )
        return court

    def load_segments(self, court_id: str, on_date: date) -> List[RateSchedule]:
        try:
            return self.rate_repository.fetch_schedules(court_id, day_of_week(on_date))
        except RepositoryException as exc:
            raise ServiceException(
                "Failed to load pricing",
                code="PRICING_LOOKUP_FAILED",
                details={"court_id": court_id},
            ) from exc

    def is_holiday(self, on_date: date) -> bool:
        if not settings.holiday_pricing_enabled:
            return False
        try:
            return self.rate_repository.is_holiday(on_date)
        except RepositoryException as exc:
            raise ServiceException(
                "Failed to load holiday calendar", code="PRICING_LOOKUP_FAILED"
            ) from exc

    @BaseService.measure_operation("quote")
    def quote(self, request: BookingRequestBase) -> PriceQuote:
        """
        Validate and price a request; nothing is persisted.

        Raises:
            ValidationException, NotFoundException, BusinessRuleException,
            NoPricingAvailableException
        """
        self.validate_request(request)
        self.get_bookable_court(request.court_id)

        segments = self.load_segments(request.court_id, request.booking_date)
        details = {
            "court_id": request.court_id,
            "booking_date": format_date(request.booking_date),
            "day_of_week": day_of_week(request.booking_date),
        }
        if not segments:
            raise NoPricingAvailableException(
                "No pricing available for this court/day", details=details
            )

        applicable = filter_overlapping_segments(
            segments, request.booking_date, request.start_time, request.end_time
        )
        if not applicable:
            raise NoPricingAvailableException(
                "Requested time not available",
                code="TIME_NOT_AVAILABLE",
                details={
                    **details,
                    "start_time": time_to_string(request.start_time),
                    "end_time": time_to_string(request.end_time),
                },
            )

        if request.is_monthly and request.subscription_end_date is not None:
            occurrences = generate_weekly_dates(request.booking_date, request.subscription_end_date)
        else:
            occurrences = [request.booking_date]

        holiday = self.is_holiday(request.booking_date)
        breakdown = calculate_total(
            request.start_time,
            request.end_time,
            request.booking_date,
            applicable,
            request.is_monthly,
            len(occurrences),
            weekend_days=settings.weekend_day_set,
            is_holiday=holiday,
        )

        return PriceQuote(
            amount=breakdown.amount,
            week_count=breakdown.week_count,
            occurrence_dates=occurrences,
            breakdown=breakdown,
            segments=applicable,
            is_holiday=holiday,
        )


__all__ = ["PriceQuote", "PricingService"]
