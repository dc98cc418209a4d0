"""
Rate resolution and price calculation for court bookings.

These are pure functions: every input (segments, weekend days, holiday flag) is
passed explicitly and nothing is cached between calls. Segments are any objects
exposing the RateSchedule attributes (``start_time``, ``end_time``, ``price``,
``price_weekend``, ``price_holiday``, ``is_monthly``, ``monthly_discount``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, List, Optional, Protocol, Sequence

from app.core.exceptions import NoPricingAvailableException
from app.domain.intervals import ONE_HOUR, absolute_range, ranges_overlap
from app.utils.time_helpers import SATURDAY, SUNDAY, day_of_week, format_date, time_to_string

DEFAULT_WEEKEND_DAYS = frozenset({SUNDAY, SATURDAY})
CENT = Decimal("0.01")
HUNDRED = Decimal("100")


class RateSegment(Protocol):
    start_time: time
    end_time: time
    price: Any
    price_weekend: Any
    price_holiday: Any
    is_monthly: bool
    monthly_discount: Any


@dataclass(frozen=True)
class RateMatch:
    segment: Any
    price: Decimal
    price_kind: str  # "standard" | "weekend" | "holiday"


@dataclass(frozen=True)
class HourCharge:
    hour_start: datetime
    price: Decimal
    price_kind: str
    schedule_id: Optional[str]


@dataclass(frozen=True)
class PriceBreakdown:
    amount: Decimal
    raw_total: Decimal
    discount_percent: Decimal
    week_count: int
    hours: List[HourCharge] = field(default_factory=list)


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _has_value(value: Any) -> bool:
    return value is not None and _to_decimal(value) > 0


def is_weekend(on_date: date, weekend_days: Iterable[int] = DEFAULT_WEEKEND_DAYS) -> bool:
    return day_of_week(on_date) in set(weekend_days)


def sort_segments(segments: Iterable[RateSegment]) -> List[RateSegment]:
    """Earliest start time first; ties keep their input order."""
    return sorted(segments, key=lambda s: s.start_time)


def select_price(
    segment: RateSegment, *, weekend: bool, holiday: bool = False
) -> tuple[Decimal, str]:
    """Holiday price beats weekend price, which beats the standard rate."""
    if holiday and _has_value(getattr(segment, "price_holiday", None)):
        return _to_decimal(segment.price_holiday), "holiday"
    if weekend and _has_value(segment.price_weekend):
        return _to_decimal(segment.price_weekend), "weekend"
    return _to_decimal(segment.price), "standard"


def resolve_rate(
    segments: Sequence[RateSegment],
    hour_start: datetime,
    booking_date: date,
    *,
    weekend_days: Iterable[int] = DEFAULT_WEEKEND_DAYS,
    is_holiday: bool = False,
) -> Optional[RateMatch]:
    """
    Find the segment covering the hour that begins at ``hour_start``.

    Segments are anchored to ``booking_date`` (a segment whose end is not after its
    start runs into the next day). The hour matches when
    ``segment_start <= hour_start < segment_end``. Returns None when nothing covers
    the hour; callers must not treat that as a zero price.
    """
    weekend = is_weekend(booking_date, weekend_days)
    for segment in sort_segments(segments):
        seg_start, seg_end = absolute_range(booking_date, segment.start_time, segment.end_time)
        if seg_start <= hour_start < seg_end:
            price, kind = select_price(segment, weekend=weekend, holiday=is_holiday)
            return RateMatch(segment=segment, price=price, price_kind=kind)
    return None


def filter_overlapping_segments(
    segments: Iterable[RateSegment], booking_date: date, start: time, end: time
) -> List[RateSegment]:
    """Segments whose interval overlaps the requested range on ``booking_date``."""
    req_start, req_end = absolute_range(booking_date, start, end)
    overlapping = []
    for segment in segments:
        seg_start, seg_end = absolute_range(booking_date, segment.start_time, segment.end_time)
        if ranges_overlap(req_start, req_end, seg_start, seg_end):
            overlapping.append(segment)
    return sort_segments(overlapping)


def calculate_total(
    start_time: time,
    end_time: time,
    booking_date: date,
    segments: Sequence[RateSegment],
    is_monthly: bool,
    week_count: int = 1,
    *,
    weekend_days: Iterable[int] = DEFAULT_WEEKEND_DAYS,
    is_holiday: bool = False,
) -> PriceBreakdown:
    """
    Price a booking hour by hour.

    Each hour from start (inclusive) to end (exclusive) is priced through
    ``resolve_rate``. An hour no segment covers fails the whole calculation with
    ``NoPricingAvailableException`` (code ``HOUR_NOT_PRICED``). For monthly bookings
    the largest ``monthly_discount`` among the matched monthly segments is applied
    once to the raw sum. The result is multiplied by ``week_count`` and only then
    rounded to cents.
    """
    if week_count < 1:
        raise ValueError(f"week_count must be >= 1, got {week_count}")

    weekend_set = frozenset(weekend_days)
    start_dt, end_dt = absolute_range(booking_date, start_time, end_time)

    raw_total = Decimal("0")
    charges: List[HourCharge] = []
    matched: List[Any] = []

    current = start_dt
    while current < end_dt:
        match = resolve_rate(
            segments,
            current,
            booking_date,
            weekend_days=weekend_set,
            is_holiday=is_holiday,
        )
        if match is None:
            raise NoPricingAvailableException(
                f"No rate covers {time_to_string(current.time())} on {format_date(booking_date)}",
                code="HOUR_NOT_PRICED",
                details={
                    "booking_date": format_date(booking_date),
                    "hour_start": time_to_string(current.time()),
                },
            )
        raw_total += match.price
        matched.append(match.segment)
        charges.append(
            HourCharge(
                hour_start=current,
                price=match.price,
                price_kind=match.price_kind,
                schedule_id=getattr(match.segment, "id", None),
            )
        )
        current += ONE_HOUR

    discount = Decimal("0")
    if is_monthly:
        discounts = [
            _to_decimal(seg.monthly_discount)
            for seg in matched
            if seg.is_monthly and seg.monthly_discount is not None
        ]
        if discounts:
            discount = max(discounts)

    total = raw_total
    if discount > 0:
        total = total * (Decimal("1") - discount / HUNDRED)

    amount = (total * week_count).quantize(CENT, rounding=ROUND_HALF_UP)
    return PriceBreakdown(
        amount=amount,
        raw_total=raw_total,
        discount_percent=discount,
        week_count=week_count,
        hours=charges,
    )
