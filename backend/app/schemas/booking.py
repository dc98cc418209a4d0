# backend/app/schemas/booking.py
"""
Booking request and response schemas.

Dates are accepted only as YYYY-MM-DD strings and clock times as HH:MM (or
HH:MM:SS). Business checks (exact hours, minimum duration, subscription dates)
run in the service layer so every caller gets them, not only HTTP clients.
"""

from datetime import date, time
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import Field, field_validator, model_validator

from ..models.booking import BookingStatus, PaymentStatus
from ..utils.time_helpers import parse_clock_time, parse_date
from ._strict_base import StrictModel, StrictRequestModel


def _ensure_date_only(value: Any) -> Any:
    if value is None or isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_date(value)
    raise ValueError("Dates must be YYYY-MM-DD strings")


def _ensure_clock_time(value: Any) -> Any:
    if isinstance(value, time):
        return value
    if isinstance(value, str):
        return parse_clock_time(value)
    raise ValueError("Times must be HH:MM strings")


class BookingRequestBase(StrictRequestModel):
    """Fields shared by booking submissions and price quotes."""

    court_id: str = Field(..., min_length=1, description="Court to book")
    booking_date: date = Field(..., description="Booking date (YYYY-MM-DD)")
    start_time: time = Field(..., description="Start time (HH:00)")
    end_time: time = Field(..., description="End time (HH:00); earlier than start crosses midnight")
    is_monthly: bool = Field(default=False, description="Weekly recurring monthly subscription")
    subscription_end_date: Optional[date] = Field(
        default=None, description="Last date of the subscription (required when monthly)"
    )

    @field_validator("booking_date", "subscription_end_date", mode="before")
    @classmethod
    def _validate_dates(cls, value: Any) -> Any:
        return _ensure_date_only(value)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _validate_times(cls, value: Any) -> Any:
        return _ensure_clock_time(value)


class PriceQuoteRequest(BookingRequestBase):
    """Price a prospective booking without saving it."""


class BookingCreate(BookingRequestBase):
    """Create (or, with a booking id, edit) a booking. The amount is always computed."""

    user_id: str = Field(..., min_length=1, description="Owner of the booking")
    status: BookingStatus = Field(default=BookingStatus.PENDING)
    payment_status: PaymentStatus = Field(default=PaymentStatus.PENDING)
    notes: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("status")
    @classmethod
    def _reject_cancelled_on_create(cls, value: BookingStatus) -> BookingStatus:
        if value == BookingStatus.CANCELLED:
            raise ValueError("Use the cancel endpoint to cancel a booking")
        return value


class BookingStatusUpdate(StrictRequestModel):
    status: Optional[BookingStatus] = None
    payment_status: Optional[PaymentStatus] = None

    @model_validator(mode="after")
    def _require_change(self) -> "BookingStatusUpdate":
        if self.status is None and self.payment_status is None:
            raise ValueError("Provide status and/or payment_status")
        return self


class BookingResponse(StrictModel):
    id: str
    user_id: str
    court_id: str
    booking_date: str
    start_time: str
    end_time: str
    amount: Decimal
    status: str
    payment_status: str
    is_monthly: bool
    subscription_end_date: Optional[str] = None
    notes: Optional[str] = None


class RecurringResultResponse(StrictModel):
    booking_date: str
    success: bool
    booking_id: Optional[str] = None
    error: Optional[str] = None


class BookingSubmissionResponse(StrictModel):
    booking: BookingResponse
    recurring_results: List[RecurringResultResponse] = Field(default_factory=list)
    partial: bool = False
    warning: Optional[str] = None


class HourlyChargeResponse(StrictModel):
    hour_start: str
    price: Decimal
    price_kind: str
    schedule_id: Optional[str] = None


class PriceQuoteResponse(StrictModel):
    amount: Decimal
    week_count: int
    occurrence_dates: List[str]
    discount_percent: Decimal
    hourly_breakdown: List[HourlyChargeResponse]
