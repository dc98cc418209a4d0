# backend/app/schemas/__init__.py
"""
Pydantic schemas for the court booking API.

Request models forbid unknown fields, so a client cannot smuggle in an amount.
"""

from .availability import AvailableSlotResponse, CourtAvailabilityResponse
from .booking import (
    BookingCreate,
    BookingResponse,
    BookingStatusUpdate,
    BookingSubmissionResponse,
    HourlyChargeResponse,
    PriceQuoteRequest,
    PriceQuoteResponse,
    RecurringResultResponse,
)

__all__ = [
    "AvailableSlotResponse",
    "BookingCreate",
    "BookingResponse",
    "BookingStatusUpdate",
    "BookingSubmissionResponse",
    "CourtAvailabilityResponse",
    "HourlyChargeResponse",
    "PriceQuoteRequest",
    "PriceQuoteResponse",
    "RecurringResultResponse",
]
