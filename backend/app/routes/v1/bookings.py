# backend/app/routes/v1/bookings.py
"""
Court booking routes - API v1

Versioned booking endpoints under /api/v1/bookings.
All business logic delegated to BookingService / PricingService.

Endpoints:
    POST /quote - Price a prospective booking without saving it
    GET / - List bookings for a court and date
    POST / - Submit a booking (monthly bookings expand into weekly bookings)
    GET /{booking_id} - Booking details
    PUT /{booking_id} - Edit a booking (re-priced and re-checked)
    POST /{booking_id}/cancel - Cancel a booking
    PATCH /{booking_id}/status - Admin status / payment transition
"""

import asyncio
from datetime import date
import logging
from typing import List, NoReturn

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.encoders import jsonable_encoder
from fastapi.params import Path
from fastapi.responses import JSONResponse

from ...api.dependencies import get_booking_service, get_pricing_service
from ...core.exceptions import DomainException
from ...core.ulid_helper import require_ulid
from ...models.booking import Booking
from ...schemas.booking import (
    BookingCreate,
    BookingResponse,
    BookingStatusUpdate,
    BookingSubmissionResponse,
    HourlyChargeResponse,
    PriceQuoteRequest,
    PriceQuoteResponse,
    RecurringResultResponse,
)
from ...services.booking_service import BookingService, BookingSubmissionResult
from ...services.pricing_service import PriceQuote, PricingService
from ...utils.time_helpers import format_date, parse_date, time_to_string

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["bookings-v1"])

ULID_PATH_PATTERN = r"^[0-9A-HJKMNP-TV-Z]{26}$"


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    raise exc.to_http_exception() from exc


def _booking_response(booking: Booking) -> BookingResponse:
    return BookingResponse(**booking.to_dict())


def _submission_response(result: BookingSubmissionResult) -> JSONResponse:
    partial = result.partial_error()
    body = BookingSubmissionResponse(
        booking=_booking_response(result.primary),
        recurring_results=[
            RecurringResultResponse(
                booking_date=format_date(r.booking_date),
                success=r.success,
                booking_id=r.booking_id,
                error=r.error,
            )
            for r in result.recurring_results
        ],
        partial=partial is not None,
        warning=partial.message if partial is not None else None,
    )
    status_code = partial.status_code if partial is not None else status.HTTP_201_CREATED
    return JSONResponse(jsonable_encoder(body), status_code=status_code)


def _quote_response(quote: PriceQuote) -> PriceQuoteResponse:
    return PriceQuoteResponse(
        amount=quote.amount,
        week_count=quote.week_count,
        occurrence_dates=[format_date(d) for d in quote.occurrence_dates],
        discount_percent=quote.breakdown.discount_percent,
        hourly_breakdown=[
            HourlyChargeResponse(
                hour_start=time_to_string(charge.hour_start.time()),
                price=charge.price,
                price_kind=charge.price_kind,
                schedule_id=charge.schedule_id,
            )
            for charge in quote.breakdown.hours
        ],
    )


# ============================================================================
# SECTION 1: Static routes (no path parameters)
# ============================================================================


@router.post("/quote", response_model=PriceQuoteResponse)
async def quote_booking(
    payload: PriceQuoteRequest,
    pricing_service: PricingService = Depends(get_pricing_service),
) -> PriceQuoteResponse:
    """Return the computed amount for a prospective booking."""
    try:
        quote = await asyncio.to_thread(pricing_service.quote, payload)
    except DomainException as exc:
        handle_domain_exception(exc)
    return _quote_response(quote)


@router.get("", response_model=List[BookingResponse])
async def list_bookings(
    court_id: str = Query(..., min_length=1),
    booking_date: str = Query(..., description="YYYY-MM-DD"),
    include_cancelled: bool = Query(False),
    booking_service: BookingService = Depends(get_booking_service),
) -> List[BookingResponse]:
    """List bookings for one court on one date."""
    try:
        on_date: date = parse_date(booking_date)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": str(exc), "code": "INVALID_BOOKING_DATE"},
        ) from exc

    try:
        require_ulid(court_id, "court_id")
        bookings = await asyncio.to_thread(
            booking_service.list_bookings, court_id, on_date, include_cancelled
        )
    except DomainException as exc:
        handle_domain_exception(exc)
    return [_booking_response(b) for b in bookings]


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=BookingSubmissionResponse,
    responses={
        207: {"description": "Booking created, some recurring bookings failed"},
        409: {"description": "Time slot conflict"},
        422: {"description": "No pricing available"},
    },
)
async def create_booking(
    payload: BookingCreate,
    booking_service: BookingService = Depends(get_booking_service),
) -> JSONResponse:
    """Submit a booking; the amount is always computed server-side."""
    try:
        result = await asyncio.to_thread(booking_service.submit_booking, payload)
    except DomainException as exc:
        handle_domain_exception(exc)
    return _submission_response(result)


# ============================================================================
# SECTION 2: Booking-specific routes
# ============================================================================


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str = Path(..., description="Booking ULID", pattern=ULID_PATH_PATTERN),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(booking_service.get_booking, booking_id)
    except DomainException as exc:
        handle_domain_exception(exc)
    return _booking_response(booking)


@router.put("/{booking_id}", response_model=BookingSubmissionResponse)
async def update_booking(
    payload: BookingCreate,
    booking_id: str = Path(..., description="Booking ULID", pattern=ULID_PATH_PATTERN),
    booking_service: BookingService = Depends(get_booking_service),
) -> JSONResponse:
    """Edit a booking: re-validated, re-priced and re-checked against other bookings."""
    try:
        result = await asyncio.to_thread(booking_service.submit_booking, payload, booking_id)
    except DomainException as exc:
        handle_domain_exception(exc)
    response = _submission_response(result)
    if response.status_code == status.HTTP_201_CREATED:
        response.status_code = status.HTTP_200_OK
    return response


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: str = Path(..., description="Booking ULID", pattern=ULID_PATH_PATTERN),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(booking_service.cancel_booking, booking_id)
    except DomainException as exc:
        handle_domain_exception(exc)
    return _booking_response(booking)


@router.patch("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    payload: BookingStatusUpdate,
    booking_id: str = Path(..., description="Booking ULID", pattern=ULID_PATH_PATTERN),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(
            booking_service.update_status,
            booking_id,
            status=payload.status,
            payment_status=payload.payment_status,
        )
    except DomainException as exc:
        handle_domain_exception(exc)
    return _booking_response(booking)
