# backend/app/routes/v1/courts.py
"""
Court routes - API v1

Endpoints:
    GET /{court_id}/availability?date=YYYY-MM-DD - Priced slots for one day
"""

import asyncio
import logging
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...api.dependencies import get_availability_service
from ...core.exceptions import DomainException
from ...core.ulid_helper import require_ulid
from ...schemas.availability import AvailableSlotResponse, CourtAvailabilityResponse
from ...services.availability_service import AvailabilityService, CourtAvailability
from ...utils.time_helpers import day_of_week, format_date, parse_date, time_to_string

logger = logging.getLogger(__name__)

router = APIRouter(tags=["courts-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    raise exc.to_http_exception() from exc


def _availability_response(availability: CourtAvailability) -> CourtAvailabilityResponse:
    return CourtAvailabilityResponse(
        court_id=availability.court_id,
        date=format_date(availability.on_date),
        day_of_week=day_of_week(availability.on_date),
        is_holiday=availability.is_holiday,
        slots=[
            AvailableSlotResponse(
                start_time=time_to_string(slot.start_time),
                end_time=time_to_string(slot.end_time),
                price=slot.price,
                price_kind=slot.price_kind,
                available=slot.available,
                reason=slot.reason,
            )
            for slot in availability.slots
        ],
    )


@router.get("/{court_id}/availability", response_model=CourtAvailabilityResponse)
async def get_court_availability(
    court_id: str,
    date: str = Query(..., description="YYYY-MM-DD"),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> CourtAvailabilityResponse:
    """
    List the slots of a court for one date.

    Slots are cut from the day's rate segments; each carries the applicable
    price and whether it can still be booked.
    """
    try:
        on_date = parse_date(date)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": str(exc), "code": "INVALID_DATE"},
        ) from exc

    try:
        require_ulid(court_id, "court_id")
        availability = await asyncio.to_thread(
            availability_service.list_available_slots, court_id, on_date
        )
    except DomainException as exc:
        handle_domain_exception(exc)
    return _availability_response(availability)
