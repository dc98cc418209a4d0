"""Court availability response schemas."""

from decimal import Decimal
from typing import List, Optional

from ._strict_base import StrictModel


class AvailableSlotResponse(StrictModel):
    start_time: str
    end_time: str
    price: Decimal
    price_kind: str
    available: bool
    reason: Optional[str] = None


class CourtAvailabilityResponse(StrictModel):
    court_id: str
    date: str
    day_of_week: int
    is_holiday: bool
    slots: List[AvailableSlotResponse]
