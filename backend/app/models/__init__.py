"""
Database models for the court booking engine.

- Court: the bookable resource
- RateSchedule: priced per-day time segments for a court
- Booking: a reservation of one court for one time range
- ScheduleBlock / Holiday: availability overrides
"""

from .availability import Holiday, ScheduleBlock
from .booking import Booking, BookingStatus, PaymentStatus
from .court import Court
from .rate_schedule import RateSchedule

__all__ = [
    "Booking",
    "BookingStatus",
    "Court",
    "Holiday",
    "PaymentStatus",
    "RateSchedule",
    "ScheduleBlock",
]
