# backend/app/repositories/booking_repository.py
"""
Booking Repository for the court booking engine

Implements the booking write path (insert / update) used by the orchestrator and
the read queries behind booking lookups and availability listings.
"""

from datetime import date
import logging
from typing import Any, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.booking import Booking, BookingStatus
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class BookingRepository(BaseRepository[Booking]):
    """Repository for booking data access."""

    def __init__(self, db: Session):
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    def create(self, **kwargs: Any) -> Booking:
        """Create a booking, exposing integrity errors for conflict handling."""
        try:
            return super().create(**kwargs)
        except RepositoryException as exc:
            if isinstance(exc.__cause__, IntegrityError):
                raise exc.__cause__
            raise

    def update(self, id: str, **kwargs: Any) -> Optional[Booking]:
        """Update a booking, exposing integrity errors for conflict handling."""
        try:
            return super().update(id, **kwargs)
        except RepositoryException as exc:
            if isinstance(exc.__cause__, IntegrityError):
                raise exc.__cause__
            raise

    def get_bookings_for_court_and_date(
        self, court_id: str, booking_date: date, *, include_cancelled: bool = False
    ) -> List[Booking]:
        query = self._build_query().filter(
            Booking.court_id == court_id,
            Booking.booking_date == booking_date,
        )
        if not include_cancelled:
            query = query.filter(Booking.status != BookingStatus.CANCELLED.value)
        return self._execute_query(query.order_by(Booking.start_time))

