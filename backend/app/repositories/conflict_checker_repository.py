# backend/app/repositories/conflict_checker_repository.py
"""
ConflictChecker Repository for the court booking engine

Reads the bookings and administrator blocks that could collide with a requested
court/date/time range. Errors are raised as RepositoryException; callers must not
interpret a failed lookup as "no conflict".
"""

from datetime import date, datetime
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.availability import ScheduleBlock
from ..models.booking import Booking, BookingStatus
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ConflictCheckerRepository(BaseRepository[Booking]):
    """Repository for conflict checking data access."""

    def __init__(self, db: Session):
        """Initialize with Booking model as primary."""
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    def get_bookings_for_conflict_check(
        self, court_id: str, check_date: date, exclude_booking_id: Optional[str] = None
    ) -> List[Booking]:
        """
        Get active bookings for a court on one exact date.

        Args:
            court_id: The court to check
            check_date: The booking date to check
            exclude_booking_id: Optional booking ID to leave out (edit flow)

        Returns:
            Bookings whose status is not cancelled
        """
        try:
            query = self.db.query(Booking).filter(
                Booking.court_id == court_id,
                Booking.booking_date == check_date,
                Booking.status != BookingStatus.CANCELLED.value,
            )

            if exclude_booking_id:
                query = query.filter(Booking.id != exclude_booking_id)

            return query.order_by(Booking.start_time).all()
        except Exception as e:
            self.logger.error(f"Error getting bookings for conflict check: {str(e)}")
            raise RepositoryException(f"Failed to get conflict bookings: {str(e)}") from e

    def get_blocks_in_window(
        self, court_id: str, window_start: datetime, window_end: datetime
    ) -> List[ScheduleBlock]:
        """Administrator blocks on the court that overlap [window_start, window_end)."""
        try:
            return (
                self.db.query(ScheduleBlock)
                .filter(
                    ScheduleBlock.court_id == court_id,
                    ScheduleBlock.start_datetime < window_end,
                    ScheduleBlock.end_datetime > window_start,
                )
                .order_by(ScheduleBlock.start_datetime)
                .all()
            )
        except Exception as e:
            self.logger.error(f"Error getting schedule blocks: {str(e)}")
            raise RepositoryException(f"Failed to get schedule blocks: {str(e)}") from e
