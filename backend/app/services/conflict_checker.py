# backend/app/services/conflict_checker.py
"""
Conflict Checker Service for the court booking engine

Detects overlap between a requested court/date/time range and:
- active (non-cancelled) bookings on the same court and exact date
- administrator schedule blocks on the court

Ranges are anchored to their booking date; an end at or before the start runs
into the next day. Overlap is open-interval, so back-to-back bookings are fine.

A failed lookup never reads as "no conflict": it raises
ConflictCheckUnavailableException so the submission is aborted.
"""

from datetime import date, time
import logging
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import ConflictCheckUnavailableException, RepositoryException
from ..domain.intervals import absolute_range, ranges_overlap
from ..models.availability import ScheduleBlock
from ..models.booking import Booking
from ..repositories import RepositoryFactory
from ..repositories.conflict_checker_repository import ConflictCheckerRepository
from ..utils.time_helpers import format_date, time_to_string
from .base import BaseService

logger = logging.getLogger(__name__)


class ConflictChecker(BaseService):
    """Service for checking booking conflicts on a court."""

    def __init__(self, db: Session, repository: Optional[ConflictCheckerRepository] = None):
        """
        Initialize conflict checker service.

        Args:
            db: Database session
            repository: Optional ConflictCheckerRepository instance
        """
        super().__init__(db)
        self.logger = logging.getLogger(__name__)
        self.repository = repository or RepositoryFactory.create_conflict_checker_repository(db)

    def _load_bookings(
        self, court_id: str, check_date: date, exclude_booking_id: Optional[str]
    ) -> List[Booking]:
        try:
            return self.repository.get_bookings_for_conflict_check(
                court_id, check_date, exclude_booking_id
            )
        except RepositoryException as exc:
            self.logger.error(
                f"Conflict lookup failed for court {court_id} on {format_date(check_date)}: {exc}"
            )
            raise ConflictCheckUnavailableException(
                details={"court_id": court_id, "booking_date": format_date(check_date)}
            ) from exc

    @staticmethod
    def _iter_overlapping(
        bookings: List[Booking], check_date: date, start_time: time, end_time: time
    ) -> Iterator[Booking]:
        new_start, new_end = absolute_range(check_date, start_time, end_time)
        for booking in bookings:
            cand_start, cand_end = absolute_range(
                booking.booking_date, booking.start_time, booking.end_time
            )
            if ranges_overlap(new_start, new_end, cand_start, cand_end):
                yield booking

    @BaseService.measure_operation("has_conflict")
    def has_conflict(
        self,
        court_id: str,
        check_date: date,
        start_time: time,
        end_time: time,
        exclude_booking_id: Optional[str] = None,
    ) -> bool:
        """
        True if an active booking on the court overlaps the range.

        Stops at the first overlapping booking.
        """
        bookings = self._load_bookings(court_id, check_date, exclude_booking_id)
        for booking in self._iter_overlapping(bookings, check_date, start_time, end_time):
            self.logger.warning(
                f"Booking conflict on court {court_id} {format_date(check_date)} "
                f"{time_to_string(start_time)}-{time_to_string(end_time)} "
                f"with booking {booking.id}"
            )
            return True
        return False

    @BaseService.measure_operation("check_booking_conflicts")
    def check_booking_conflicts(
        self,
        court_id: str,
        check_date: date,
        start_time: time,
        end_time: time,
        exclude_booking_id: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        All active bookings overlapping the range, as dicts for error details.
        """
        bookings = self._load_bookings(court_id, check_date, exclude_booking_id)
        conflicts = [
            {
                "booking_id": booking.id,
                "start_time": time_to_string(booking.start_time),
                "end_time": time_to_string(booking.end_time),
                "status": booking.status,
            }
            for booking in self._iter_overlapping(bookings, check_date, start_time, end_time)
        ]

        if conflicts:
            self.logger.warning(
                f"Found {len(conflicts)} booking conflicts for court {court_id} "
                f"on {format_date(check_date)} between "
                f"{time_to_string(start_time)}-{time_to_string(end_time)}"
            )

        return conflicts

    @BaseService.measure_operation("find_schedule_block")
    def find_schedule_block(
        self, court_id: str, check_date: date, start_time: time, end_time: time
    ) -> Optional[ScheduleBlock]:
        """First administrator block overlapping the range, if any."""
        window_start, window_end = absolute_range(check_date, start_time, end_time)
        try:
            blocks = self.repository.get_blocks_in_window(court_id, window_start, window_end)
        except RepositoryException as exc:
            self.logger.error(f"Schedule block lookup failed for court {court_id}: {exc}")
            raise ConflictCheckUnavailableException(
                details={"court_id": court_id, "booking_date": format_date(check_date)}
            ) from exc
        return blocks[0] if blocks else None
