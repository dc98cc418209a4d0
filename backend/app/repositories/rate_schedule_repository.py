# backend/app/repositories/rate_schedule_repository.py
"""
RateSchedule Repository

Read-only access to the priced segments of a court, plus the holiday calendar
used to pick the holiday rate.
"""

from datetime import date
import logging
from typing import List

from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.availability import Holiday
from ..models.rate_schedule import RateSchedule
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class RateScheduleRepository(BaseRepository[RateSchedule]):
    def __init__(self, db: Session):
        super().__init__(db, RateSchedule)

    def fetch_schedules(
        self, court_id: str, day_of_week: int, *, include_blocked: bool = False
    ) -> List[RateSchedule]:
        """
        Segments for a court on a canonical day of week (Sunday=0 .. Saturday=6).

        Blocked segments are left out unless ``include_blocked`` is set.
        """
        try:
            query = self.db.query(RateSchedule).filter(
                RateSchedule.court_id == court_id,
                RateSchedule.day_of_week == day_of_week,
            )
            if not include_blocked:
                query = query.filter(RateSchedule.is_blocked.is_(False))
            return query.order_by(RateSchedule.start_time).all()
        except Exception as e:
            self.logger.error(f"Error fetching schedules for court {court_id}: {str(e)}")
            raise RepositoryException(f"Failed to fetch schedules: {str(e)}") from e

    def is_holiday(self, on_date: date) -> bool:
        try:
            return self.db.query(Holiday.id).filter(Holiday.date == on_date).first() is not None
        except Exception as e:
            self.logger.error(f"Error checking holiday {on_date}: {str(e)}")
            raise RepositoryException(f"Failed to check holiday: {str(e)}") from e
