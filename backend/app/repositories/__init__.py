# backend/app/repositories/__init__.py
"""
Repository layer for the court booking engine.

Repositories own data access only: they query and flush, never commit, and wrap
SQLAlchemy failures in RepositoryException. Services obtain them through
RepositoryFactory.
"""

from .base_repository import BaseRepository, IRepository
from .booking_repository import BookingRepository
from .conflict_checker_repository import ConflictCheckerRepository
from .factory import RepositoryFactory
from .rate_schedule_repository import RateScheduleRepository

__all__ = [
    "BaseRepository",
    "BookingRepository",
    "ConflictCheckerRepository",
    "IRepository",
    "RateScheduleRepository",
    "RepositoryFactory",
]
