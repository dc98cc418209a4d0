# backend/app/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

Each request gets services bound to its own database session.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ...services.availability_service import AvailabilityService
from ...services.booking_service import BookingService
from ...services.conflict_checker import ConflictChecker
from ...services.pricing_service import PricingService
from .database import get_db


def get_pricing_service(db: Session = Depends(get_db)) -> PricingService:
    return PricingService(db)


def get_conflict_checker(db: Session = Depends(get_db)) -> ConflictChecker:
    return ConflictChecker(db)


def get_booking_service(
    db: Session = Depends(get_db),
    pricing_service: PricingService = Depends(get_pricing_service),
    conflict_checker: ConflictChecker = Depends(get_conflict_checker),
) -> BookingService:
    """Get booking service instance for dependency injection."""
    return BookingService(db, conflict_checker=conflict_checker, pricing_service=pricing_service)


def get_availability_service(
    db: Session = Depends(get_db),
    pricing_service: PricingService = Depends(get_pricing_service),
) -> AvailabilityService:
    return AvailabilityService(db, pricing_service=pricing_service)
