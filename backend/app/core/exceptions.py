# backend/app/core/exceptions.py
"""
Domain-specific exceptions for the court booking engine.

These exceptions provide clear, business-focused error messages
that can be caught and handled appropriately at the API layer.
"""

from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        """Convert to an HTTPException using the class status code."""
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when request validation fails (bad time format, duration, dates)."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    status_code = HTTP_422_UNPROCESSABLE


class ServiceException(DomainException):
    """Raised when a service operation fails."""

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message or "An error occurred processing your request",
                "code": self.code,
                "details": self.details if self.details else {},
            },
        )


# Specific business exceptions


class BookingConflictException(ConflictException):
    """Raised when a booking conflicts with existing bookings or blocks."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        code: str = "BOOKING_CONFLICT",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or "This time slot conflicts with an existing booking",
            code=code,
            details=details or {},
        )


class NoPricingAvailableException(BusinessRuleException):
    """Raised when no rate schedule can price the requested court, day or hour."""

    def __init__(
        self,
        message: str = "No pricing available for this court/day",
        *,
        code: str = "NO_PRICING_AVAILABLE",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, code=code, details=details or {})


class BookingPersistenceException(ServiceException):
    """Raised when the data store rejects a booking write."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Could not save the booking. Please try again.",
            code="BOOKING_PERSISTENCE_FAILED",
            details=details or {},
        )


class ConflictCheckUnavailableException(ServiceException):
    """Raised when existing bookings cannot be read to verify a slot."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Could not verify slot availability. Please try again.",
            code="CONFLICT_CHECK_FAILED",
            details=details or {},
        )


class PartialRecurrenceException(DomainException):
    """
    Raised when the anchor booking was saved but some weekly occurrences were not.

    The anchor booking is NOT rolled back; ``details`` carries the per-date outcomes.
    """

    status_code = status.HTTP_207_MULTI_STATUS

    def __init__(
        self,
        anchor_booking_id: str,
        failed_dates: List[str],
        total_recurring: int,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.anchor_booking_id = anchor_booking_id
        self.failed_dates = failed_dates
        self.total_recurring = total_recurring
        super().__init__(
            message=(
                f"Booking created, but {len(failed_dates)} of {total_recurring} "
                "recurring instances could not be created"
            ),
            code="PARTIAL_RECURRENCE",
            details={
                "anchor_booking_id": anchor_booking_id,
                "failed_dates": failed_dates,
                "total_recurring": total_recurring,
                **(details or {}),
            },
        )


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations.
    """
