# backend/app/services/booking_service.py
"""
Booking Service for the court booking engine

Orchestrates one submission:

    validate -> price -> check conflicts -> persist -> expand recurrences

Any failure before persistence aborts with nothing written. The primary booking
is written in its own transaction under a court/date slot lock; storage-level
constraints turn a lost race into BookingConflictException.

Monthly bookings then get one booking per later weekly date, each in its own
transaction. Those writes are best-effort: every date's outcome is collected in
the returned BookingSubmissionResult, and the primary booking is never rolled
back because a later date failed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.booking_lock import booking_slot_lock
from ..core.config import settings
from ..core.exceptions import (
    BookingConflictException,
    BookingPersistenceException,
    BusinessRuleException,
    DomainException,
    NotFoundException,
    PartialRecurrenceException,
    RepositoryException,
    ServiceException,
)
from ..domain.rates import CENT
from ..domain.recurrence import derived_dates
from ..models.booking import Booking, BookingStatus, PaymentStatus
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.booking_repository import BookingRepository
from ..repositories.factory import RepositoryFactory
from ..schemas.booking import BookingCreate
from ..utils.time_helpers import format_date, time_to_string
from .base import BaseService
from .conflict_checker import ConflictChecker
from .pricing_service import PriceQuote, PricingService

logger = logging.getLogger(__name__)

GENERIC_CONFLICT_MESSAGE = "This time slot conflicts with an existing booking"
BLOCKED_SLOT_MESSAGE = "This time slot is blocked for this court"
SLOT_LOCKED_MESSAGE = "Another booking for this court and date is being processed"

COURT_OVERLAP_CONSTRAINTS = (
    "bookings_no_overlap_per_court",
    "uq_bookings_active_court_slot",
)
# SQLite reports the columns of a violated unique index rather than its name
SQLITE_SLOT_UNIQUE_MARKER = "bookings.court_id, bookings.booking_date, bookings.start_time"


@dataclass
class RecurringBookingResult:
    booking_date: date
    success: bool
    booking_id: Optional[str] = None
    error: Optional[str] = None


@dataclass
class BookingSubmissionResult:
    primary: Booking
    recurring_results: List[RecurringBookingResult] = field(default_factory=list)

    @property
    def failed_recurrences(self) -> List[RecurringBookingResult]:
        return [result for result in self.recurring_results if not result.success]

    @property
    def is_partial(self) -> bool:
        return bool(self.failed_recurrences)

    def partial_error(self) -> Optional[PartialRecurrenceException]:
        if not self.is_partial:
            return None
        return PartialRecurrenceException(
            anchor_booking_id=self.primary.id,
            failed_dates=[format_date(r.booking_date) for r in self.failed_recurrences],
            total_recurring=len(self.recurring_results),
            details={
                "errors": {
                    format_date(r.booking_date): r.error for r in self.failed_recurrences
                }
            },
        )

    def raise_for_partial(self) -> None:
        """Raise PartialRecurrenceException if any weekly occurrence was not created."""
        error = self.partial_error()
        if error is not None:
            raise error


class BookingService(BaseService):
    """Service layer for court booking submission and lifecycle transitions."""

    def __init__(
        self,
        db: Session,
        repository: Optional[BookingRepository] = None,
        conflict_checker: Optional[ConflictChecker] = None,
        pricing_service: Optional[PricingService] = None,
    ):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_booking_repository(db)
        self.conflict_checker = conflict_checker or ConflictChecker(db)
        self.pricing_service = pricing_service or PricingService(db)

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    @BaseService.measure_operation("submit_booking")
    def submit_booking(
        self, request: BookingCreate, booking_id: Optional[str] = None
    ) -> BookingSubmissionResult:
        """
        Create a booking, or update ``booking_id`` in place (edit flow).

        Raises:
            ValidationException: malformed or short request
            NotFoundException: unknown court or booking
            NoPricingAvailableException: nothing prices the court/day/hours
            BookingConflictException: overlapping booking, block, or held slot lock
            ConflictCheckUnavailableException: existing bookings could not be read
            BookingPersistenceException: the write was rejected
        """
        self.log_operation(
            "submit_booking",
            court_id=request.court_id,
            booking_date=format_date(request.booking_date),
            editing=booking_id is not None,
        )

        existing: Optional[Booking] = None
        was_monthly = False
        if booking_id is not None:
            existing = self.get_booking(booking_id)
            if existing.status in (BookingStatus.CANCELLED.value, BookingStatus.COMPLETED.value):
                raise BusinessRuleException(
                    f"A {existing.status} booking cannot be edited",
                    code="BOOKING_NOT_EDITABLE",
                    details={"booking_id": booking_id, "status": existing.status},
                )
            was_monthly = bool(existing.is_monthly)

        try:
            quote = self.pricing_service.quote(request)

            with booking_slot_lock(request.court_id, request.booking_date) as acquired:
                if not acquired:
                    raise BookingConflictException(
                        SLOT_LOCKED_MESSAGE,
                        code="SLOT_LOCKED",
                        details=self._slot_details(request.court_id, request),
                    )
                self._ensure_slot_free(request, exclude_booking_id=booking_id)
                primary = self._persist_primary(request, quote, existing)
        except BookingConflictException:
            prometheus_metrics.record_booking_submission("conflict")
            raise
        except ServiceException:
            prometheus_metrics.record_booking_submission("error")
            raise
        except DomainException:
            prometheus_metrics.record_booking_submission("rejected")
            raise

        result = BookingSubmissionResult(primary=primary)
        if request.is_monthly and not was_monthly:
            result.recurring_results = self._create_recurring_bookings(primary)

        if result.is_partial:
            self.logger.warning(
                f"Booking {primary.id} created; {len(result.failed_recurrences)} of "
                f"{len(result.recurring_results)} recurring bookings failed"
            )
            prometheus_metrics.record_booking_submission("partial")
        else:
            prometheus_metrics.record_booking_submission("created")
        return result

    @staticmethod
    def _slot_details(court_id: str, request: Any) -> Dict[str, Any]:
        return {
            "court_id": court_id,
            "booking_date": format_date(request.booking_date),
            "start_time": time_to_string(request.start_time),
            "end_time": time_to_string(request.end_time),
        }

    def _ensure_slot_free(
        self, request: BookingCreate, exclude_booking_id: Optional[str] = None
    ) -> None:
        block = self.conflict_checker.find_schedule_block(
            request.court_id, request.booking_date, request.start_time, request.end_time
        )
        if block is not None:
            raise BookingConflictException(
                BLOCKED_SLOT_MESSAGE,
                code="SCHEDULE_BLOCKED",
                details={
                    **self._slot_details(request.court_id, request),
                    "block_id": block.id,
                    "reason": block.reason,
                },
            )

        conflicts = self.conflict_checker.check_booking_conflicts(
            request.court_id,
            request.booking_date,
            request.start_time,
            request.end_time,
            exclude_booking_id=exclude_booking_id,
        )
        if conflicts:
            raise BookingConflictException(
                details={
                    **self._slot_details(request.court_id, request),
                    "conflicting_bookings": conflicts,
                }
            )

    def _booking_values(
        self, request: BookingCreate, amount: Decimal, existing: Optional[Booking] = None
    ) -> Dict[str, Any]:
        status = BookingStatus(request.status).value
        payment_status = PaymentStatus(request.payment_status).value
        # An edit keeps the stored states unless the client sent them explicitly
        if existing is not None:
            if "status" not in request.model_fields_set:
                status = existing.status
            if "payment_status" not in request.model_fields_set:
                payment_status = existing.payment_status

        return {
            "user_id": request.user_id,
            "court_id": request.court_id,
            "booking_date": request.booking_date,
            "start_time": request.start_time,
            "end_time": request.end_time,
            "amount": amount,
            "status": status,
            "payment_status": payment_status,
            "is_monthly": request.is_monthly,
            "subscription_end_date": request.subscription_end_date if request.is_monthly else None,
            "notes": request.notes,
        }

    def _persist_primary(
        self, request: BookingCreate, quote: PriceQuote, existing: Optional[Booking]
    ) -> Booking:
        values = self._booking_values(request, quote.amount, existing)
        try:
            with self.repository.transaction():
                if existing is not None:
                    booking = self.repository.update(existing.id, **values)
                else:
                    booking = self.repository.create(**values)
        except IntegrityError as exc:
            message, scope = self._resolve_integrity_conflict_message(exc)
            if scope is not None:
                raise BookingConflictException(
                    message,
                    details={**self._slot_details(request.court_id, request), "scope": scope},
                ) from exc
            self.logger.error(f"Booking insert rejected by the database: {exc}")
            raise BookingPersistenceException(details={"reason": "integrity_error"}) from exc
        except (RepositoryException, SQLAlchemyError) as exc:
            self.logger.error(f"Booking write failed: {exc}")
            raise BookingPersistenceException() from exc

        if booking is None:
            raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")
        self.logger.info(
            f"Booking {booking.id} saved for court {booking.court_id} on "
            f"{format_date(booking.booking_date)} amount={booking.amount}"
        )
        return booking

    def _resolve_integrity_conflict_message(
        self, exc: IntegrityError
    ) -> Tuple[str, Optional[str]]:
        """Map a constraint violation to (message, scope); scope None means not an overlap."""
        orig = getattr(exc, "orig", None)
        diag = getattr(orig, "diag", None)
        constraint_name = getattr(diag, "constraint_name", None)
        if constraint_name in COURT_OVERLAP_CONSTRAINTS:
            return GENERIC_CONFLICT_MESSAGE, "court"

        text = str(orig) if orig is not None else str(exc)
        if any(name in text for name in COURT_OVERLAP_CONSTRAINTS) or (
            SQLITE_SLOT_UNIQUE_MARKER in text
        ):
            return GENERIC_CONFLICT_MESSAGE, "court"
        return GENERIC_CONFLICT_MESSAGE, None

    # ------------------------------------------------------------------
    # Recurrence
    # ------------------------------------------------------------------

    def _recurring_note(self, anchor: Booking) -> str:
        note = settings.recurring_note_template.format(anchor_id=anchor.id)
        return f"{anchor.notes} {note}" if anchor.notes else note

    def _create_recurring_bookings(self, anchor: Booking) -> List[RecurringBookingResult]:
        dates = derived_dates(anchor.booking_date, anchor.subscription_end_date)
        if not dates:
            return []

        share = (Decimal(anchor.amount) / (len(dates) + 1)).quantize(CENT, rounding=ROUND_HALF_UP)
        note = self._recurring_note(anchor)
        results: List[RecurringBookingResult] = []

        for occurrence in dates:
            try:
                booking = self._create_occurrence(anchor, occurrence, share, note)
            except (DomainException, RepositoryException, SQLAlchemyError) as exc:
                message = exc.message if isinstance(exc, DomainException) else str(exc)
                self.logger.error(
                    f"Recurring booking for {format_date(occurrence)} "
                    f"(anchor {anchor.id}) failed: {message}"
                )
                results.append(
                    RecurringBookingResult(booking_date=occurrence, success=False, error=message)
                )
                continue
            results.append(
                RecurringBookingResult(booking_date=occurrence, success=True, booking_id=booking.id)
            )

        return results

    def _create_occurrence(
        self, anchor: Booking, occurrence: date, amount: Decimal, note: str
    ) -> Booking:
        with booking_slot_lock(anchor.court_id, occurrence) as acquired:
            if not acquired:
                raise BookingConflictException(SLOT_LOCKED_MESSAGE, code="SLOT_LOCKED")

            if self.conflict_checker.find_schedule_block(
                anchor.court_id, occurrence, anchor.start_time, anchor.end_time
            ):
                raise BookingConflictException(BLOCKED_SLOT_MESSAGE, code="SCHEDULE_BLOCKED")
            if self.conflict_checker.has_conflict(
                anchor.court_id, occurrence, anchor.start_time, anchor.end_time
            ):
                raise BookingConflictException()

            try:
                with self.repository.transaction():
                    return self.repository.create(
                        user_id=anchor.user_id,
                        court_id=anchor.court_id,
                        booking_date=occurrence,
                        start_time=anchor.start_time,
                        end_time=anchor.end_time,
                        amount=amount,
                        status=anchor.status,
                        payment_status=anchor.payment_status,
                        is_monthly=False,
                        subscription_end_date=None,
                        notes=note,
                    )
            except IntegrityError as exc:
                message, scope = self._resolve_integrity_conflict_message(exc)
                if scope is not None:
                    raise BookingConflictException(message) from exc
                raise BookingPersistenceException() from exc

    # ------------------------------------------------------------------
    # Lookups and lifecycle transitions
    # ------------------------------------------------------------------

    def get_booking(self, booking_id: str) -> Booking:
        booking = self.repository.get_by_id(booking_id)
        if booking is None:
            raise NotFoundException(
                "Booking not found", code="BOOKING_NOT_FOUND", details={"booking_id": booking_id}
            )
        return booking

    @BaseService.measure_operation("list_bookings")
    def list_bookings(
        self, court_id: str, booking_date: date, include_cancelled: bool = False
    ) -> List[Booking]:
        return self.repository.get_bookings_for_court_and_date(
            court_id, booking_date, include_cancelled=include_cancelled
        )

    @BaseService.measure_operation("cancel_booking")
    def cancel_booking(self, booking_id: str) -> Booking:
        """Cancel a booking. The row stays, and it no longer blocks the slot."""
        self.log_operation("cancel_booking", booking_id=booking_id)
        booking = self.get_booking(booking_id)
        if booking.status == BookingStatus.CANCELLED.value:
            raise BusinessRuleException(
                "Booking is already cancelled",
                code="ALREADY_CANCELLED",
                details={"booking_id": booking_id},
            )
        if booking.status == BookingStatus.COMPLETED.value:
            raise BusinessRuleException(
                "A completed booking cannot be cancelled",
                code="BOOKING_COMPLETED",
                details={"booking_id": booking_id},
            )
        with self.transaction():
            booking.cancel()
        return booking

    @BaseService.measure_operation("update_status")
    def update_status(
        self,
        booking_id: str,
        status: Optional[BookingStatus] = None,
        payment_status: Optional[PaymentStatus] = None,
    ) -> Booking:
        """
        Administrative status / payment transitions.

        A completed booking keeps its status and a cancelled one cannot be
        reactivated; payment status moves freely.
        """
        self.log_operation(
            "update_status",
            booking_id=booking_id,
            status=status.value if status else None,
            payment_status=payment_status.value if payment_status else None,
        )
        booking = self.get_booking(booking_id)

        if status is not None and status.value != booking.status:
            if booking.status == BookingStatus.COMPLETED.value:
                raise BusinessRuleException(
                    "A completed booking cannot change status",
                    code="BOOKING_COMPLETED",
                    details={"booking_id": booking_id, "requested_status": status.value},
                )
            if booking.status == BookingStatus.CANCELLED.value:
                raise BusinessRuleException(
                    "A cancelled booking cannot be reactivated",
                    code="BOOKING_CANCELLED",
                    details={"booking_id": booking_id, "requested_status": status.value},
                )

        with self.transaction():
            if status is not None and status.value != booking.status:
                if status == BookingStatus.CANCELLED:
                    booking.cancel()
                else:
                    booking.status = status.value
            if payment_status is not None:
                booking.payment_status = payment_status.value
        return booking


__all__ = [
    "BookingService",
    "BookingSubmissionResult",
    "RecurringBookingResult",
]
