# backend/app/models/booking.py
"""
Booking model for the court booking engine.

A booking reserves one court for one contiguous time range on one calendar date.
An end time earlier than (or equal to) the start time means the booking runs
past midnight into the next day.

Bookings are never deleted: cancellation is a status transition so the row stays
in history but drops out of conflict checks.
"""

from datetime import datetime, timezone
from enum import Enum
import logging
from typing import Any

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    Time,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base
from ..utils.time_helpers import format_date, time_to_string

logger = logging.getLogger(__name__)


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class PaymentStatus(str, Enum):
    """Payment state tracked alongside the booking."""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


ACTIVE_BOOKING_PREDICATE = "status <> 'cancelled'"


class Booking(Base):
    """One reservation of one court."""

    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)

    user_id = Column(String(26), nullable=False, index=True)
    court_id = Column(String(26), ForeignKey("courts.id"), nullable=False)

    booking_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    # Computed at creation/update time, never taken from the client
    amount = Column(Numeric(10, 2), nullable=False)

    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value, index=True)
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value)

    is_monthly = Column(Boolean, nullable=False, default=False)
    subscription_end_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    court = relationship("Court", back_populates="bookings")

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled', 'completed')",
            name="ck_bookings_status",
        ),
        CheckConstraint(
            "payment_status IN ('pending', 'paid', 'failed', 'refunded')",
            name="ck_bookings_payment_status",
        ),
        CheckConstraint("amount >= 0", name="check_amount_non_negative"),
        CheckConstraint(
            "is_monthly = false OR subscription_end_date >= booking_date",
            name="check_subscription_end_date",
        ),
        # Two active bookings starting at the same hour on the same court always overlap.
        # PostgreSQL additionally gets a full range exclusion constraint from the migration.
        Index(
            "uq_bookings_active_court_slot",
            "court_id",
            "booking_date",
            "start_time",
            unique=True,
            sqlite_where=text(ACTIVE_BOOKING_PREDICATE),
            postgresql_where=text(ACTIVE_BOOKING_PREDICATE),
        ),
        Index("idx_bookings_court_date", "court_id", "booking_date"),
    )

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        if not self.status:
            self.status = BookingStatus.PENDING.value
        if not self.payment_status:
            self.payment_status = PaymentStatus.PENDING.value
        if self.is_monthly is None:
            self.is_monthly = False

    def __repr__(self) -> str:
        return (
            f"<Booking {self.id}: court={self.court_id}, date={self.booking_date}, "
            f"time={self.start_time}-{self.end_time}, status={self.status}>"
        )

    @property
    def is_active(self) -> bool:
        return self.status != BookingStatus.CANCELLED.value

    def cancel(self) -> None:
        """Cancel this booking; the row is kept."""
        self.status = BookingStatus.CANCELLED.value
        self.cancelled_at = datetime.now(timezone.utc)
        logger.info(f"Booking {self.id} cancelled")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "court_id": self.court_id,
            "booking_date": format_date(self.booking_date),
            "start_time": time_to_string(self.start_time),
            "end_time": time_to_string(self.end_time),
            "amount": self.amount,
            "status": self.status,
            "payment_status": self.payment_status,
            "is_monthly": bool(self.is_monthly),
            "subscription_end_date": (
                format_date(self.subscription_end_date) if self.subscription_end_date else None
            ),
            "notes": self.notes,
        }
