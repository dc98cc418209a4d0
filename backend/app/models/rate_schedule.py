# backend/app/models/rate_schedule.py
"""
Priced rate segments for courts.

A segment prices one court on one day of week (Sunday=0 .. Saturday=6) over the
half-open clock range [start_time, end_time). An end time at or before the start
time means the segment runs past midnight.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Time,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base

DEFAULT_MIN_BOOKING_MINUTES = 60


class RateSchedule(Base):
    __tablename__ = "schedules"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    court_id = Column(String(26), ForeignKey("courts.id", ondelete="CASCADE"), nullable=False)
    day_of_week = Column(Integer, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    price = Column(Numeric(10, 2), nullable=False)
    price_weekend = Column(Numeric(10, 2), nullable=True)
    price_holiday = Column(Numeric(10, 2), nullable=True)

    is_monthly = Column(Boolean, nullable=False, default=False)
    monthly_discount = Column(Numeric(5, 2), nullable=True)
    is_blocked = Column(Boolean, nullable=False, default=False)
    min_booking_time = Column(Integer, nullable=False, default=DEFAULT_MIN_BOOKING_MINUTES)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    court = relationship("Court", back_populates="rate_schedules")

    __table_args__ = (
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="check_day_of_week_range"),
        CheckConstraint("price > 0", name="check_price_positive"),
        CheckConstraint(
            "price_weekend IS NULL OR price_weekend > 0", name="check_price_weekend_positive"
        ),
        CheckConstraint(
            "price_holiday IS NULL OR price_holiday > 0", name="check_price_holiday_positive"
        ),
        CheckConstraint(
            "monthly_discount IS NULL OR (monthly_discount >= 0 AND monthly_discount <= 100)",
            name="check_monthly_discount_range",
        ),
        CheckConstraint("min_booking_time > 0", name="check_min_booking_time_positive"),
        Index("idx_schedules_court_day", "court_id", "day_of_week"),
    )

    def __repr__(self) -> str:
        return (
            f"<RateSchedule court={self.court_id} day={self.day_of_week} "
            f"{self.start_time}-{self.end_time} price={self.price}>"
        )
