# backend/app/models/availability.py
"""
Availability models for courts.

Classes:
    ScheduleBlock: Administrator block that takes a court out of service
    Holiday: Calendar date priced with the holiday rate
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    String,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base


class ScheduleBlock(Base):
    """Court closed between two instants (timezone-naive, venue local time)."""

    __tablename__ = "schedule_blocks"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    court_id = Column(String(26), ForeignKey("courts.id", ondelete="CASCADE"), nullable=False)
    start_datetime = Column(DateTime, nullable=False)
    end_datetime = Column(DateTime, nullable=False)
    reason = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    court = relationship("Court", back_populates="schedule_blocks")

    __table_args__ = (
        CheckConstraint("end_datetime > start_datetime", name="check_block_range"),
        Index("idx_schedule_blocks_court_start", "court_id", "start_datetime"),
    )

    def __repr__(self) -> str:
        return f"<ScheduleBlock {self.start_datetime} - {self.end_datetime} {self.reason or ''}>"


class Holiday(Base):
    __tablename__ = "holidays"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    date = Column(Date, nullable=False, unique=True, index=True)
    name = Column(String(100), nullable=False)

    def __repr__(self) -> str:
        return f"<Holiday {self.date} - {self.name}>"
