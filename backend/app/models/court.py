# backend/app/models/court.py
"""Court model: the bookable resource."""

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base


class Court(Base):
    __tablename__ = "courts"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    name = Column(String(100), nullable=False)
    court_type = Column(String(50), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    rate_schedules = relationship(
        "RateSchedule", back_populates="court", cascade="all, delete-orphan"
    )
    schedule_blocks = relationship(
        "ScheduleBlock", back_populates="court", cascade="all, delete-orphan"
    )
    bookings = relationship("Booking", back_populates="court")

    def __repr__(self) -> str:
        return f"<Court {self.id} {self.name!r} active={self.is_active}>"
