# backend/tests/conftest.py
"""
Pytest configuration for the court booking engine.

Every test that touches the database gets its own in-memory SQLite engine with
the full schema (including the partial unique index on active bookings), so no
state leaks between tests. The Redis slot lock is disabled; lock behaviour is
covered with mocks in tests/unit/core/test_booking_lock.py.
"""

import os

# Set testing mode BEFORE any app imports
os.environ["IS_TESTING"] = "true"
os.environ["BOOKING_LOCK_ENABLED"] = "false"
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"

from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Callable, Iterator, Optional

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.dependencies import get_db
from app.core.config import settings
from app.database import Base
from app.main import app
from app.models import Booking, BookingStatus, Court, Holiday, RateSchedule, ScheduleBlock
from app.utils.time_helpers import day_of_week

settings.is_testing = True
settings.booking_lock_enabled = False

# 2024-01-01 is a Monday
MONDAY = date(2024, 1, 1)
SATURDAY = date(2024, 1, 6)
SUNDAY = date(2024, 1, 7)
USER_ID = "01HZZZZZZZZZZZZZZZZZZZZZZZ"


@pytest.fixture
def engine() -> Iterator[Engine]:
    test_engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(test_engine, "connect")
    def _enable_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def db(engine: Engine) -> Iterator[Session]:
    """A fresh session per test; commits are real but die with the engine."""
    TestSessionLocal = sessionmaker(
        bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
    )
    session = TestSessionLocal()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def client(db: Session) -> Iterator[TestClient]:
    """Create a test client bound to the test session."""

    def override_get_db() -> Iterator[Session]:
        yield db

    app.dependency_overrides[get_db] = override_get_db
    test_client = TestClient(app)

    yield test_client

    app.dependency_overrides.clear()
    test_client.close()


@pytest.fixture
def court(db: Session) -> Court:
    court = Court(name="Court 1", court_type="padel", is_active=True)
    db.add(court)
    db.commit()
    return court


@pytest.fixture
def make_segment(db: Session) -> Callable[..., RateSchedule]:
    """Add a rate segment for a court on the weekday of ``on_date``."""

    def _make(
        court: Court,
        on_date: date,
        start: str,
        end: str,
        price: str = "50",
        *,
        price_weekend: Optional[str] = None,
        price_holiday: Optional[str] = None,
        is_monthly: bool = False,
        monthly_discount: Optional[str] = None,
        is_blocked: bool = False,
        min_booking_time: int = 60,
    ) -> RateSchedule:
        segment = RateSchedule(
            court_id=court.id,
            day_of_week=day_of_week(on_date),
            start_time=time.fromisoformat(start),
            end_time=time.fromisoformat(end),
            price=Decimal(price),
            price_weekend=Decimal(price_weekend) if price_weekend else None,
            price_holiday=Decimal(price_holiday) if price_holiday else None,
            is_monthly=is_monthly,
            monthly_discount=Decimal(monthly_discount) if monthly_discount else None,
            is_blocked=is_blocked,
            min_booking_time=min_booking_time,
        )
        db.add(segment)
        db.commit()
        return segment

    return _make


@pytest.fixture
def make_booking(db: Session) -> Callable[..., Booking]:
    """Insert a booking row directly, bypassing the service checks."""

    def _make(
        court: Court,
        on_date: date,
        start: str,
        end: str,
        *,
        status: str = BookingStatus.CONFIRMED.value,
        amount: str = "50",
    ) -> Booking:
        booking = Booking(
            user_id=USER_ID,
            court_id=court.id,
            booking_date=on_date,
            start_time=time.fromisoformat(start),
            end_time=time.fromisoformat(end),
            amount=Decimal(amount),
            status=status,
        )
        db.add(booking)
        db.commit()
        return booking

    return _make


@pytest.fixture
def make_block(db: Session) -> Callable[..., ScheduleBlock]:
    def _make(court: Court, start: datetime, end: datetime, reason: str = "Maintenance"):
        block = ScheduleBlock(
            court_id=court.id, start_datetime=start, end_datetime=end, reason=reason
        )
        db.add(block)
        db.commit()
        return block

    return _make


@pytest.fixture
def make_holiday(db: Session) -> Callable[..., Holiday]:
    def _make(on_date: date, name: str = "Public holiday") -> Holiday:
        holiday = Holiday(date=on_date, name=name)
        db.add(holiday)
        db.commit()
        return holiday

    return _make


@pytest.fixture
def booking_payload(court: Court) -> Callable[..., dict]:
    """JSON-ready booking request for ``court``."""

    def _make(
        on_date: str = "2024-01-01", start: str = "08:00", end: str = "10:00", **extra: Any
    ) -> dict:
        payload = {
            "court_id": court.id,
            "user_id": USER_ID,
            "booking_date": on_date,
            "start_time": start,
            "end_time": end,
        }
        payload.update(extra)
        return payload

    return _make
