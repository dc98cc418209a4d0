"""Interval math shared by conflict checking, rate resolution and availability."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Tuple

ONE_HOUR = timedelta(hours=1)


def absolute_range(on_date: date, start: time, end: time) -> Tuple[datetime, datetime]:
    """
    Anchor a clock-time range to ``on_date``.

    An end that is not strictly after the start crosses midnight and lands on the
    next calendar day.
    """
    start_dt = datetime.combine(on_date, start)
    end_dt = datetime.combine(on_date, end)
    if end_dt <= start_dt:
        end_dt += timedelta(days=1)
    return start_dt, end_dt


def ranges_overlap(
    a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime
) -> bool:
    """Open-interval overlap: touching endpoints do not overlap."""
    return a_start < b_end and a_end > b_start


def duration_hours(on_date: date, start: time, end: time) -> float:
    start_dt, end_dt = absolute_range(on_date, start, end)
    return (end_dt - start_dt) / ONE_HOUR
