"""Weekly recurrence for monthly court subscriptions."""

from __future__ import annotations

from datetime import date, timedelta
from typing import List

WEEK = timedelta(days=7)


def generate_weekly_dates(start_date: date, end_date: date) -> List[date]:
    """
    Same-weekday dates from ``start_date`` through ``end_date`` inclusive.

    ``start_date`` is always the first element, even when ``end_date`` precedes it.
    """
    dates = [start_date]
    current = start_date + WEEK
    while current <= end_date:
        dates.append(current)
        current += WEEK
    return dates


def derived_dates(start_date: date, end_date: date) -> List[date]:
    """Occurrences after the anchor date."""
    return generate_weekly_dates(start_date, end_date)[1:]
