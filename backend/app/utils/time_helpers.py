"""
Date and clock-time helpers used at every boundary of the booking engine.

All day-of-week arithmetic goes through ``day_of_week`` (Sunday=0 .. Saturday=6).
Dates cross boundaries as ``YYYY-MM-DD`` built from the date's own components,
never through a timezone-aware round trip.
"""

from datetime import date, datetime, time
import re

_DATE_ONLY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_CLOCK_RE = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)(?::([0-5]\d))?$")

SUNDAY = 0
SATURDAY = 6


def day_of_week(d: date) -> int:
    """Return the canonical day of week for ``d``: Sunday=0 .. Saturday=6."""
    # date.weekday() is Monday=0 .. Sunday=6
    return (d.weekday() + 1) % 7


def format_date(d: date) -> str:
    """Canonical YYYY-MM-DD string."""
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def parse_date(value: str) -> date:
    """Parse a strict YYYY-MM-DD string; anything with a time component is rejected."""
    if not isinstance(value, str) or not _DATE_ONLY_RE.match(value.strip()):
        raise ValueError(f"Invalid date '{value}'. Expected YYYY-MM-DD")
    return datetime.strptime(value.strip(), "%Y-%m-%d").date()


def parse_clock_time(value: str) -> time:
    """Parse HH:MM or HH:MM:SS (24-hour) into a time."""
    match = _CLOCK_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValueError(f"Invalid time format '{value}'. Expected HH:MM (24-hour)")
    hour, minute, second = match.group(1), match.group(2), match.group(3) or "0"
    return time(int(hour), int(minute), int(second))


def is_full_hour(t: time) -> bool:
    """True when ``t`` is an exact clock hour (HH:00)."""
    return t.minute == 0 and t.second == 0 and t.microsecond == 0


def time_to_string(t: time) -> str:
    """Always return HH:MM format"""
    return t.strftime("%H:%M")
