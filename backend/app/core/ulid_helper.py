"""ULID identifiers for courts, rate segments, blocks and bookings."""

import ulid

from .exceptions import ValidationException


def generate_ulid() -> str:
    """Generate a new ULID string (primary key default for every table)."""
    return str(ulid.ULID())


def is_valid_ulid(value: object) -> bool:
    if not isinstance(value, str):
        return False
    try:
        ulid.ULID.from_str(value)
    except ValueError:
        return False
    return True


def require_ulid(value: object, field: str) -> str:
    """Return ``value`` unchanged or raise a 400 naming the offending field."""
    if not is_valid_ulid(value):
        raise ValidationException(
            f"Invalid {field}: expected a 26-character ULID",
            code="INVALID_IDENTIFIER",
            details={"field": field},
        )
    return str(value)
