# backend/app/api/dependencies/database.py
"""
Request-scoped database session.

Routes and service dependencies depend on this function rather than on
``app.database.get_db`` directly so tests can override a single symbol.
"""

from typing import Generator

from sqlalchemy.orm import Session

from ...database import get_db as session_scope


def get_db() -> Generator[Session, None, None]:
    """Yield one session per request; committed on success, rolled back on error."""
    yield from session_scope()
