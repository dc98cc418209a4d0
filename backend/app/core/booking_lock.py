"""
Redis slot lock around the booking check-then-insert sequence.

The lock is keyed by court and date so concurrent submissions for the same court
day are serialized. It fails open when Redis is unreachable: the storage-level
constraints on ``bookings`` still reject a double booking.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date
import logging
import threading
import time
from typing import Iterator, Optional

from redis import Redis

from app.core.config import settings
from app.monitoring.prometheus_metrics import prometheus_metrics
from app.utils.time_helpers import format_date

logger = logging.getLogger(__name__)

_SYNC_REDIS: Optional[Redis] = None
_SYNC_REDIS_LOCK = threading.Lock()
# After a failed connect, skip Redis until this monotonic time
_SYNC_REDIS_RETRY_AT = 0.0
REDIS_RETRY_BACKOFF_SECONDS = 30.0


def slot_lock_key(court_id: str, booking_date: date) -> str:
    return f"court:{court_id}:{format_date(booking_date)}:mutex"


def _namespaced_key(key: str) -> str:
    return f"{settings.lock_namespace}:lock:{key}"


def _get_sync_redis() -> Optional[Redis]:
    global _SYNC_REDIS, _SYNC_REDIS_RETRY_AT
    if _SYNC_REDIS is not None:
        return _SYNC_REDIS
    if time.monotonic() < _SYNC_REDIS_RETRY_AT:
        return None
    with _SYNC_REDIS_LOCK:
        if _SYNC_REDIS is not None:
            return _SYNC_REDIS
        if time.monotonic() < _SYNC_REDIS_RETRY_AT:
            return None
        try:
            client = Redis.from_url(
                settings.redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=1,
            )
            client.ping()
        except Exception as exc:
            _SYNC_REDIS_RETRY_AT = time.monotonic() + REDIS_RETRY_BACKOFF_SECONDS
            logger.warning(
                "booking_lock_sync_redis_unavailable: %s (next attempt in %.0fs)",
                exc,
                REDIS_RETRY_BACKOFF_SECONDS,
            )
            return None
        _SYNC_REDIS = client
        return _SYNC_REDIS


def acquire_booking_lock_sync(lock_key: str, ttl_s: int) -> bool:
    client = _get_sync_redis()
    if client is None:
        prometheus_metrics.record_booking_lock("acquire", "redis_unavailable")
        logger.warning("booking_lock_sync_redis_unavailable", extra={"lock_key": lock_key})
        return True
    try:
        acquired = bool(client.set(_namespaced_key(lock_key), str(time.time()), nx=True, ex=ttl_s))
        if acquired:
            prometheus_metrics.record_booking_lock("acquire", "success")
        else:
            prometheus_metrics.record_booking_lock("acquire", "blocked")
        return acquired
    except Exception as exc:
        prometheus_metrics.record_booking_lock("acquire", "error")
        logger.warning(
            "booking_lock_sync_failed",
            extra={
                "lock_key": lock_key,
                "error": str(exc),
                "error_type": type(exc).__name__,
            },
        )
        return True


def release_booking_lock_sync(lock_key: str) -> None:
    client = _get_sync_redis()
    if client is None:
        prometheus_metrics.record_booking_lock("release", "redis_unavailable")
        return
    try:
        deleted = client.delete(_namespaced_key(lock_key))
        if deleted:
            prometheus_metrics.record_booking_lock("release", "success")
        else:
            prometheus_metrics.record_booking_lock("release", "not_found")
    except Exception as exc:
        prometheus_metrics.record_booking_lock("release", "error")
        logger.warning(
            "booking_lock_sync_release_failed",
            extra={
                "lock_key": lock_key,
                "error": str(exc),
                "error_type": type(exc).__name__,
            },
        )


@contextmanager
def booking_slot_lock(
    court_id: str, booking_date: date, ttl_s: Optional[int] = None
) -> Iterator[bool]:
    """Yield True when the court/date lock is held (or Redis is down), False if taken."""
    if not settings.booking_lock_enabled:
        yield True
        return

    lock_key = slot_lock_key(court_id, booking_date)
    acquired = acquire_booking_lock_sync(lock_key, ttl_s or settings.booking_lock_ttl_seconds)
    try:
        yield acquired
    finally:
        if acquired:
            release_booking_lock_sync(lock_key)
