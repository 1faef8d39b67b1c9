from __future__ import annotations

from contextlib import contextmanager
import logging
import threading
import time
from typing import Iterator, Optional, Tuple

from redis import Redis
from redis.exceptions import RedisError
import ulid

from app.core.config import settings
from app.monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

_SYNC_REDIS: Optional[Redis] = None
_SYNC_REDIS_LOCK = threading.Lock()
# Monotonic deadline before which a failed connection is not retried.
_SYNC_REDIS_RETRY_AT: float = 0.0
_RECONNECT_BACKOFF_SECONDS = 30.0

# Deletes the key only while it still holds this holder's token.
RELEASE_LUA = r"""
if redis.call('GET', KEYS[1]) == ARGV[1] then
  return redis.call('DEL', KEYS[1])
end
return 0
"""


def _lock_key(teacher_id: str) -> str:
    return f"{settings.booking_lock_namespace}:lock:teacher:{teacher_id}:booking"


def _get_sync_redis() -> Optional[Redis]:
    global _SYNC_REDIS, _SYNC_REDIS_RETRY_AT
    if not settings.redis_url:
        return None
    if _SYNC_REDIS is not None:
        return _SYNC_REDIS
    if time.monotonic() < _SYNC_REDIS_RETRY_AT:
        return None
    with _SYNC_REDIS_LOCK:
        if _SYNC_REDIS is not None:
            return _SYNC_REDIS
        if time.monotonic() < _SYNC_REDIS_RETRY_AT:
            return None
        timeout = settings.booking_lock_connect_timeout
        try:
            client = Redis.from_url(
                settings.redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=timeout,
                socket_timeout=timeout,
            )
            client.ping()
        except (RedisError, OSError, ValueError) as exc:
            _SYNC_REDIS_RETRY_AT = time.monotonic() + _RECONNECT_BACKOFF_SECONDS
            logger.warning(
                "booking_lock_redis_unavailable: %s (retrying in %.0fs)",
                exc,
                _RECONNECT_BACKOFF_SECONDS,
            )
            return None
        _SYNC_REDIS = client
        return _SYNC_REDIS


def reset_redis_client() -> None:
    """Drop the cached client and any backoff so the next call reconnects."""
    global _SYNC_REDIS, _SYNC_REDIS_RETRY_AT
    with _SYNC_REDIS_LOCK:
        _SYNC_REDIS = None
        _SYNC_REDIS_RETRY_AT = 0.0


def acquire_teacher_lock(
    teacher_id: str, ttl_s: Optional[int] = None
) -> Tuple[bool, Optional[str]]:
    """
    Try to take the per-teacher booking mutex.

    Returns (acquired, token). The token identifies this holder and must be
    passed back to release_teacher_lock; it is None when there is nothing to
    release.

    Fails open: when Redis is not configured or errors, the caller proceeds and
    relies on database row locks alone.
    """
    client = _get_sync_redis()
    if client is None:
        prometheus_metrics.record_booking_lock("acquire", "redis_unavailable")
        return True, None
    ttl = ttl_s or settings.booking_lock_ttl_seconds
    token = str(ulid.ULID())
    try:
        acquired = bool(client.set(_lock_key(teacher_id), token, nx=True, ex=ttl))
    except RedisError as exc:
        prometheus_metrics.record_booking_lock("acquire", "error")
        logger.warning(
            "booking_lock_acquire_failed",
            extra={
                "teacher_id": teacher_id,
                "error": str(exc),
                "error_type": type(exc).__name__,
            },
        )
        return True, None
    prometheus_metrics.record_booking_lock("acquire", "success" if acquired else "blocked")
    return acquired, (token if acquired else None)


def release_teacher_lock(teacher_id: str, token: str) -> None:
    client = _get_sync_redis()
    if client is None:
        return
    try:
        deleted = client.eval(RELEASE_LUA, 1, _lock_key(teacher_id), token)
        prometheus_metrics.record_booking_lock("release", "success" if deleted else "not_found")
    except RedisError as exc:
        prometheus_metrics.record_booking_lock("release", "error")
        logger.warning(
            "booking_lock_release_failed",
            extra={
                "teacher_id": teacher_id,
                "error": str(exc),
                "error_type": type(exc).__name__,
            },
        )


@contextmanager
def teacher_booking_lock(teacher_id: str, ttl_s: Optional[int] = None) -> Iterator[bool]:
    acquired, token = acquire_teacher_lock(teacher_id, ttl_s=ttl_s)
    try:
        yield acquired
    finally:
        if token is not None:
            release_teacher_lock(teacher_id, token)
