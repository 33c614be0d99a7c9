"""
Redis-backed mutual exclusion for scheduled syncs.

Celery beat can fire a new run of an entity class while the previous one is
still working (slow upstream, long retries). Each run takes a non-blocking
lease per entity class; a run that cannot get it is skipped. The lease
expires on its own after `sync_lock_timeout_seconds` if a worker dies.
"""
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from redis.asyncio import Redis
from redis.exceptions import LockError

from picksync.config import get_settings

logger = logging.getLogger(__name__)

LOCK_PREFIX = "picksync:sync-lock"

_redis: Redis | None = None


def _get_redis() -> Redis:
    global _redis
    if _redis is None:
        _redis = Redis.from_url(get_settings().redis_url, decode_responses=True)
    return _redis


async def close_redis() -> None:
    global _redis
    if _redis is None:
        return
    try:
        await _redis.close()
    finally:
        _redis = None


def lock_name(entity: str) -> str:
    return f"{LOCK_PREFIX}:{entity}"


@asynccontextmanager
async def sync_lock(
    entity: str,
    redis: Redis | None = None,
    timeout: float | None = None,
) -> AsyncIterator[bool]:
    """
    Try to take the sync lease for `entity` without waiting.

    Yields True when the lease is held by this run, False when another run
    holds it. The lease is released on exit.
    """
    redis = redis or _get_redis()
    if timeout is None:
        timeout = get_settings().sync_lock_timeout_seconds
    name = lock_name(entity)
    lock = redis.lock(name, timeout=timeout, blocking=False)

    acquired = await lock.acquire(blocking=False)
    if not acquired:
        logger.info(f"Sync lock {name} is held by another run")
    try:
        yield acquired
    finally:
        if acquired:
            try:
                await lock.release()
            except LockError:
                logger.warning(f"Sync lock {name} expired before release")
