"""
Shared event loop for running the async sync pipeline from Celery tasks.

Celery tasks are synchronous. Reusing one loop per worker process keeps the
SQLAlchemy async engine pool and the Redis client bound to a single loop
across task invocations.
"""
import asyncio
import logging
from typing import Any, Coroutine, TypeVar

logger = logging.getLogger(__name__)

_loop: asyncio.AbstractEventLoop | None = None

T = TypeVar("T")


def get_event_loop() -> asyncio.AbstractEventLoop:
    """Get the worker's shared loop, creating it on first use or after it was closed."""
    global _loop

    if _loop is None or _loop.is_closed():
        _loop = asyncio.new_event_loop()
        asyncio.set_event_loop(_loop)
        logger.debug("Created shared event loop for Celery tasks")

    return _loop


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run a coroutine to completion on the shared loop.

    Example:
        @celery_app.task
        def sync_events():
            return run_async(_sync_events())
    """
    return get_event_loop().run_until_complete(coro)


def cleanup_event_loop() -> None:
    """Cancel whatever is still pending and close the shared loop (worker shutdown)."""
    global _loop

    if _loop is None or _loop.is_closed():
        _loop = None
        return

    try:
        pending = asyncio.all_tasks(_loop)
        for task in pending:
            task.cancel()
        if pending:
            _loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
        _loop.close()
        logger.info("Shared event loop closed")
    finally:
        _loop = None
