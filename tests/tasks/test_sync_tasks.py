from unittest.mock import AsyncMock, Mock, patch

import pytest
from redis.exceptions import LockError

from picksync.services.sync_lock import lock_name, sync_lock
from picksync.tasks import celery_app
from picksync.tasks import sync_tasks


def fake_redis(acquired: bool) -> tuple[Mock, Mock]:
    lock = Mock()
    lock.acquire = AsyncMock(return_value=acquired)
    lock.release = AsyncMock()
    redis = Mock()
    redis.lock = Mock(return_value=lock)
    return redis, lock


@pytest.mark.asyncio
class TestSyncLock:
    async def test_acquired_lock_is_released(self):
        redis, lock = fake_redis(True)

        async with sync_lock("events", redis=redis, timeout=60) as acquired:
            assert acquired is True

        redis.lock.assert_called_once_with("picksync:sync-lock:events", timeout=60, blocking=False)
        lock.release.assert_awaited_once()

    async def test_held_lock_is_not_released(self):
        redis, lock = fake_redis(False)

        async with sync_lock("events", redis=redis, timeout=60) as acquired:
            assert acquired is False

        lock.release.assert_not_awaited()

    async def test_expired_lock_release_is_tolerated(self):
        redis, lock = fake_redis(True)
        lock.release.side_effect = LockError("expired")

        async with sync_lock("competitors", redis=redis, timeout=60):
            pass

        lock.release.assert_awaited_once()


@pytest.mark.asyncio
class TestSyncTasks:
    async def test_entity_run_skipped_while_locked(self):
        redis, _ = fake_redis(False)

        with patch("picksync.services.sync_lock._get_redis", return_value=redis):
            result = await sync_tasks._run_entity(sync_tasks.SyncEntity.EVENTS)

        assert result["status"] == "skipped"
        assert result["entity"] == "events"
        assert result["count"] == 0


def test_task_names_registered():
    for name in ("sync_competitors", "sync_events", "full_sync", "refresh_season_status"):
        assert f"picksync.tasks.sync_tasks.{name}" in celery_app.tasks


def test_lock_name():
    assert lock_name("competitors") == "picksync:sync-lock:competitors"
