import logging

from picksync.database import AsyncSessionLocal
from picksync.schemas.sync import SyncEntity, SyncResult, SyncStatus
from picksync.services.season_cache import SeasonCache
from picksync.services.sync import SyncOrchestrator
from picksync.services.sync_lock import sync_lock
from picksync.tasks import celery_app
from picksync.utils.async_celery import run_async

logger = logging.getLogger(__name__)

# One resolved-season cache per worker process, shared by every task run
season_cache = SeasonCache()


def _skipped(entity: SyncEntity) -> dict:
    logger.info(f"{entity.value} sync already running, skipping")
    return SyncResult(entity=entity, status=SyncStatus.SKIPPED).model_dump(mode="json")


async def _run_entity(entity: SyncEntity) -> dict:
    async with sync_lock(entity.value) as acquired:
        if not acquired:
            return _skipped(entity)
        async with AsyncSessionLocal() as db:
            orchestrator = SyncOrchestrator(db, season_cache=season_cache)
            result = await orchestrator.run(entity)
            return result.model_dump(mode="json")


async def _full_sync() -> dict:
    """Competitors then events, each under its own lock."""
    results = {}
    for entity in (SyncEntity.COMPETITORS, SyncEntity.EVENTS):
        results[entity.value] = await _run_entity(entity)
    return results


async def _refresh_season_status() -> dict:
    async with AsyncSessionLocal() as db:
        orchestrator = SyncOrchestrator(db, season_cache=season_cache)
        updated = await orchestrator.refresh_season_status()
        return {"seasons_updated": updated}


@celery_app.task(name="picksync.tasks.sync_tasks.sync_competitors")
def sync_competitors():
    """Celery task: Sync teams from ESPN."""
    return run_async(_run_entity(SyncEntity.COMPETITORS))


@celery_app.task(name="picksync.tasks.sync_tasks.sync_events")
def sync_events():
    """Celery task: Sync games in the configured window around now."""
    return run_async(_run_entity(SyncEntity.EVENTS))


@celery_app.task(name="picksync.tasks.sync_tasks.full_sync")
def full_sync():
    """Celery task: Full synchronization."""
    return run_async(_full_sync())


@celery_app.task(name="picksync.tasks.sync_tasks.refresh_season_status")
def refresh_season_status():
    """Celery task: Recompute season active flags."""
    return run_async(_refresh_season_status())
