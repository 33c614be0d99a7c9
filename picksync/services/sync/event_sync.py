"""
Event sync service.

Pulls the ESPN scoreboard for a date window and reconciles events and their
participants. Seasons referenced by the payload are created on demand.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from picksync.config import Settings
from picksync.schemas.records import EventRecord, MappingReport
from picksync.schemas.sync import SyncEntity, SyncResult, SyncStage, SyncStatus
from picksync.services.date_window import SyncWindow
from picksync.services.espn_client import EspnClient
from picksync.services.sync.base import BaseSyncService, sync_stage
from picksync.services.sync.mapper import map_events
from picksync.services.sync.reconciler import Reconciler
from picksync.services.sync.season_sync import SeasonSyncService

logger = logging.getLogger(__name__)


class EventSyncService(BaseSyncService):
    """Service for syncing games (events) from the ESPN scoreboard."""

    def __init__(
        self,
        db: AsyncSession,
        client: EspnClient | None = None,
        settings: Settings | None = None,
        season_sync: SeasonSyncService | None = None,
    ):
        super().__init__(db, client, settings)
        self.season_sync = season_sync or SeasonSyncService(db, self.client, self.settings)

    async def _season_ids(self, records: list[EventRecord]) -> dict[int, int]:
        season_ids = {}
        for year in sorted({r.season_year for r in records}):
            season = await self.season_sync.ensure_season(year)
            season_ids[year] = season.id
        return season_ids

    async def sync_window(self, window: SyncWindow, fallback_season: int) -> SyncResult:
        """
        Fetch, map and reconcile all events in `window`.

        Args:
            window: Date range to fetch (end exclusive)
            fallback_season: Season year for events whose payload has none

        Returns:
            Successful SyncResult; count is 0 for an empty window or no data

        Raises:
            SyncStageError: a stage failed (the batch was rolled back)
        """
        if window.is_empty:
            logger.info(f"Empty sync window starting {window.start}, nothing to fetch")
            return SyncResult(entity=SyncEntity.EVENTS, status=SyncStatus.SUCCESS)

        logger.info(f"Starting event sync for {window.start} to {window.last_day} (season {fallback_season})")
        report = MappingReport()

        with sync_stage(SyncStage.FETCH):
            payload = await self.client.get_scoreboard(window.start, window.last_day)
        if payload is None:
            logger.warning("No scoreboard data received from ESPN, nothing to sync")
            return SyncResult(entity=SyncEntity.EVENTS, status=SyncStatus.SUCCESS)

        with sync_stage(SyncStage.MAP):
            records = map_events(payload, fallback_season, report)

        with sync_stage(SyncStage.RECONCILE):
            if not records:
                stats = None
            else:
                sport_id = await self._get_sport_id()
                season_ids = await self._season_ids(records)
                stats = await Reconciler(self.db, self.external_source).upsert_events(
                    records, season_ids, sport_id=sport_id
                )

        if report.skipped:
            logger.warning(f"Skipped {report.skipped} malformed events")
        count = stats.total if stats else 0
        logger.info(f"Event sync complete: {count} synced")
        return SyncResult(
            entity=SyncEntity.EVENTS,
            status=SyncStatus.SUCCESS,
            count=count,
            skipped=report.skipped,
        )
