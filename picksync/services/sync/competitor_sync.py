"""
Competitor sync service.

Pulls the ESPN team list and reconciles it into the `competitors` table.
"""
import logging

from picksync.schemas.records import MappingReport
from picksync.schemas.sync import SyncEntity, SyncResult, SyncStage, SyncStatus
from picksync.services.sync.base import BaseSyncService, sync_stage
from picksync.services.sync.mapper import map_competitors
from picksync.services.sync.reconciler import Reconciler

logger = logging.getLogger(__name__)


class CompetitorSyncService(BaseSyncService):
    """Service for syncing teams (competitors) from ESPN."""

    async def sync_competitors(self) -> SyncResult:
        """
        Fetch, map and reconcile all teams.

        Returns:
            Successful SyncResult; count is 0 when ESPN returned no data

        Raises:
            SyncStageError: a stage failed (the batch was rolled back)
        """
        logger.info("Starting competitor sync")
        report = MappingReport()

        with sync_stage(SyncStage.FETCH):
            payload = await self.client.get_teams()
        if payload is None:
            logger.warning("No teams data received from ESPN, nothing to sync")
            return SyncResult(entity=SyncEntity.COMPETITORS, status=SyncStatus.SUCCESS)

        with sync_stage(SyncStage.MAP):
            records = map_competitors(payload, report)

        with sync_stage(SyncStage.RECONCILE):
            sport_id = await self._get_sport_id()
            stats = await Reconciler(self.db, self.external_source).upsert_competitors(
                records, sport_id
            )

        if report.skipped:
            logger.warning(f"Skipped {report.skipped} malformed teams")
        logger.info(f"Competitor sync complete: {stats.total} synced")
        return SyncResult(
            entity=SyncEntity.COMPETITORS,
            status=SyncStatus.SUCCESS,
            count=stats.total,
            skipped=report.skipped,
        )
