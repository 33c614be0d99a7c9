"""
Sync orchestrator service.

Coordinates sync operations across the sync services: resolves the season,
bounds the fetch window, then runs the fetch/map/reconcile pipeline for each
entity class. Failures are isolated per entity class.
"""
import logging
from collections.abc import Callable
from datetime import date, datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from picksync.config import Settings, get_settings
from picksync.schemas.sync import (
    FullSyncResult,
    SyncEntity,
    SyncResult,
    SyncStage,
    SyncStatus,
)
from picksync.services.date_window import SyncWindow, clamp_to_horizon, compute_window
from picksync.services.espn_client import EspnClient, get_espn_client
from picksync.services.season_cache import SeasonCache
from picksync.services.season_resolver import SeasonResolver
from picksync.services.sync.base import SyncStageError, sync_stage
from picksync.services.sync.competitor_sync import CompetitorSyncService
from picksync.services.sync.event_sync import EventSyncService
from picksync.services.sync.season_sync import SeasonSyncService
from picksync.utils.dates import utcnow

logger = logging.getLogger(__name__)


class SyncOrchestrator:
    """
    Orchestrates sync operations across all sync services.

    Competitors run before events so that events find their teams already
    persisted; unknown teams still get a placeholder row.
    """

    def __init__(
        self,
        db: AsyncSession,
        client: EspnClient | None = None,
        settings: Settings | None = None,
        resolver: SeasonResolver | None = None,
        season_cache: SeasonCache | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        """
        Initialize the orchestrator with all sync services.

        Args:
            db: SQLAlchemy async session
            client: Optional ESPN client (uses singleton if not provided)
            settings: Optional settings (uses cached settings if not provided)
            resolver: Optional season resolver (built from the other arguments if not provided)
            season_cache: Cache for the default resolver; pass a long-lived one
                to share the resolved season across orchestrator instances
            clock: Returns the current naive UTC time
        """
        self.db = db
        self.client = client or get_espn_client()
        self.settings = settings or get_settings()
        self.clock = clock

        self.seasons = SeasonSyncService(db, self.client, self.settings, clock=clock)
        self.competitors = CompetitorSyncService(db, self.client, self.settings)
        self.events = EventSyncService(db, self.client, self.settings, season_sync=self.seasons)
        self.resolver = resolver or SeasonResolver(
            self.seasons, cache=season_cache, settings=self.settings, clock=clock
        )

    # ==================== Season queries ====================

    async def get_current_season(self) -> int:
        return await self.resolver.resolve_current_season()

    async def get_season_boundaries(self, year: int) -> tuple[date, date]:
        return await self.resolver.resolve_season_boundaries(year)

    async def refresh_season_status(self) -> int:
        """
        Recompute active flags on all seasons and drop the cached current season.

        Returns:
            Number of seasons whose active flag changed
        """
        updated = await self.seasons.update_active_status()
        self.resolver.clear_cache()
        return updated

    # ==================== Pipelines ====================

    async def _run_competitors(self) -> SyncResult:
        return await self.competitors.sync_competitors()

    async def _run_events(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> SyncResult:
        with sync_stage(SyncStage.RESOLVE_SEASON):
            season = await self.resolver.resolve_current_season()

        with sync_stage(SyncStage.COMPUTE_WINDOW):
            if start_date is not None and end_date is not None:
                window = self._clamp(start_date, end_date)
            else:
                window = compute_window(
                    self.clock(),
                    self.settings.sync_days_back,
                    self.settings.sync_days_forward,
                    horizon_months=self.settings.sync_horizon_months,
                )

        if window is None:
            logger.info(f"Range {start_date} to {end_date} lies beyond the ESPN data horizon")
            return SyncResult(entity=SyncEntity.EVENTS, status=SyncStatus.SUCCESS)
        return await self.events.sync_window(window, season)

    async def _run_season_events(self, year: int) -> SyncResult:
        with sync_stage(SyncStage.RESOLVE_SEASON):
            start_date, end_date = await self.resolver.resolve_season_boundaries(year)

        with sync_stage(SyncStage.COMPUTE_WINDOW):
            window = self._clamp(start_date, end_date)

        if window is None:
            logger.info(f"Season {year} ({start_date} to {end_date}) lies beyond the ESPN data horizon")
            return SyncResult(entity=SyncEntity.EVENTS, status=SyncStatus.SUCCESS)
        return await self.events.sync_window(window, year)

    def _clamp(self, start_date: date, end_date: date) -> SyncWindow | None:
        """Clamp an inclusive [start_date, end_date] range to the provider horizon."""
        if end_date < start_date:
            raise ValueError(f"end_date {end_date} is before start_date {start_date}")
        return clamp_to_horizon(
            start_date,
            end_date + timedelta(days=1),
            self.clock(),
            horizon_months=self.settings.sync_horizon_months,
        )

    async def sync_competitors(self) -> int:
        """
        Sync all competitors.

        Returns:
            Number of competitors synced

        Raises:
            SyncStageError: the sync failed
        """
        return (await self._run_competitors()).count

    async def sync_events(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> int:
        """
        Sync events for an inclusive date range, or the configured window.

        The configured window (days back/forward around now) is used unless
        both dates are given. Either way the range is clamped to the horizon.

        Returns:
            Number of events synced

        Raises:
            SyncStageError: the sync failed
        """
        return (await self._run_events(start_date, end_date)).count

    async def sync_events_for_season(self, year: int) -> int:
        """
        Sync events for a whole season, clamped to the provider horizon.

        Returns:
            Number of events synced

        Raises:
            SyncStageError: the sync failed
        """
        return (await self._run_season_events(year)).count

    async def run(self, entity: SyncEntity) -> SyncResult:
        """
        Run one entity class and report its outcome instead of raising.

        A failed stage becomes a `failed` result carrying the stage and error.
        """
        try:
            if entity == SyncEntity.COMPETITORS:
                return await self._run_competitors()
            return await self._run_events()
        except SyncStageError as exc:
            logger.error(f"{entity.value} sync failed at {exc.stage.value}", exc_info=True)
            await self.db.rollback()
            return SyncResult(
                entity=entity,
                status=SyncStatus.FAILED,
                failed_stage=exc.stage,
                error=str(exc.__cause__ or exc),
            )
        except Exception as exc:
            logger.error(f"{entity.value} sync failed", exc_info=True)
            await self.db.rollback()
            return SyncResult(entity=entity, status=SyncStatus.FAILED, error=str(exc))

    async def full_sync(self) -> FullSyncResult:
        """
        Sync competitors then events; a failure in one does not stop the other.

        Returns:
            Per-entity results and counts
        """
        logger.info("Starting full sync")
        competitors = await self.run(SyncEntity.COMPETITORS)
        events = await self.run(SyncEntity.EVENTS)
        result = FullSyncResult(competitors=competitors, events=events)
        logger.info(
            f"Full sync complete: status={result.status.value}, "
            f"competitors={result.competitor_count}, events={result.event_count}"
        )
        return result
