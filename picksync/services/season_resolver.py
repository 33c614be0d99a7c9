"""
Season resolution.

Answers "which season year is current?" and "when does season N run?" for
the sync pipeline and for read-only callers. Both questions always get an
answer: each lookup tier that fails is logged and the next one is tried,
ending in a date heuristic.
"""
import logging
from collections.abc import Callable
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING

from picksync.config import Settings, get_settings
from picksync.services.date_window import estimated_boundaries
from picksync.services.season_cache import SeasonCache
from picksync.utils.dates import utcnow

if TYPE_CHECKING:
    from picksync.services.sync.season_sync import SeasonSyncService

logger = logging.getLogger(__name__)

# Month from which the season starting this calendar year is assumed current
SEASON_START_MONTH = 8


def heuristic_season(now: datetime | date) -> int:
    return now.year if now.month >= SEASON_START_MONTH else now.year - 1


class SeasonResolver:
    """
    Multi-tier season lookup with an owned, injectable cache.

    Current season order: explicit override, cache, persisted active season,
    live ESPN lookup, heuristic. Confirmed answers are cached for
    `season_cache_ttl_hours`, heuristic ones for `season_fallback_ttl_hours`.
    """

    def __init__(
        self,
        season_sync: "SeasonSyncService",
        cache: SeasonCache | None = None,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.season_sync = season_sync
        self.cache = cache or SeasonCache()
        self.settings = settings or get_settings()
        self.clock = clock

    def _remember(self, year: int, ttl_hours: float, now: datetime) -> int:
        self.cache.set(year, timedelta(hours=ttl_hours), now)
        return year

    async def resolve_current_season(self) -> int:
        """Return the current season year. Never raises except on cancellation."""
        if self.settings.target_season is not None:
            logger.debug(f"Using configured target season {self.settings.target_season}")
            return self.settings.target_season

        now = self.clock()
        cached = self.cache.get(now)
        if cached is not None:
            return cached

        try:
            season = await self.season_sync.get_active_season()
            if season is not None:
                logger.info(f"Current season {season.year} from database")
                return self._remember(season.year, self.settings.season_cache_ttl_hours, now)
        except Exception:
            logger.warning("Active season lookup in database failed", exc_info=True)

        try:
            season = await self.season_sync.sync_current_season()
            if season is not None:
                logger.info(f"Current season {season.year} from ESPN")
                return self._remember(season.year, self.settings.season_cache_ttl_hours, now)
        except Exception:
            logger.warning("Current season lookup from ESPN failed", exc_info=True)

        year = heuristic_season(now)
        logger.warning(f"Falling back to estimated current season {year}")
        return self._remember(year, self.settings.season_fallback_ttl_hours, now)

    async def resolve_season_boundaries(self, year: int) -> tuple[date, date]:
        """Return (start, end) dates of season `year`. Never raises except on cancellation."""
        try:
            season = await self.season_sync.get_season(year)
            if season is not None:
                return season.start_date, season.end_date
        except Exception:
            logger.warning(f"Season {year} lookup in database failed", exc_info=True)

        try:
            season = await self.season_sync.sync_season(year)
            if season is not None:
                return season.start_date, season.end_date
        except Exception:
            logger.warning(f"Season {year} lookup from ESPN failed", exc_info=True)

        start_date, end_date = estimated_boundaries(year)
        logger.warning(f"Using estimated boundaries for season {year}: {start_date} to {end_date}")
        return start_date, end_date

    def clear_cache(self) -> None:
        self.cache.clear()
        logger.info("Season cache cleared")
