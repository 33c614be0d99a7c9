"""
Season sync service.

Fetches authoritative season boundaries from the ESPN core API and keeps the
local `seasons` table (including the derived `is_active` flag) up to date.
"""
import logging
from collections.abc import Callable
from datetime import date, datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from picksync.config import Settings
from picksync.models import Season
from picksync.repositories import SeasonRepository
from picksync.services.date_window import estimated_boundaries
from picksync.services.espn_client import EspnClient
from picksync.services.sync.base import BaseSyncService
from picksync.utils.dates import parse_date, utcnow

logger = logging.getLogger(__name__)


class SeasonSyncService(BaseSyncService):
    """Season rows for the configured sport: fetch, persist, derive active status."""

    def __init__(
        self,
        db: AsyncSession,
        client: EspnClient | None = None,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        super().__init__(db, client, settings)
        self.clock = clock
        self.seasons = SeasonRepository(db)

    async def _save(
        self,
        year: int,
        display_name: str,
        start_date: date,
        end_date: date,
        season_type: str | None = None,
    ) -> Season:
        sport_id = await self._get_sport_id()
        is_active = start_date <= self.clock().date() <= end_date
        try:
            season = await self.seasons.get_by_year(sport_id, year)
            if season is None:
                season = await self.seasons.add(
                    Season(
                        sport_id=sport_id,
                        year=year,
                        display_name=display_name,
                        type=season_type,
                        start_date=start_date,
                        end_date=end_date,
                        is_active=is_active,
                    )
                )
            else:
                season.display_name = display_name
                season.start_date = start_date
                season.end_date = end_date
                season.is_active = is_active
                if season_type:
                    season.type = season_type
            await self.db.commit()
        except BaseException:
            await self.db.rollback()
            raise
        return season

    async def get_season(self, year: int) -> Season | None:
        """Persisted season for `year`, without contacting ESPN."""
        sport_id = await self._get_sport_id()
        return await self.seasons.get_by_year(sport_id, year)

    async def get_active_season(self) -> Season | None:
        sport_id = await self._get_sport_id()
        return await self.seasons.get_current_active(sport_id, self.clock().date())

    async def sync_season(self, year: int) -> Season | None:
        """
        Fetch one season from ESPN and add or update it locally.

        Returns:
            The persisted season, or None when ESPN has no usable data
        """
        logger.info(f"Syncing season {year} from ESPN core API")
        payload = await self.client.get_season(year)
        if not isinstance(payload, dict):
            logger.warning(f"No season data received from ESPN for {year}")
            return None

        start_date = parse_date(payload.get("startDate"))
        end_date = parse_date(payload.get("endDate"))
        if start_date is None or end_date is None:
            logger.warning(
                f"Invalid season dates for {year}: "
                f"{payload.get('startDate')!r} - {payload.get('endDate')!r}"
            )
            return None

        season_year = payload.get("year") if isinstance(payload.get("year"), int) else year
        display_name = payload.get("displayName") or f"{season_year} NFL Season"
        season_type = _type_name(payload.get("type"))

        season = await self._save(season_year, display_name, start_date, end_date, season_type)
        logger.info(
            f"Synced season {season.year}: {season.display_name} "
            f"({start_date.isoformat()} to {end_date.isoformat()})"
        )
        return season

    async def sync_current_season(self) -> Season | None:
        """
        Find the active season by trying the current, previous and next year.

        NFL seasons span two calendar years, so early in the year the active
        season is usually last year's.
        """
        current_year = self.clock().year
        for year in (current_year, current_year - 1, current_year + 1):
            season = await self.sync_season(year)
            if season is not None and season.is_active:
                logger.info(f"Found active season {season.year}")
                return season

        logger.warning("No active NFL season found in current, previous or next year")
        return None

    async def ensure_season(self, year: int) -> Season:
        """
        Return the season row for `year`, creating it if needed.

        Falls back to estimated boundaries when ESPN has nothing, so events
        always have an owning season.
        """
        season = await self.get_season(year)
        if season is not None:
            return season

        season = await self.sync_season(year)
        if season is not None:
            return season

        start_date, end_date = estimated_boundaries(year)
        logger.warning(f"Using estimated boundaries for season {year}: {start_date} to {end_date}")
        return await self._save(year, f"{year} NFL Season", start_date, end_date)

    async def update_active_status(self) -> int:
        """
        Recompute `is_active` for every season of the sport.

        Returns:
            Number of seasons whose flag flipped
        """
        sport_id = await self._get_sport_id()
        today = self.clock().date()
        updated = 0
        try:
            for season in await self.seasons.list_by_sport(sport_id):
                should_be_active = season.contains(today)
                if season.is_active != should_be_active:
                    season.is_active = should_be_active
                    updated += 1
                    logger.info(f"Season {season.year} active status -> {should_be_active}")
            await self.db.commit()
        except BaseException:
            await self.db.rollback()
            raise

        logger.info(f"Updated active status for {updated} seasons")
        return updated


def _type_name(value: Any) -> str | None:
    if isinstance(value, dict):
        name = value.get("name")
        return name if isinstance(name, str) and name else None
    return None
