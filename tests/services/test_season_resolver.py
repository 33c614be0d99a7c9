from datetime import date, datetime, timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest

from picksync.config import Settings
from picksync.services.season_cache import SeasonCache
from picksync.services.season_resolver import SeasonResolver, heuristic_season
from picksync.services.sync.season_sync import SeasonSyncService


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def make_season_sync(active=None, current=None, persisted=None, fetched=None) -> Mock:
    season_sync = Mock()
    season_sync.get_active_season = AsyncMock(return_value=active)
    season_sync.sync_current_season = AsyncMock(return_value=current)
    season_sync.get_season = AsyncMock(return_value=persisted)
    season_sync.sync_season = AsyncMock(return_value=fetched)
    return season_sync


def season(year: int, start: date | None = None, end: date | None = None):
    return SimpleNamespace(
        year=year,
        start_date=start or date(year, 9, 4),
        end_date=end or date(year + 1, 2, 8),
    )


class TestSeasonCache:
    def test_entry_expires(self):
        cache = SeasonCache()
        now = datetime(2025, 10, 1, 12, 0)
        cache.set(2025, timedelta(hours=6), now)

        assert cache.get(now + timedelta(hours=5, minutes=59)) == 2025
        assert cache.get(now + timedelta(hours=6)) is None

    def test_clear(self):
        cache = SeasonCache()
        now = datetime(2025, 10, 1)
        cache.set(2025, timedelta(hours=1), now)
        cache.clear()

        assert cache.get(now) is None
        assert cache.entry is None


@pytest.mark.asyncio
class TestResolveCurrentSeason:
    async def test_override_wins_over_everything(self):
        cache = SeasonCache()
        now = datetime(2025, 10, 1)
        cache.set(2023, timedelta(hours=6), now)
        season_sync = make_season_sync(active=season(2024), current=season(2022))
        resolver = SeasonResolver(
            season_sync,
            cache=cache,
            settings=Settings(_env_file=None, target_season=2019),
            clock=FakeClock(now),
        )

        assert await resolver.resolve_current_season() == 2019
        season_sync.get_active_season.assert_not_awaited()
        season_sync.sync_current_season.assert_not_awaited()

    async def test_valid_cache_skips_lookups(self, settings):
        cache = SeasonCache()
        now = datetime(2025, 10, 1)
        cache.set(2024, timedelta(hours=6), now)
        season_sync = make_season_sync(active=season(2025))
        resolver = SeasonResolver(season_sync, cache=cache, settings=settings, clock=FakeClock(now))

        assert await resolver.resolve_current_season() == 2024
        season_sync.get_active_season.assert_not_awaited()

    async def test_persisted_season_preferred_over_remote_when_cache_expired(self, settings):
        cache = SeasonCache()
        clock = FakeClock(datetime(2025, 10, 1))
        cache.set(2023, timedelta(hours=1), clock.now - timedelta(hours=2))
        season_sync = make_season_sync(active=season(2025), current=season(2024))
        resolver = SeasonResolver(season_sync, cache=cache, settings=settings, clock=clock)

        assert await resolver.resolve_current_season() == 2025
        season_sync.sync_current_season.assert_not_awaited()
        assert cache.entry.expires_at == clock.now + timedelta(hours=6)

    async def test_remote_lookup_when_nothing_persisted(self, settings):
        season_sync = make_season_sync(active=None, current=season(2025))
        resolver = SeasonResolver(season_sync, settings=settings, clock=FakeClock(datetime(2025, 10, 1)))

        assert await resolver.resolve_current_season() == 2025
        season_sync.sync_current_season.assert_awaited_once()

    async def test_heuristic_cached_for_short_ttl(self, settings):
        clock = FakeClock(datetime(2026, 3, 10))
        season_sync = make_season_sync()
        resolver = SeasonResolver(season_sync, settings=settings, clock=clock)

        assert await resolver.resolve_current_season() == 2025
        assert resolver.cache.entry.expires_at == clock.now + timedelta(hours=1)

        # Within the short TTL the heuristic answer is reused
        clock.now += timedelta(minutes=30)
        assert await resolver.resolve_current_season() == 2025
        assert season_sync.get_active_season.await_count == 1

        # After it, resolution runs again
        clock.now += timedelta(minutes=31)
        await resolver.resolve_current_season()
        assert season_sync.get_active_season.await_count == 2

    async def test_failing_tiers_fall_through_to_heuristic(self, settings):
        season_sync = make_season_sync()
        season_sync.get_active_season.side_effect = RuntimeError("db down")
        season_sync.sync_current_season.side_effect = RuntimeError("espn down")
        resolver = SeasonResolver(season_sync, settings=settings, clock=FakeClock(datetime(2025, 9, 1)))

        assert await resolver.resolve_current_season() == 2025

    async def test_clear_cache_forces_lookup(self, settings):
        season_sync = make_season_sync(active=season(2025))
        resolver = SeasonResolver(season_sync, settings=settings, clock=FakeClock(datetime(2025, 10, 1)))

        await resolver.resolve_current_season()
        resolver.clear_cache()
        await resolver.resolve_current_season()

        assert season_sync.get_active_season.await_count == 2


@pytest.mark.asyncio
class TestResolveSeasonBoundaries:
    async def test_persisted_season(self, settings):
        season_sync = make_season_sync(persisted=season(2024, date(2024, 9, 5), date(2025, 2, 9)))
        resolver = SeasonResolver(season_sync, settings=settings)

        assert await resolver.resolve_season_boundaries(2024) == (date(2024, 9, 5), date(2025, 2, 9))
        season_sync.sync_season.assert_not_awaited()

    async def test_remote_season(self, settings):
        season_sync = make_season_sync(fetched=season(2025, date(2025, 7, 31), date(2026, 2, 12)))
        resolver = SeasonResolver(season_sync, settings=settings)

        assert await resolver.resolve_season_boundaries(2025) == (date(2025, 7, 31), date(2026, 2, 12))

    async def test_estimate_when_unavailable(self, settings):
        season_sync = make_season_sync()
        season_sync.sync_season.side_effect = RuntimeError("boom")
        resolver = SeasonResolver(season_sync, settings=settings)

        assert await resolver.resolve_season_boundaries(2030) == (date(2030, 8, 1), date(2031, 2, 28))


@pytest.mark.asyncio
async def test_resolver_reads_active_season_from_database(
    test_session, sample_season, mock_client, settings, clock
):
    season_sync = SeasonSyncService(test_session, mock_client, settings, clock=clock)
    resolver = SeasonResolver(season_sync, settings=settings, clock=clock)

    assert await resolver.resolve_current_season() == 2025
    mock_client.get_season.assert_not_awaited()


def test_heuristic_season():
    assert heuristic_season(date(2025, 8, 1)) == 2025
    assert heuristic_season(date(2025, 7, 31)) == 2024
