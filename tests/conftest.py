import pytest
from datetime import date, datetime
from typing import AsyncGenerator
from unittest.mock import AsyncMock, Mock

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from picksync.config import Settings
from picksync.database import Base
from picksync.models import Competitor, Season, Sport


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Fixed "now" used across tests: mid NFL season 2025
NOW = datetime(2025, 10, 15, 12, 0, 0)


# Note: Using pytest-asyncio's built-in event_loop fixture (asyncio_mode = auto)


@pytest.fixture(scope="function")
async def test_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any local .env, with retries that never sleep."""
    return Settings(
        _env_file=None,
        espn_retry_delay_ms=0,
        target_season=None,
    )


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def mock_client() -> Mock:
    """ESPN client double; every endpoint returns "no data" unless a test says otherwise."""
    client = Mock()
    client.get_teams = AsyncMock(return_value=None)
    client.get_scoreboard = AsyncMock(return_value=None)
    client.get_season = AsyncMock(return_value=None)
    return client


# --- Data Fixtures ---

@pytest.fixture
async def sample_sport(test_session) -> Sport:
    """Create the NFL sport row."""
    sport = Sport(code="nfl", name="NFL")
    test_session.add(sport)
    await test_session.commit()
    await test_session.refresh(sport)
    return sport


@pytest.fixture
async def sample_season(test_session, sample_sport) -> Season:
    """Create the active 2025 season."""
    season = Season(
        sport_id=sample_sport.id,
        year=2025,
        display_name="2025 NFL",
        start_date=date(2025, 7, 31),
        end_date=date(2026, 2, 12),
        is_active=True,
    )
    test_session.add(season)
    await test_session.commit()
    await test_session.refresh(season)
    return season


@pytest.fixture
async def sample_competitors(test_session, sample_sport) -> list[Competitor]:
    """Create two ESPN teams, the first flagged as part of an active league."""
    competitors = [
        Competitor(
            sport_id=sample_sport.id,
            name="Team 1",
            code="T1",
            external_id="1",
            external_source="ESPN",
            in_active_league=True,
            notes="keep me",
        ),
        Competitor(
            sport_id=sample_sport.id,
            name="Team 2",
            code="T2",
            external_id="2",
            external_source="ESPN",
        ),
    ]
    test_session.add_all(competitors)
    await test_session.commit()
    for competitor in competitors:
        await test_session.refresh(competitor)
    return competitors
