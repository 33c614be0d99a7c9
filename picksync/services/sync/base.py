"""
Base class and utilities for sync services.

Contains shared logic used across all sync service implementations:
session/client wiring, the sport row lookup, and stage tracking.
"""
import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.ext.asyncio import AsyncSession

from picksync.config import Settings, get_settings
from picksync.repositories import SeasonRepository
from picksync.schemas.sync import SyncStage
from picksync.services.espn_client import EspnClient, get_espn_client

logger = logging.getLogger(__name__)


class SyncStageError(Exception):
    """A sync pipeline stage failed; the original error is chained as __cause__."""

    def __init__(self, stage: SyncStage, message: str):
        super().__init__(f"{stage.value}: {message}")
        self.stage = stage


@contextmanager
def sync_stage(stage: SyncStage) -> Iterator[None]:
    """Tag any failure raised inside the block with the pipeline stage."""
    try:
        yield
    except SyncStageError:
        raise
    except Exception as exc:
        raise SyncStageError(stage, str(exc) or exc.__class__.__name__) from exc


class BaseSyncService:
    """
    Base class for all sync services.

    Provides common functionality:
    - Database session management
    - ESPN API client access
    - Sport row lookup (cached per service instance)
    """

    def __init__(
        self,
        db: AsyncSession,
        client: EspnClient | None = None,
        settings: Settings | None = None,
    ):
        """
        Initialize the sync service.

        Args:
            db: SQLAlchemy async session
            client: Optional ESPN client (uses singleton if not provided)
            settings: Optional settings (uses cached settings if not provided)
        """
        self.db = db
        self.client = client or get_espn_client()
        self.settings = settings or get_settings()
        self._sport_id: int | None = None

    @property
    def external_source(self) -> str:
        return self.settings.external_source

    async def _get_sport_id(self) -> int:
        """Return the id of the configured sport, creating the row on first use."""
        if self._sport_id is not None:
            return self._sport_id

        sport, created = await SeasonRepository(self.db).get_or_create_sport(
            self.settings.sport_code, self.settings.sport_name
        )
        if created:
            await self.db.commit()
            logger.info("Created sport %s", self.settings.sport_code)
        self._sport_id = sport.id
        return sport.id
