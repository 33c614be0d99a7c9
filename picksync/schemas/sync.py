from enum import Enum

from pydantic import BaseModel


class SyncStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


class SyncStage(str, Enum):
    RESOLVE_SEASON = "resolve_season"
    COMPUTE_WINDOW = "compute_window"
    FETCH = "fetch"
    MAP = "map"
    RECONCILE = "reconcile"


class SyncEntity(str, Enum):
    COMPETITORS = "competitors"
    EVENTS = "events"


class SyncResult(BaseModel):
    entity: SyncEntity
    status: SyncStatus
    count: int = 0
    skipped: int = 0
    failed_stage: SyncStage | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status != SyncStatus.FAILED


class FullSyncResult(BaseModel):
    competitors: SyncResult
    events: SyncResult

    @property
    def competitor_count(self) -> int:
        return self.competitors.count

    @property
    def event_count(self) -> int:
        return self.events.count

    @property
    def status(self) -> SyncStatus:
        if self.competitors.ok and self.events.ok:
            return SyncStatus.SUCCESS
        return SyncStatus.FAILED
