from picksync.schemas.records import (
    CompetitorRecord,
    EventRecord,
    MappingReport,
    ParticipantRecord,
)
from picksync.schemas.sync import (
    FullSyncResult,
    SyncEntity,
    SyncResult,
    SyncStage,
    SyncStatus,
)

__all__ = [
    "CompetitorRecord",
    "EventRecord",
    "MappingReport",
    "ParticipantRecord",
    "FullSyncResult",
    "SyncEntity",
    "SyncResult",
    "SyncStage",
    "SyncStatus",
]
