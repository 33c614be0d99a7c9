"""
Sync services module.

This module contains specialized services for synchronizing data
from the ESPN API to the local database.

Services:
- SeasonSyncService: Season boundaries and active status
- CompetitorSyncService: Teams
- EventSyncService: Games and their participants
- SyncOrchestrator: Coordinates season resolution, windows and full syncs
"""
from picksync.services.sync.base import BaseSyncService, SyncStageError, sync_stage
from picksync.services.sync.mapper import MappingError, map_competitors, map_events
from picksync.services.sync.reconciler import ReconcileStats, Reconciler
from picksync.services.sync.season_sync import SeasonSyncService
from picksync.services.sync.competitor_sync import CompetitorSyncService
from picksync.services.sync.event_sync import EventSyncService
from picksync.services.sync.orchestrator import SyncOrchestrator

__all__ = [
    # Base
    "BaseSyncService",
    "SyncStageError",
    "sync_stage",
    # Mapping / reconciliation
    "MappingError",
    "map_competitors",
    "map_events",
    "ReconcileStats",
    "Reconciler",
    # Services
    "SeasonSyncService",
    "CompetitorSyncService",
    "EventSyncService",
    "SyncOrchestrator",
]
