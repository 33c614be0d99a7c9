from picksync.repositories.base import BaseRepository
from picksync.repositories.competitor_repository import CompetitorRepository
from picksync.repositories.event_repository import EventRepository
from picksync.repositories.season_repository import SeasonRepository

__all__ = [
    "BaseRepository",
    "CompetitorRepository",
    "EventRepository",
    "SeasonRepository",
]
