from picksync.models.sport import Sport
from picksync.models.season import Season
from picksync.models.competitor import Competitor
from picksync.models.event import Event, EventParticipant

__all__ = [
    "Sport",
    "Season",
    "Competitor",
    "Event",
    "EventParticipant",
]
