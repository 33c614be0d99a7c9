from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from picksync.models import Event, EventParticipant
from picksync.repositories.base import BaseRepository


class EventRepository(BaseRepository[Event]):
    def __init__(self, db: AsyncSession):
        super().__init__(Event, db)

    async def find_by_external_id(self, external_id: str, external_source: str) -> Event | None:
        return await self.where_first(
            Event.external_id == external_id,
            Event.external_source == external_source,
        )

    async def get_participants(self, event_id: int) -> list[EventParticipant]:
        result = await self.db.execute(
            select(EventParticipant)
            .where(EventParticipant.event_id == event_id)
            .order_by(EventParticipant.id)
        )
        return list(result.scalars().all())

    async def add_participant(self, participant: EventParticipant) -> EventParticipant:
        self.db.add(participant)
        await self.db.flush()
        return participant

    async def remove_participant(self, participant: EventParticipant) -> None:
        await self.db.delete(participant)
