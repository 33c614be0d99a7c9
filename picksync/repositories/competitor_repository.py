from sqlalchemy.ext.asyncio import AsyncSession

from picksync.models import Competitor
from picksync.repositories.base import BaseRepository


class CompetitorRepository(BaseRepository[Competitor]):
    def __init__(self, db: AsyncSession):
        super().__init__(Competitor, db)

    async def find_by_external_id(self, external_id: str, external_source: str) -> Competitor | None:
        return await self.where_first(
            Competitor.external_id == external_id,
            Competitor.external_source == external_source,
        )