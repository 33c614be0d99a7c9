"""
Base repository for async data access.

Repositories only stage changes on the session (`add`, `flush`); committing is
left to the caller so a whole sync batch can be applied as one unit of work.

Example:
    class CompetitorRepository(BaseRepository[Competitor]):
        async def find_by_external_id(self, external_id, source):
            return await self.where_first(
                Competitor.external_id == external_id,
                Competitor.external_source == source,
            )
"""
from typing import Any, Generic, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


class BaseRepository(Generic[T]):
    def __init__(self, model_type: Type[T], db: AsyncSession):
        self.model_type = model_type
        self.db = db

    async def where_first(self, *criterion: Any) -> T | None:
        result = await self.db.execute(select(self.model_type).where(*criterion).limit(1))
        return result.scalars().first()

    async def add(self, instance: T) -> T:
        """Stage a new row and flush so it gets its primary key."""
        self.db.add(instance)
        await self.db.flush()
        return instance
