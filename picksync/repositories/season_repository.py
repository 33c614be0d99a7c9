from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from picksync.models import Season, Sport
from picksync.repositories.base import BaseRepository


class SeasonRepository(BaseRepository[Season]):
    def __init__(self, db: AsyncSession):
        super().__init__(Season, db)

    async def get_by_year(self, sport_id: int, year: int) -> Season | None:
        return await self.where_first(Season.sport_id == sport_id, Season.year == year)

    async def get_current_active(self, sport_id: int, today: date) -> Season | None:
        """Latest season flagged active whose window contains `today`."""
        result = await self.db.execute(
            select(Season)
            .where(
                Season.sport_id == sport_id,
                Season.is_active == True,
                Season.start_date <= today,
                Season.end_date >= today,
            )
            .order_by(Season.year.desc())
            .limit(1)
        )
        return result.scalars().first()

    async def list_by_sport(self, sport_id: int) -> list[Season]:
        result = await self.db.execute(
            select(Season).where(Season.sport_id == sport_id).order_by(Season.year.desc())
        )
        return list(result.scalars().all())

    async def get_or_create_sport(self, code: str, name: str) -> tuple[Sport, bool]:
        result = await self.db.execute(select(Sport).where(Sport.code == code))
        sport = result.scalar_one_or_none()
        if sport is not None:
            return sport, False
        sport = Sport(code=code, name=name)
        self.db.add(sport)
        await self.db.flush()
        return sport, True
