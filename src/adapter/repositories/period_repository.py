"""SQLAlchemy Period Repository Implementation

Implements period persistence using SQLAlchemy async session.
"""

from datetime import date, datetime
from typing import List, Optional
from sqlmodel import select, or_
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.period_repository import PeriodRepository
from src.domain.period import Period, PeriodStatus


class SqlAlchemyPeriodRepository(PeriodRepository):
    """
    SQLAlchemy implementation of PeriodRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, period: Period) -> Period:
        self.session.add(period)
        await self.session.flush()
        await self.session.refresh(period)
        return period

    async def save(self, period: Period) -> Period:
        period.updated_at = datetime.utcnow()
        self.session.add(period)
        await self.session.flush()
        await self.session.refresh(period)
        return period

    async def get_by_id(self, period_id: str) -> Optional[Period]:
        statement = select(Period).where(Period.id == period_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_active(self, room_id: str) -> Optional[Period]:
        statement = (
            select(Period)
            .where(Period.room_id == room_id)
            .where(Period.status == PeriodStatus.ACTIVE)
            .order_by(Period.created_at.desc())
            .limit(1)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_for_date(self, room_id: str, day: date) -> Optional[Period]:
        """
        Retrieve the period covering ``day``

        When ranges overlap the most recently created period wins.
        """
        statement = (
            select(Period)
            .where(Period.room_id == room_id)
            .where(Period.start_date <= day)
            .where(or_(Period.end_date.is_(None), Period.end_date >= day))
            .order_by(Period.created_at.desc())
            .limit(1)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def find_by_name(self, room_id: str, name: str) -> Optional[Period]:
        statement = select(Period).where(Period.room_id == room_id).where(Period.name == name)
        result = await self.session.execute(statement)
        return result.scalars().first()

    async def names_like(self, room_id: str, prefix: str) -> List[str]:
        statement = (
            select(Period.name)
            .where(Period.room_id == room_id)
            .where(Period.name.startswith(prefix, autoescape=True))
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def find_overlapping(
        self,
        room_id: str,
        start_date: date,
        end_date: Optional[date],
        exclude_id: Optional[str] = None,
    ) -> List[Period]:
        # Two ranges intersect when each starts before the other ends
        statement = (
            select(Period)
            .where(Period.room_id == room_id)
            .where(or_(Period.end_date.is_(None), Period.end_date >= start_date))
        )
        if end_date is not None:
            statement = statement.where(Period.start_date <= end_date)
        if exclude_id:
            statement = statement.where(Period.id != exclude_id)

        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def list_by_room(
        self,
        room_id: str,
        status: Optional[PeriodStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Period]:
        statement = select(Period).where(Period.room_id == room_id)

        if status:
            statement = statement.where(Period.status == status)

        statement = statement.order_by(Period.start_date.desc(), Period.created_at.desc())
        statement = statement.limit(limit).offset(offset)

        result = await self.session.execute(statement)
        return list(result.scalars().all())
