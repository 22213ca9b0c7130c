"""SQLAlchemy Room Settings Repository Implementation"""

from datetime import datetime
from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.room_settings_repository import RoomSettingsRepository
from src.domain.room_settings import RoomSettings


class SqlAlchemyRoomSettingsRepository(RoomSettingsRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, room_id: str) -> Optional[RoomSettings]:
        statement = select(RoomSettings).where(RoomSettings.room_id == room_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def save(self, settings: RoomSettings) -> RoomSettings:
        settings.updated_at = datetime.utcnow()
        self.session.add(settings)
        await self.session.flush()
        await self.session.refresh(settings)
        return settings
