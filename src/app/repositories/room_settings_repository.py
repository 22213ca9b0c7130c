"""Room Settings Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.room_settings import RoomSettings


class RoomSettingsRepository(ABC):

    @abstractmethod
    async def get(self, room_id: str) -> Optional[RoomSettings]:
        pass

    @abstractmethod
    async def save(self, settings: RoomSettings) -> RoomSettings:
        """Insert or update the room's settings row"""
        pass
