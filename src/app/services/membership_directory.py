"""Membership Directory Interface

Group membership is owned by another part of the product. The ledger core
only asks two questions of it.
"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.room_member import RoomMember


class MembershipDirectory(ABC):

    @abstractmethod
    async def resolve_role(self, user_id: str, room_id: str) -> Optional[str]:
        """
        Role string of a user in a room

        Returns:
            Role (e.g. "ADMIN") or None when the user is not a member
        """
        pass

    @abstractmethod
    async def list_members(self, room_id: str) -> list[RoomMember]:
        """All current members of a room"""
        pass
