"""SQLAlchemy Membership Directory

Reads the room_members table owned by the membership part of the product.
"""

from typing import Callable, List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.membership_directory import MembershipDirectory
from src.domain.room_member import RoomMember


class SqlAlchemyMembershipDirectory(MembershipDirectory):

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self.session_factory = session_factory

    async def resolve_role(self, user_id: str, room_id: str) -> Optional[str]:
        statement = (
            select(RoomMember.role)
            .where(RoomMember.room_id == room_id)
            .where(RoomMember.user_id == user_id)
        )
        async with self.session_factory() as session:
            result = await session.execute(statement)
            return result.scalar_one_or_none()

    async def list_members(self, room_id: str) -> List[RoomMember]:
        statement = (
            select(RoomMember)
            .where(RoomMember.room_id == room_id)
            .order_by(RoomMember.joined_at)
        )
        async with self.session_factory() as session:
            result = await session.execute(statement)
            return list(result.scalars().all())
