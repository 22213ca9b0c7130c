"""Room Member Entity

Read model of group membership. Membership itself is managed elsewhere;
the ledger core only reads the role string and the member list.
"""

from datetime import datetime
from sqlmodel import Field, UniqueConstraint
from src.domain.base import BaseModel, generate_uuid


class RoomMember(BaseModel, table=True):
    __tablename__ = "room_members"
    __table_args__ = (
        UniqueConstraint('room_id', 'user_id', name='uq_room_members_room_user'),
    )

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    room_id: str = Field(index=True)
    user_id: str = Field(index=True)
    role: str = Field(default="MEMBER", description="Free-form role string, e.g. ADMIN, MANAGER, MEMBER")
    joined_at: datetime = Field(default_factory=datetime.utcnow)
