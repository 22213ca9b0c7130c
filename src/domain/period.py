"""Period Domain Entity

An accounting window within a room. Its status and lock flag decide whether
ledger records stamped with its id may still change.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Date, String, Text, text
from src.domain.base import BaseModel, generate_uuid


class PeriodStatus(str, Enum):
    """Period status values (lock is a separate flag)"""
    ACTIVE = "ACTIVE"
    ENDED = "ENDED"
    ARCHIVED = "ARCHIVED"


class Period(BaseModel, table=True):
    """
    Period - Bounded accounting window of a room

    Domain Rules:
    - At most one ACTIVE period per room (partial unique index below)
    - is_locked forbids every ledger mutation, whatever the status
    - end_date is optional (None = open ended)
    - ARCHIVED is terminal
    """

    __tablename__ = "periods"
    __table_args__ = (
        Index('ix_periods_room_id_start_date', 'room_id', 'start_date'),
        Index(
            'uq_periods_one_active_per_room',
            'room_id',
            unique=True,
            sqlite_where=text("status = 'ACTIVE'"),
            postgresql_where=text("status = 'ACTIVE'"),
        ),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique period identifier (uuid4)"
    )

    room_id: str = Field(
        index=True,
        description="Room owning the period"
    )

    name: str = Field(
        sa_column=Column(String(120), nullable=False),
        description="Display name, unique within the room"
    )

    start_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="First day covered by the period"
    )

    end_date: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
        description="Last day covered by the period (None = open ended)"
    )

    status: PeriodStatus = Field(
        default=PeriodStatus.ACTIVE,
        description="ACTIVE, ENDED or ARCHIVED"
    )

    is_locked: bool = Field(
        default=False,
        description="When True no ledger record of this period may change"
    )

    created_by: str = Field(
        description="User who created the period"
    )

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last transition timestamp"
    )

    def contains(self, day: date) -> bool:
        if day < self.start_date:
            return False
        return self.end_date is None or day <= self.end_date

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": "0b7f6c5e-2d7a-4a57-9d59-3c1f0e0b8a11",
                "room_id": "room_abc",
                "name": "October 2026",
                "start_date": "2026-10-01",
                "end_date": None,
                "status": "ACTIVE",
                "is_locked": False,
                "created_by": "user_admin",
                "created_at": "2026-10-01T00:00:00Z",
                "updated_at": "2026-10-01T00:00:00Z"
            }
        }
