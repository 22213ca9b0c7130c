"""Room Settings Entity

Per-room ledger preferences. Rooms without a row use the configured
default period mode.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field
from src.domain.base import BaseModel


class PeriodMode(str, Enum):
    """How a room's periods come into being"""
    MONTHLY = "MONTHLY"  # one period per calendar month, provisioned on read
    CUSTOM = "CUSTOM"    # started and ended by privileged members


class RoomSettings(BaseModel, table=True):
    __tablename__ = "room_settings"

    room_id: str = Field(primary_key=True)
    period_mode: PeriodMode = Field(default=PeriodMode.CUSTOM, description="MONTHLY or CUSTOM")
    updated_by: Optional[str] = Field(default=None)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
