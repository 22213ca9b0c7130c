"""Data Transfer Objects for Period Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field
from src.domain.period import Period, PeriodStatus
from src.domain.period_state import current_state
from src.domain.room_settings import PeriodMode, RoomSettings


class PeriodDTO(BaseModel):
    """
    Period as seen by callers

    ``state`` folds the lock flag into the status (LOCKED wins).
    """

    id: str
    room_id: str
    name: str
    start_date: date
    end_date: Optional[date] = None
    status: PeriodStatus
    is_locked: bool
    state: str
    created_by: str
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, period: Period) -> "PeriodDTO":
        return cls(
            id=period.id,
            room_id=period.room_id,
            name=period.name,
            start_date=period.start_date,
            end_date=period.end_date,
            status=period.status,
            is_locked=period.is_locked,
            state=current_state(period),
            created_by=period.created_by,
            notes=period.notes,
            created_at=period.created_at,
            updated_at=period.updated_at,
        )

    @property
    def is_closed(self) -> bool:
        """No ledger record of the period can change any more"""
        return self.is_locked or self.status == PeriodStatus.ARCHIVED


class StartPeriodCommandDTO(BaseModel):
    """
    Command DTO for starting a period

    Used as input to StartPeriod use case.
    """

    room_id: str = Field(..., description="Room identifier")
    actor_id: str = Field(..., description="User performing the action")
    name: str = Field(..., min_length=1, max_length=120, description="Requested period name")
    start_date: date = Field(..., description="First day of the period")
    end_date: Optional[date] = Field(default=None, description="Last day of the period (None = open ended)")
    notes: Optional[str] = Field(default=None)

    class Config:
        json_schema_extra = {
            "example": {
                "room_id": "room_abc",
                "actor_id": "user_admin",
                "name": "November 2026",
                "start_date": "2026-11-01",
                "end_date": None,
            }
        }


class PeriodActionCommandDTO(BaseModel):
    """
    Command DTO for a transition on one period

    ``period_id`` defaults to the room's ACTIVE period.
    """

    room_id: str = Field(..., description="Room identifier")
    actor_id: str = Field(..., description="User performing the action")
    period_id: Optional[str] = Field(default=None, description="Target period (default: active period)")


class EndPeriodCommandDTO(PeriodActionCommandDTO):
    end_date: Optional[date] = Field(default=None, description="Defaults to today")


class UnlockPeriodCommandDTO(PeriodActionCommandDTO):
    target_status: PeriodStatus = Field(
        default=PeriodStatus.ENDED,
        description="Status after unlocking, ACTIVE or ENDED"
    )


class RestartPeriodCommandDTO(PeriodActionCommandDTO):
    new_name: Optional[str] = Field(default=None, max_length=120)
    with_data: bool = Field(
        default=False,
        description="Carry every member's non-zero available balance into the new period"
    )


class EnsureMonthPeriodCommandDTO(BaseModel):
    room_id: str
    actor_id: str
    today: Optional[date] = None


class PeriodQueryDTO(BaseModel):
    """Read query; when actor_id is set the actor must be a room member"""

    room_id: str
    actor_id: Optional[str] = None
    period_id: Optional[str] = None
    on_date: Optional[date] = None
    year: Optional[int] = None
    month: Optional[int] = None
    include_archived: bool = False


class PeriodListDTO(BaseModel):
    room_id: str
    periods: List[PeriodDTO]
    total: int


class PeriodSummaryDTO(BaseModel):
    """Ledger totals of one period"""

    period: PeriodDTO
    total_meals: int
    total_guest_meals: int
    total_expenses: Decimal
    total_shopping: Decimal
    total_expense: Decimal
    meal_rate: Decimal
    total_credits: Decimal
    member_count: int


class PeriodModeDTO(BaseModel):
    """A room's period mode; ``is_default`` when the room never chose one"""

    room_id: str
    period_mode: PeriodMode
    is_default: bool = False
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, settings: RoomSettings) -> "PeriodModeDTO":
        return cls(
            room_id=settings.room_id,
            period_mode=settings.period_mode,
            updated_by=settings.updated_by,
            updated_at=settings.updated_at,
        )


class SetPeriodModeCommandDTO(BaseModel):
    room_id: str = Field(..., description="Room identifier")
    actor_id: str = Field(..., description="User performing the action")
    mode: PeriodMode = Field(..., description="MONTHLY or CUSTOM")
    today: Optional[date] = Field(default=None, description="Reference day for monthly provisioning")
