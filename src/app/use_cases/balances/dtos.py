"""Data Transfer Objects for Balance Use Cases

Money fields keep full Decimal precision here; these DTOs are also what the
cache stores. Rounding happens in the HTTP response schemas.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field
from src.domain.balance import GroupSummary, UserFigures
from src.domain.period import Period


class BalanceQueryDTO(BaseModel):
    """
    Query DTO shared by balance reads

    ``period_id`` defaults to the room's current period. Without any period
    the figures are zero unless ``require_period`` is set.
    """

    room_id: str = Field(..., description="Room identifier")
    actor_id: str = Field(..., description="User asking")
    user_id: Optional[str] = Field(default=None, description="Member the figures are for (default: actor)")
    period_id: Optional[str] = Field(default=None)
    include_details: bool = Field(default=False, description="Add meal and spend figures")
    require_period: bool = Field(default=False)

    @property
    def target_user_id(self) -> str:
        return self.user_id or self.actor_id


class PeriodRefDTO(BaseModel):
    id: str
    name: str
    status: str
    is_locked: bool
    start_date: date
    end_date: Optional[date] = None

    @classmethod
    def from_entity(cls, period: Optional[Period]) -> Optional["PeriodRefDTO"]:
        if period is None:
            return None
        return cls(
            id=period.id,
            name=period.name,
            status=period.status.value,
            is_locked=period.is_locked,
            start_date=period.start_date,
            end_date=period.end_date,
        )


class TotalExpensesDTO(BaseModel):
    room_id: str
    period_id: Optional[str] = None
    total_expense: Decimal


class MealRateDTO(BaseModel):
    room_id: str
    period_id: Optional[str] = None
    meal_rate: Decimal
    total_meals: int
    total_expense: Decimal


class UserMealCountDTO(BaseModel):
    room_id: str
    period_id: Optional[str] = None
    user_id: str
    meal_count: int


class BalanceDTO(BaseModel):
    room_id: str
    period_id: Optional[str] = None
    user_id: str
    balance: Decimal


class UserBalanceDTO(BaseModel):
    """
    Balance of one member

    The optional figures are only filled when details were requested.
    """

    user_id: str
    balance: Decimal
    role: Optional[str] = None
    current_period: Optional[PeriodRefDTO] = None
    available_balance: Optional[Decimal] = None
    total_spent: Optional[Decimal] = None
    meal_count: Optional[int] = None
    meal_rate: Optional[Decimal] = None

    @classmethod
    def from_figures(
        cls,
        figures: UserFigures,
        period: Optional[PeriodRefDTO],
        include_details: bool,
    ) -> "UserBalanceDTO":
        dto = cls(
            user_id=figures.user_id,
            balance=figures.balance,
            role=figures.role,
            current_period=period,
        )
        if include_details:
            dto.available_balance = figures.available_balance
            dto.total_spent = figures.total_spent
            dto.meal_count = figures.meal_count
            dto.meal_rate = figures.meal_rate
        return dto


class GroupTotalsDTO(BaseModel):
    total_balance: Decimal
    total_meals: int
    total_expense: Decimal
    meal_rate: Decimal
    net_group_balance: Decimal
    total_spent: Optional[Decimal] = None
    total_available_balance: Optional[Decimal] = None


class GroupBalanceSummaryDTO(BaseModel):
    room_id: str
    current_period: Optional[PeriodRefDTO] = None
    users: List[UserBalanceDTO]
    totals: GroupTotalsDTO

    @classmethod
    def from_summary(
        cls,
        summary: GroupSummary,
        period: Optional[PeriodRefDTO],
        include_details: bool,
    ) -> "GroupBalanceSummaryDTO":
        totals = GroupTotalsDTO(
            total_balance=summary.total_balance,
            total_meals=summary.rate.total_meals,
            total_expense=summary.rate.total_expense,
            meal_rate=summary.rate.meal_rate,
            net_group_balance=summary.net_group_balance,
        )
        if include_details:
            totals.total_spent = summary.total_spent
            totals.total_available_balance = summary.total_available_balance

        return cls(
            room_id=summary.room_id,
            current_period=period,
            users=[UserBalanceDTO.from_figures(m, period, include_details) for m in summary.members],
            totals=totals,
        )
