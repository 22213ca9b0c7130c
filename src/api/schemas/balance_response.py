"""Response schemas for Balance API

The only place money is rounded: two decimals, half up, rendered as
strings. Everything behind these schemas keeps full precision.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Annotated, List, Optional
from pydantic import BaseModel, PlainSerializer
from src.app.use_cases.balances.dtos import PeriodRefDTO
from src.app.use_cases.periods.dtos import PeriodDTO

CENT = Decimal("0.01")


def round_money(value: Decimal) -> str:
    return str(Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP))


Money = Annotated[Decimal, PlainSerializer(round_money, return_type=str)]


class TotalExpensesResponseSchema(BaseModel):
    room_id: str
    period_id: Optional[str] = None
    total_expense: Money


class MealRateResponseSchema(BaseModel):
    room_id: str
    period_id: Optional[str] = None
    meal_rate: Money
    total_meals: int
    total_expense: Money


class UserMealCountResponseSchema(BaseModel):
    room_id: str
    period_id: Optional[str] = None
    user_id: str
    meal_count: int


class BalanceResponseSchema(BaseModel):
    room_id: str
    period_id: Optional[str] = None
    user_id: str
    balance: Money


class UserBalanceResponseSchema(BaseModel):
    user_id: str
    balance: Money
    role: Optional[str] = None
    current_period: Optional[PeriodRefDTO] = None
    available_balance: Optional[Money] = None
    total_spent: Optional[Money] = None
    meal_count: Optional[int] = None
    meal_rate: Optional[Money] = None


class GroupTotalsResponseSchema(BaseModel):
    total_balance: Money
    total_meals: int
    total_expense: Money
    meal_rate: Money
    net_group_balance: Money
    total_spent: Optional[Money] = None
    total_available_balance: Optional[Money] = None


class GroupBalanceSummaryResponseSchema(BaseModel):
    room_id: str
    current_period: Optional[PeriodRefDTO] = None
    users: List[UserBalanceResponseSchema]
    totals: GroupTotalsResponseSchema


class PeriodSummaryResponseSchema(BaseModel):
    period: PeriodDTO
    total_meals: int
    total_guest_meals: int
    total_expenses: Money
    total_shopping: Money
    total_expense: Money
    meal_rate: Money
    total_credits: Money
    member_count: int
