"""Balance arithmetic

Pure functions shared by the per-user and the batched group computations so
the two paths can never diverge. Money stays Decimal at full precision;
rounding is a presentation concern.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def meal_rate(total_expense: Decimal, total_meals: int) -> Decimal:
    """Total expense per meal; zero when nobody ate"""
    if total_meals <= 0:
        return ZERO
    return to_decimal(total_expense) / Decimal(total_meals)


@dataclass(frozen=True)
class MealRate:
    meal_rate: Decimal
    total_meals: int
    total_expense: Decimal

    @classmethod
    def compute(cls, total_expense: Decimal, total_meals: int) -> "MealRate":
        return cls(
            meal_rate=meal_rate(total_expense, total_meals),
            total_meals=total_meals,
            total_expense=to_decimal(total_expense),
        )

    @classmethod
    def empty(cls) -> "MealRate":
        return cls(meal_rate=ZERO, total_meals=0, total_expense=ZERO)


@dataclass(frozen=True)
class UserFigures:
    user_id: str
    balance: Decimal
    meal_count: int
    meal_rate: Decimal
    total_spent: Decimal
    available_balance: Decimal
    role: Optional[str] = None

    @classmethod
    def derive(cls, user_id: str, balance: Decimal, meal_count: int, rate: Decimal, role: Optional[str] = None) -> "UserFigures":
        total_spent = Decimal(meal_count) * rate
        return cls(
            user_id=user_id,
            balance=balance,
            meal_count=meal_count,
            meal_rate=rate,
            total_spent=total_spent,
            available_balance=balance - total_spent,
            role=role,
        )


@dataclass(frozen=True)
class GroupSummary:
    room_id: str
    period_id: Optional[str]
    rate: MealRate
    members: list[UserFigures]

    @property
    def total_balance(self) -> Decimal:
        return sum((m.balance for m in self.members), ZERO)

    @property
    def total_spent(self) -> Decimal:
        return sum((m.total_spent for m in self.members), ZERO)

    @property
    def total_available_balance(self) -> Decimal:
        return sum((m.available_balance for m in self.members), ZERO)

    @property
    def net_group_balance(self) -> Decimal:
        """Group total balance less the period's total expense"""
        return self.total_balance - self.rate.total_expense


@dataclass(frozen=True)
class PeriodTotals:
    period_id: str
    total_meals: int
    total_guest_meals: int
    total_expenses: Decimal
    total_shopping: Decimal
    total_credits: Decimal
    member_count: int

    @property
    def total_expense(self) -> Decimal:
        return self.total_expenses + self.total_shopping

    @property
    def meal_rate(self) -> Decimal:
        return meal_rate(self.total_expense, self.total_meals + self.total_guest_meals)
