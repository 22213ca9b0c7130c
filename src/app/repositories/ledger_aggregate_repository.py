"""Ledger Aggregate Repository Interface

Read-only aggregate queries over the raw ledgers of one room and period.
Implementations must tolerate concurrent calls on the same instance: the
balance engine fans these queries out with asyncio.gather.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Iterable, Optional
from src.domain.account_transaction import TransactionType


class LedgerAggregateRepository(ABC):

    @abstractmethod
    async def sum_expenses(self, room_id: str, period_id: str) -> Decimal:
        """Sum of Expense.amount in the period"""
        pass

    @abstractmethod
    async def sum_purchased_shopping(self, room_id: str, period_id: str) -> Decimal:
        """Sum of purchased ShoppingItem.amount in the period"""
        pass

    @abstractmethod
    async def count_meals(self, room_id: str, period_id: str, user_id: Optional[str] = None) -> int:
        """Number of Meal rows, optionally for one user"""
        pass

    @abstractmethod
    async def sum_guest_meals(self, room_id: str, period_id: str, user_id: Optional[str] = None) -> int:
        """Sum of GuestMeal.count, optionally for one user"""
        pass

    @abstractmethod
    async def sum_transactions(
        self,
        room_id: str,
        period_id: str,
        target_user_id: Optional[str] = None,
        transaction_types: Optional[Iterable[TransactionType]] = None,
    ) -> Decimal:
        """Sum of signed AccountTransaction.amount, optionally for one target user or some types"""
        pass

    @abstractmethod
    async def meal_counts_by_user(self, room_id: str, period_id: str) -> dict[str, int]:
        """Meal count per user_id, one grouped query"""
        pass

    @abstractmethod
    async def guest_meal_counts_by_user(self, room_id: str, period_id: str) -> dict[str, int]:
        """Guest meal count per user_id, one grouped query"""
        pass

    @abstractmethod
    async def transaction_sums_by_target(self, room_id: str, period_id: str) -> dict[str, Decimal]:
        """Signed transaction sum per target_user_id, one grouped query"""
        pass
