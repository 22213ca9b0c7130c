"""Expense Repository Interface

Defines the contract for expense persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.expense import Expense


class ExpenseRepository(ABC):
    """
    Repository interface for Expense persistence

    The mirroring EXPENSE transaction is handled by the transaction
    repository; deleting an expense removes it through ON DELETE CASCADE
    and an explicit delete for engines without foreign key enforcement.
    """

    @abstractmethod
    async def create(self, expense: Expense) -> Expense:
        pass

    @abstractmethod
    async def get_by_id(self, expense_id: str) -> Optional[Expense]:
        pass

    @abstractmethod
    async def list_by_period(self, room_id: str, period_id: str) -> List[Expense]:
        """Expenses of the period, newest expense_date first"""
        pass

    @abstractmethod
    async def delete(self, expense: Expense) -> None:
        pass
