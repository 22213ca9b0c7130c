"""Account Transaction Repository Interface

Defines the contract for account transaction persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.account_transaction import AccountTransaction, TransactionType


class AccountTransactionRepository(ABC):
    """
    Repository interface for AccountTransaction persistence

    Transactions are append-only apart from the EXPENSE rows that follow
    the lifetime of their Expense.
    """

    @abstractmethod
    async def create(self, transaction: AccountTransaction) -> AccountTransaction:
        """
        Create a new transaction

        Args:
            transaction: AccountTransaction entity to persist

        Returns:
            Created AccountTransaction
        """
        pass

    @abstractmethod
    async def list_by_period(
        self,
        room_id: str,
        period_id: str,
        target_user_id: Optional[str] = None,
        transaction_type: Optional[TransactionType] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[AccountTransaction]:
        """
        List transactions of a period, newest first

        Args:
            room_id: Room identifier
            period_id: Period identifier
            target_user_id: Optional filter by affected member
            transaction_type: Optional filter by type
            limit: Maximum number of transactions to return
            offset: Offset for pagination
        """
        pass

    @abstractmethod
    async def delete_for_expense(self, expense_id: str) -> int:
        """
        Delete the EXPENSE transactions mirroring an expense

        Returns:
            Number of rows removed
        """
        pass
