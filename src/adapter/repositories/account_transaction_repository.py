"""SQLAlchemy Account Transaction Repository Implementation

Implements account transaction persistence using SQLAlchemy async session.
"""

from typing import List, Optional
from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.account_transaction_repository import AccountTransactionRepository
from src.domain.account_transaction import AccountTransaction, TransactionType


class SqlAlchemyAccountTransactionRepository(AccountTransactionRepository):
    """
    SQLAlchemy implementation of AccountTransactionRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, transaction: AccountTransaction) -> AccountTransaction:
        """
        Create a new transaction

        Args:
            transaction: AccountTransaction entity to persist

        Returns:
            Created AccountTransaction
        """
        self.session.add(transaction)
        await self.session.flush()
        await self.session.refresh(transaction)
        return transaction

    async def list_by_period(
        self,
        room_id: str,
        period_id: str,
        target_user_id: Optional[str] = None,
        transaction_type: Optional[TransactionType] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[AccountTransaction]:
        statement = (
            select(AccountTransaction)
            .where(AccountTransaction.room_id == room_id)
            .where(AccountTransaction.period_id == period_id)
        )

        if target_user_id:
            statement = statement.where(AccountTransaction.target_user_id == target_user_id)

        if transaction_type:
            statement = statement.where(AccountTransaction.transaction_type == transaction_type)

        statement = statement.order_by(AccountTransaction.created_at.desc())
        statement = statement.limit(limit).offset(offset)

        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def delete_for_expense(self, expense_id: str) -> int:
        statement = (
            delete(AccountTransaction)
            .where(AccountTransaction.expense_id == expense_id)
            .where(AccountTransaction.transaction_type == TransactionType.EXPENSE)
        )
        result = await self.session.execute(statement)
        await self.session.flush()
        return result.rowcount or 0
