"""SQLAlchemy Ledger Aggregate Repository Implementation

Every query opens its own session from the factory: an AsyncSession cannot
run statements concurrently, and the balance engine gathers these calls.
"""

from decimal import Decimal
from typing import Callable, Iterable, Optional
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.ledger_aggregate_repository import LedgerAggregateRepository
from src.domain.account_transaction import AccountTransaction, TransactionType
from src.domain.balance import to_decimal
from src.domain.expense import Expense
from src.domain.guest_meal import GuestMeal
from src.domain.meal import Meal
from src.domain.shopping_item import ShoppingItem


class SqlAlchemyLedgerAggregateRepository(LedgerAggregateRepository):

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self.session_factory = session_factory

    async def _scalar(self, statement):
        async with self.session_factory() as session:
            result = await session.execute(statement)
            return result.scalar_one_or_none()

    async def _pairs(self, statement) -> list:
        async with self.session_factory() as session:
            result = await session.execute(statement)
            return list(result.all())

    async def sum_expenses(self, room_id: str, period_id: str) -> Decimal:
        statement = (
            select(func.coalesce(func.sum(Expense.amount), 0))
            .where(Expense.room_id == room_id)
            .where(Expense.period_id == period_id)
        )
        return to_decimal(await self._scalar(statement))

    async def sum_purchased_shopping(self, room_id: str, period_id: str) -> Decimal:
        statement = (
            select(func.coalesce(func.sum(ShoppingItem.amount), 0))
            .where(ShoppingItem.room_id == room_id)
            .where(ShoppingItem.period_id == period_id)
            .where(ShoppingItem.purchased == True)  # noqa: E712
        )
        return to_decimal(await self._scalar(statement))

    async def count_meals(self, room_id: str, period_id: str, user_id: Optional[str] = None) -> int:
        statement = (
            select(func.count(Meal.id))
            .where(Meal.room_id == room_id)
            .where(Meal.period_id == period_id)
        )
        if user_id:
            statement = statement.where(Meal.user_id == user_id)
        return int(await self._scalar(statement) or 0)

    async def sum_guest_meals(self, room_id: str, period_id: str, user_id: Optional[str] = None) -> int:
        statement = (
            select(func.coalesce(func.sum(GuestMeal.count), 0))
            .where(GuestMeal.room_id == room_id)
            .where(GuestMeal.period_id == period_id)
        )
        if user_id:
            statement = statement.where(GuestMeal.user_id == user_id)
        return int(await self._scalar(statement) or 0)

    async def sum_transactions(
        self,
        room_id: str,
        period_id: str,
        target_user_id: Optional[str] = None,
        transaction_types: Optional[Iterable[TransactionType]] = None,
    ) -> Decimal:
        statement = (
            select(func.coalesce(func.sum(AccountTransaction.amount), 0))
            .where(AccountTransaction.room_id == room_id)
            .where(AccountTransaction.period_id == period_id)
        )
        if target_user_id:
            statement = statement.where(AccountTransaction.target_user_id == target_user_id)
        if transaction_types is not None:
            statement = statement.where(AccountTransaction.transaction_type.in_(list(transaction_types)))
        return to_decimal(await self._scalar(statement))

    async def meal_counts_by_user(self, room_id: str, period_id: str) -> dict[str, int]:
        statement = (
            select(Meal.user_id, func.count(Meal.id))
            .where(Meal.room_id == room_id)
            .where(Meal.period_id == period_id)
            .group_by(Meal.user_id)
        )
        return {user_id: int(count) for user_id, count in await self._pairs(statement)}

    async def guest_meal_counts_by_user(self, room_id: str, period_id: str) -> dict[str, int]:
        statement = (
            select(GuestMeal.user_id, func.sum(GuestMeal.count))
            .where(GuestMeal.room_id == room_id)
            .where(GuestMeal.period_id == period_id)
            .group_by(GuestMeal.user_id)
        )
        return {user_id: int(total or 0) for user_id, total in await self._pairs(statement)}

    async def transaction_sums_by_target(self, room_id: str, period_id: str) -> dict[str, Decimal]:
        statement = (
            select(AccountTransaction.target_user_id, func.sum(AccountTransaction.amount))
            .where(AccountTransaction.room_id == room_id)
            .where(AccountTransaction.period_id == period_id)
            .group_by(AccountTransaction.target_user_id)
        )
        return {user_id: to_decimal(total) for user_id, total in await self._pairs(statement)}
