"""SQLAlchemy Expense and Shopping Item Repository Implementations"""

from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.expense_repository import ExpenseRepository
from src.app.repositories.shopping_item_repository import ShoppingItemRepository
from src.domain.expense import Expense
from src.domain.shopping_item import ShoppingItem


class SqlAlchemyExpenseRepository(ExpenseRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, expense: Expense) -> Expense:
        self.session.add(expense)
        await self.session.flush()
        await self.session.refresh(expense)
        return expense

    async def get_by_id(self, expense_id: str) -> Optional[Expense]:
        statement = select(Expense).where(Expense.id == expense_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def list_by_period(self, room_id: str, period_id: str) -> List[Expense]:
        statement = (
            select(Expense)
            .where(Expense.room_id == room_id)
            .where(Expense.period_id == period_id)
            .order_by(Expense.expense_date.desc(), Expense.created_at.desc())
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def delete(self, expense: Expense) -> None:
        await self.session.delete(expense)
        await self.session.flush()


class SqlAlchemyShoppingItemRepository(ShoppingItemRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, item: ShoppingItem) -> ShoppingItem:
        self.session.add(item)
        await self.session.flush()
        await self.session.refresh(item)
        return item

    async def list_by_period(self, room_id: str, period_id: str) -> List[ShoppingItem]:
        statement = (
            select(ShoppingItem)
            .where(ShoppingItem.room_id == room_id)
            .where(ShoppingItem.period_id == period_id)
            .order_by(ShoppingItem.purchase_date.desc())
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())
