"""SQLAlchemy Meal and Guest Meal Repository Implementations"""

from datetime import date, datetime
from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.guest_meal_repository import GuestMealRepository
from src.app.repositories.meal_repository import MealRepository
from src.domain.guest_meal import GuestMeal
from src.domain.meal import Meal, MealType


class SqlAlchemyMealRepository(MealRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_slot(self, user_id: str, room_id: str, meal_date: date, meal_type: MealType) -> Optional[Meal]:
        statement = (
            select(Meal)
            .where(Meal.user_id == user_id)
            .where(Meal.room_id == room_id)
            .where(Meal.meal_date == meal_date)
            .where(Meal.meal_type == meal_type)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def create(self, meal: Meal) -> Meal:
        self.session.add(meal)
        await self.session.flush()
        await self.session.refresh(meal)
        return meal

    async def delete(self, meal: Meal) -> None:
        await self.session.delete(meal)
        await self.session.flush()


class SqlAlchemyGuestMealRepository(GuestMealRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_slot(
        self, user_id: str, room_id: str, meal_date: date, meal_type: MealType
    ) -> Optional[GuestMeal]:
        statement = (
            select(GuestMeal)
            .where(GuestMeal.user_id == user_id)
            .where(GuestMeal.room_id == room_id)
            .where(GuestMeal.meal_date == meal_date)
            .where(GuestMeal.meal_type == meal_type)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def create(self, guest_meal: GuestMeal) -> GuestMeal:
        self.session.add(guest_meal)
        await self.session.flush()
        await self.session.refresh(guest_meal)
        return guest_meal

    async def update(self, guest_meal: GuestMeal) -> GuestMeal:
        guest_meal.updated_at = datetime.utcnow()
        self.session.add(guest_meal)
        await self.session.flush()
        await self.session.refresh(guest_meal)
        return guest_meal

    async def delete(self, guest_meal: GuestMeal) -> None:
        await self.session.delete(guest_meal)
        await self.session.flush()
