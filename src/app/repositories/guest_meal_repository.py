"""Guest Meal Repository Interface"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional
from src.domain.guest_meal import GuestMeal
from src.domain.meal import MealType


class GuestMealRepository(ABC):

    @abstractmethod
    async def get_slot(self, user_id: str, room_id: str, meal_date: date, meal_type: MealType) -> Optional[GuestMeal]:
        pass

    @abstractmethod
    async def create(self, guest_meal: GuestMeal) -> GuestMeal:
        pass

    @abstractmethod
    async def update(self, guest_meal: GuestMeal) -> GuestMeal:
        pass

    @abstractmethod
    async def delete(self, guest_meal: GuestMeal) -> None:
        pass
