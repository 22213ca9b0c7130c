"""Meal Repository Interface"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional
from src.domain.meal import Meal, MealType


class MealRepository(ABC):

    @abstractmethod
    async def get_slot(self, user_id: str, room_id: str, meal_date: date, meal_type: MealType) -> Optional[Meal]:
        """Meal occupying the (user, room, date, type) slot, if any"""
        pass

    @abstractmethod
    async def create(self, meal: Meal) -> Meal:
        """
        Raises:
            IntegrityError: the slot is already taken
        """
        pass

    @abstractmethod
    async def delete(self, meal: Meal) -> None:
        pass
