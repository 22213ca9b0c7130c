"""Shopping Item Repository Interface"""

from abc import ABC, abstractmethod
from typing import List
from src.domain.shopping_item import ShoppingItem


class ShoppingItemRepository(ABC):

    @abstractmethod
    async def create(self, item: ShoppingItem) -> ShoppingItem:
        pass

    @abstractmethod
    async def list_by_period(self, room_id: str, period_id: str) -> List[ShoppingItem]:
        pass
