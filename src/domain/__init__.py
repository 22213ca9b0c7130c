from .base import BaseModel, generate_uuid
from .period import Period, PeriodStatus
from .room_member import RoomMember
from .room_settings import RoomSettings, PeriodMode
from .meal import Meal, MealType
from .guest_meal import GuestMeal
from .expense import Expense, ExpenseType
from .shopping_item import ShoppingItem
from .account_transaction import AccountTransaction, TransactionType

__all__ = [
    "BaseModel",
    "generate_uuid",
    "Period",
    "PeriodStatus",
    "RoomMember",
    "RoomSettings",
    "PeriodMode",
    "Meal",
    "MealType",
    "GuestMeal",
    "Expense",
    "ExpenseType",
    "ShoppingItem",
    "AccountTransaction",
    "TransactionType",
]
