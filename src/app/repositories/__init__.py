from .period_repository import PeriodRepository
from .meal_repository import MealRepository
from .guest_meal_repository import GuestMealRepository
from .expense_repository import ExpenseRepository
from .shopping_item_repository import ShoppingItemRepository
from .account_transaction_repository import AccountTransactionRepository
from .ledger_aggregate_repository import LedgerAggregateRepository
from .room_settings_repository import RoomSettingsRepository

__all__ = [
    "PeriodRepository",
    "MealRepository",
    "GuestMealRepository",
    "ExpenseRepository",
    "ShoppingItemRepository",
    "AccountTransactionRepository",
    "LedgerAggregateRepository",
    "RoomSettingsRepository",
]
