from .period_repository import SqlAlchemyPeriodRepository
from .meal_repository import SqlAlchemyMealRepository, SqlAlchemyGuestMealRepository
from .expense_repository import SqlAlchemyExpenseRepository, SqlAlchemyShoppingItemRepository
from .account_transaction_repository import SqlAlchemyAccountTransactionRepository
from .ledger_aggregate_repository import SqlAlchemyLedgerAggregateRepository
from .membership_directory import SqlAlchemyMembershipDirectory
from .room_settings_repository import SqlAlchemyRoomSettingsRepository

__all__ = [
    "SqlAlchemyPeriodRepository",
    "SqlAlchemyMealRepository",
    "SqlAlchemyGuestMealRepository",
    "SqlAlchemyExpenseRepository",
    "SqlAlchemyShoppingItemRepository",
    "SqlAlchemyAccountTransactionRepository",
    "SqlAlchemyLedgerAggregateRepository",
    "SqlAlchemyMembershipDirectory",
    "SqlAlchemyRoomSettingsRepository",
]
