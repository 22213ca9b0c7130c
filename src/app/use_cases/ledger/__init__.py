"""Ledger write use cases"""
from .toggle_meal import ToggleMeal
from .upsert_guest_meal import UpsertGuestMeal
from .expenses import CreateExpense, DeleteExpense
from .record_shopping_purchase import RecordShoppingPurchase
from .create_transaction import CreateTransaction
from .dtos import (
    MealAction,
    ToggleMealCommandDTO,
    MealToggleResultDTO,
    UpsertGuestMealCommandDTO,
    GuestMealDTO,
    CreateExpenseCommandDTO,
    DeleteExpenseCommandDTO,
    ExpenseDTO,
    RecordShoppingPurchaseCommandDTO,
    ShoppingItemDTO,
    CreateTransactionCommandDTO,
    TransactionDTO,
)

__all__ = [
    "ToggleMeal",
    "UpsertGuestMeal",
    "CreateExpense",
    "DeleteExpense",
    "RecordShoppingPurchase",
    "CreateTransaction",
    "MealAction",
    "ToggleMealCommandDTO",
    "MealToggleResultDTO",
    "UpsertGuestMealCommandDTO",
    "GuestMealDTO",
    "CreateExpenseCommandDTO",
    "DeleteExpenseCommandDTO",
    "ExpenseDTO",
    "RecordShoppingPurchaseCommandDTO",
    "ShoppingItemDTO",
    "CreateTransactionCommandDTO",
    "TransactionDTO",
]
