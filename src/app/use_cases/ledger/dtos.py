"""Data Transfer Objects for Ledger Use Cases

Pydantic models for command inputs and response outputs. Commands carry an
optional period id; the period guard turns it into a concrete period.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from src.domain.account_transaction import AccountTransaction, TransactionType
from src.domain.expense import Expense, ExpenseType
from src.domain.meal import MealType
from src.domain.shopping_item import ShoppingItem


class MealAction(str, Enum):
    ADD = "add"
    REMOVE = "remove"


class LedgerCommandDTO(BaseModel):
    room_id: str = Field(..., description="Room identifier")
    actor_id: str = Field(..., description="User performing the write")
    period_id: Optional[str] = Field(
        default=None,
        description="Target period (default: period covering the record date, then the active period)"
    )


class ToggleMealCommandDTO(LedgerCommandDTO):
    """
    Command DTO for adding or removing one meal slot

    Used as input to ToggleMeal use case.
    """

    user_id: Optional[str] = Field(default=None, description="Member who ate (default: actor)")
    meal_date: date
    meal_type: MealType
    action: MealAction = MealAction.ADD

    @property
    def target_user_id(self) -> str:
        return self.user_id or self.actor_id

    class Config:
        json_schema_extra = {
            "example": {
                "room_id": "room_abc",
                "actor_id": "user_1",
                "meal_date": "2026-10-19",
                "meal_type": "LUNCH",
                "action": "add",
            }
        }


class MealToggleResultDTO(BaseModel):
    user_id: str
    meal_date: date
    meal_type: MealType
    period_id: Optional[str] = None
    present: bool = Field(..., description="Whether the slot holds a meal after the call")
    changed: bool = Field(..., description="Whether the call modified the ledger")


class UpsertGuestMealCommandDTO(LedgerCommandDTO):
    user_id: Optional[str] = Field(default=None, description="Hosting member (default: actor)")
    meal_date: date
    meal_type: MealType
    count: int = Field(..., ge=0, description="Number of guest meals; 0 removes the entry")

    @property
    def target_user_id(self) -> str:
        return self.user_id or self.actor_id


class GuestMealDTO(BaseModel):
    user_id: str
    meal_date: date
    meal_type: MealType
    period_id: Optional[str] = None
    count: int


class CreateExpenseCommandDTO(LedgerCommandDTO):
    """
    Command DTO for recording an expense

    The payer is debited by a mirroring EXPENSE transaction.
    """

    user_id: Optional[str] = Field(default=None, description="Member who paid (default: actor)")
    description: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., gt=0, description="Expense amount (must be > 0)")
    expense_date: date
    expense_type: ExpenseType = ExpenseType.OTHER
    receipt_url: Optional[str] = None

    @property
    def target_user_id(self) -> str:
        return self.user_id or self.actor_id


class DeleteExpenseCommandDTO(BaseModel):
    room_id: str
    actor_id: str
    expense_id: str


class ExpenseDTO(BaseModel):
    id: str
    room_id: str
    period_id: str
    user_id: str
    description: str
    amount: Decimal
    expense_date: date
    expense_type: ExpenseType
    receipt_url: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, expense: Expense) -> "ExpenseDTO":
        return cls(
            id=expense.id,
            room_id=expense.room_id,
            period_id=expense.period_id,
            user_id=expense.user_id,
            description=expense.description,
            amount=expense.amount,
            expense_date=expense.expense_date,
            expense_type=expense.expense_type,
            receipt_url=expense.receipt_url,
            created_at=expense.created_at,
        )


class RecordShoppingPurchaseCommandDTO(LedgerCommandDTO):
    user_id: Optional[str] = Field(default=None, description="Member who bought the item (default: actor)")
    name: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., gt=0)
    purchase_date: date

    @property
    def target_user_id(self) -> str:
        return self.user_id or self.actor_id


class ShoppingItemDTO(BaseModel):
    id: str
    room_id: str
    period_id: str
    user_id: str
    name: str
    amount: Decimal
    purchased: bool
    purchase_date: date
    created_at: datetime

    @classmethod
    def from_entity(cls, item: ShoppingItem) -> "ShoppingItemDTO":
        return cls(
            id=item.id,
            room_id=item.room_id,
            period_id=item.period_id,
            user_id=item.user_id,
            name=item.name,
            amount=item.amount,
            purchased=item.purchased,
            purchase_date=item.purchase_date,
            created_at=item.created_at,
        )


class CreateTransactionCommandDTO(LedgerCommandDTO):
    """
    Command DTO for recording a money movement

    ``amount`` is signed: credits positive, debits negative.
    """

    target_user_id: str = Field(..., description="Member whose balance moves")
    amount: Decimal
    transaction_type: TransactionType = TransactionType.PAYMENT
    description: Optional[str] = Field(default=None, max_length=255)

    @field_validator("amount")
    @classmethod
    def amount_not_zero(cls, value: Decimal) -> Decimal:
        if value == 0:
            raise ValueError("amount must not be zero")
        return value


class TransactionDTO(BaseModel):
    id: str
    room_id: str
    period_id: str
    user_id: str
    target_user_id: str
    amount: Decimal
    transaction_type: TransactionType
    description: Optional[str] = None
    expense_id: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, transaction: AccountTransaction) -> "TransactionDTO":
        return cls(
            id=transaction.id,
            room_id=transaction.room_id,
            period_id=transaction.period_id,
            user_id=transaction.user_id,
            target_user_id=transaction.target_user_id,
            amount=transaction.amount,
            transaction_type=transaction.transaction_type,
            description=transaction.description,
            expense_id=transaction.expense_id,
            created_at=transaction.created_at,
        )
