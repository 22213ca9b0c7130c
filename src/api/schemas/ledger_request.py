"""Request schemas for Ledger API"""

from datetime import date
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from src.app.use_cases.ledger.dtos import MealAction
from src.domain.account_transaction import TransactionType
from src.domain.expense import ExpenseType
from src.domain.meal import MealType


class ToggleMealRequestSchema(BaseModel):
    """
    Request schema for toggling a meal

    Used for POST /ledger/{room_id}/meals endpoint.
    """

    user_id: Optional[str] = Field(default=None, description="Defaults to the acting user")
    meal_date: date
    meal_type: MealType
    action: MealAction = MealAction.ADD
    period_id: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {"meal_date": "2026-10-19", "meal_type": "DINNER", "action": "add"}
        }


class GuestMealRequestSchema(BaseModel):
    user_id: Optional[str] = None
    meal_date: date
    meal_type: MealType
    count: int = Field(..., ge=0, le=100, description="Guest meals in the slot; 0 removes it")
    period_id: Optional[str] = None


class CreateExpenseRequestSchema(BaseModel):
    """
    Request schema for recording an expense

    Used for POST /ledger/{room_id}/expenses endpoint.
    """

    user_id: Optional[str] = Field(default=None, description="Payer, defaults to the acting user")
    description: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., gt=0, description="Amount paid (must be > 0)")
    expense_date: date
    expense_type: ExpenseType = ExpenseType.OTHER
    receipt_url: Optional[str] = None
    period_id: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "description": "Weekly groceries",
                "amount": "300.00",
                "expense_date": "2026-10-19",
                "expense_type": "GROCERY",
            }
        }


class ShoppingPurchaseRequestSchema(BaseModel):
    user_id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., gt=0)
    purchase_date: date
    period_id: Optional[str] = None


class CreateTransactionRequestSchema(BaseModel):
    target_user_id: str = Field(..., min_length=1, description="Member whose balance moves")
    amount: Decimal = Field(..., description="Signed amount, credits positive")
    transaction_type: TransactionType = TransactionType.PAYMENT
    description: Optional[str] = Field(default=None, max_length=255)
    period_id: Optional[str] = None

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v):
        """Zero-amount transactions carry no information"""
        if v == 0:
            raise ValueError("Amount must not be zero")
        return v
