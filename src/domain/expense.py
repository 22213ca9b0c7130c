"""Expense Domain Entity

Money a member spent on behalf of the room. Every expense is mirrored by a
negative EXPENSE account transaction targeting its creator.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, Date, ForeignKey, Numeric, String
from src.domain.base import BaseModel, generate_uuid


class ExpenseType(str, Enum):
    GROCERY = "GROCERY"
    UTILITY = "UTILITY"
    DINEOUT = "DINEOUT"
    OTHER = "OTHER"


class Expense(BaseModel, table=True):
    """
    Expense - Room spending recorded by a member

    Domain Rules:
    - amount > 0
    - Counts toward the period's total expense (and so the meal rate)
    - Debits the creator's balance through a linked EXPENSE transaction
    """

    __tablename__ = "expenses"
    __table_args__ = (
        CheckConstraint('amount > 0', name='expense_amount_positive'),
        Index('ix_expenses_room_period', 'room_id', 'period_id'),
    )

    id: str = Field(default_factory=generate_uuid, primary_key=True)

    room_id: str

    period_id: str = Field(sa_column=Column(String, ForeignKey("periods.id"), nullable=False))

    user_id: str = Field(description="Member who paid")

    description: str = Field(sa_column=Column(String(255), nullable=False))

    amount: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Amount spent (precision: 18,6)"
    )

    expense_date: date = Field(sa_column=Column(Date, nullable=False))

    expense_type: ExpenseType = Field(default=ExpenseType.OTHER)

    receipt_url: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=datetime.utcnow)
