"""Account Transaction Domain Entity

Signed money movements affecting a member's balance within a period.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, Numeric, String
from src.domain.base import BaseModel, generate_uuid


class TransactionType(str, Enum):
    """Account transaction types"""
    DEPOSIT = "DEPOSIT"          # Member hands money to the room
    PAYMENT = "PAYMENT"          # Member pays a privileged member
    WITHDRAWAL = "WITHDRAWAL"    # Money returned to the member
    REFUND = "REFUND"
    ADJUSTMENT = "ADJUSTMENT"    # Manual or carried-forward correction
    EXPENSE = "EXPENSE"          # Mirror of an Expense, always negative


class AccountTransaction(BaseModel, table=True):
    """
    Account Transaction - Money affecting one member's balance

    Domain Rules:
    - target_user_id is whose balance moves, user_id is who recorded it
    - amount is signed: credits positive, debits negative
    - EXPENSE transactions are created and deleted together with their Expense
    """

    __tablename__ = "account_transactions"
    __table_args__ = (
        Index('ix_account_transactions_room_period', 'room_id', 'period_id'),
        Index('ix_account_transactions_target', 'target_user_id'),
    )

    id: str = Field(default_factory=generate_uuid, primary_key=True)

    room_id: str

    period_id: str = Field(sa_column=Column(String, ForeignKey("periods.id"), nullable=False))

    user_id: str = Field(description="Member who recorded the transaction")

    target_user_id: str = Field(description="Member whose balance the transaction affects")

    amount: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Signed amount (precision: 18,6)"
    )

    transaction_type: TransactionType

    description: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
    )

    expense_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String, ForeignKey("expenses.id", ondelete="CASCADE"), nullable=True),
        description="Expense mirrored by this transaction"
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)
