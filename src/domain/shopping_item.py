"""Shopping Item Domain Entity

Purchased items add to the period's total expense alongside expenses.
"""

from datetime import date, datetime
from decimal import Decimal
from sqlmodel import Field, Column, Index
from sqlalchemy import Date, ForeignKey, Numeric, String
from src.domain.base import BaseModel, generate_uuid


class ShoppingItem(BaseModel, table=True):
    __tablename__ = "shopping_items"
    __table_args__ = (
        Index('ix_shopping_items_room_period', 'room_id', 'period_id'),
    )

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    room_id: str
    period_id: str = Field(sa_column=Column(String, ForeignKey("periods.id"), nullable=False))
    user_id: str
    name: str = Field(sa_column=Column(String(255), nullable=False))
    amount: Decimal = Field(sa_column=Column(Numeric(18, 6), nullable=False))
    purchased: bool = Field(default=True)
    purchase_date: date = Field(sa_column=Column(Date, nullable=False))
    created_at: datetime = Field(default_factory=datetime.utcnow)
