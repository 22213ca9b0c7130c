"""Meal Domain Entity

One meal eaten by a member. A member has at most one meal of a given type
per day in a room.
"""

from datetime import date, datetime
from enum import Enum
from sqlmodel import Field, Column, UniqueConstraint, Index
from sqlalchemy import Date, ForeignKey, String
from src.domain.base import BaseModel, generate_uuid


class MealType(str, Enum):
    BREAKFAST = "BREAKFAST"
    LUNCH = "LUNCH"
    DINNER = "DINNER"


class Meal(BaseModel, table=True):
    """
    Meal - A single meal slot

    Domain Rules:
    - Unique per (user_id, room_id, meal_date, meal_type)
    - period_id is stamped at creation and never changes
    """

    __tablename__ = "meals"
    __table_args__ = (
        UniqueConstraint('user_id', 'room_id', 'meal_date', 'meal_type', name='uq_meals_slot'),
        Index('ix_meals_room_period', 'room_id', 'period_id'),
    )

    id: str = Field(default_factory=generate_uuid, primary_key=True)

    room_id: str = Field(description="Room the meal belongs to")

    period_id: str = Field(
        sa_column=Column(String, ForeignKey("periods.id"), nullable=False),
        description="Period stamped at creation"
    )

    user_id: str = Field(index=True, description="Member who ate the meal")

    meal_date: date = Field(sa_column=Column(Date, nullable=False))

    meal_type: MealType = Field(description="BREAKFAST, LUNCH or DINNER")

    created_at: datetime = Field(default_factory=datetime.utcnow)
