"""Guest Meal Domain Entity

Meals a member served to non-members. ``count`` is the number of guests for
that slot and is replaced, not incremented, on every upsert.
"""

from datetime import date, datetime
from sqlmodel import Field, Column, UniqueConstraint, Index
from sqlalchemy import CheckConstraint, Date, ForeignKey, Integer, String
from src.domain.base import BaseModel, generate_uuid
from src.domain.meal import MealType


class GuestMeal(BaseModel, table=True):
    __tablename__ = "guest_meals"
    __table_args__ = (
        UniqueConstraint('user_id', 'room_id', 'meal_date', 'meal_type', name='uq_guest_meals_slot'),
        CheckConstraint('count >= 1', name='guest_meal_count_positive'),
        Index('ix_guest_meals_room_period', 'room_id', 'period_id'),
    )

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    room_id: str
    period_id: str = Field(sa_column=Column(String, ForeignKey("periods.id"), nullable=False))
    user_id: str = Field(index=True, description="Member hosting the guests")
    meal_date: date = Field(sa_column=Column(Date, nullable=False))
    meal_type: MealType
    count: int = Field(sa_column=Column(Integer, nullable=False), description="Number of guest meals")
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
