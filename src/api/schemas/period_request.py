"""Request schemas for Period API

Pydantic models for validating incoming HTTP requests. The acting user
comes from the X-User-Id header, never from the body.
"""

from datetime import date
from typing import Optional
from pydantic import BaseModel, Field, model_validator
from src.domain.period import PeriodStatus
from src.domain.room_settings import PeriodMode


class StartPeriodRequestSchema(BaseModel):
    """
    Request schema for starting a period

    Used for POST /periods/{room_id}/start endpoint.
    """

    name: str = Field(..., min_length=1, max_length=120, description="Period name, suffixed when taken")
    start_date: date = Field(..., description="First day of the period")
    end_date: Optional[date] = Field(default=None, description="Last day (omit for open ended)")
    notes: Optional[str] = Field(default=None, max_length=2000)

    @model_validator(mode="after")
    def validate_range(self):
        if self.end_date is not None and self.start_date >= self.end_date:
            raise ValueError("start_date must be before end_date")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "name": "November 2026",
                "start_date": "2026-11-01",
                "end_date": "2026-11-30",
            }
        }


class EndPeriodRequestSchema(BaseModel):
    period_id: Optional[str] = Field(default=None, description="Defaults to the active period")
    end_date: Optional[date] = Field(default=None, description="Defaults to today")


class PeriodTargetRequestSchema(BaseModel):
    period_id: Optional[str] = Field(default=None, description="Defaults to the active period")


class UnlockPeriodRequestSchema(BaseModel):
    period_id: str = Field(..., description="Locked period to unlock")
    target_status: PeriodStatus = Field(default=PeriodStatus.ENDED, description="ACTIVE or ENDED")


class RestartPeriodRequestSchema(BaseModel):
    period_id: str = Field(..., description="Period to restart from")
    new_name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    with_data: bool = Field(default=False, description="Carry available balances forward")


class SetPeriodModeRequestSchema(BaseModel):
    """Request schema for PUT /periods/{room_id}/mode"""

    mode: PeriodMode = Field(..., description="MONTHLY or CUSTOM")
