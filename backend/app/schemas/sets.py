"""Pydantic schemas for strength, cardio and flexibility sets."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


# ============== Shared Fields ==============

class SetBase(BaseModel):
    """Fields every set type accepts."""

    set_number: int = Field(..., ge=1, le=50, description="Position of the set within the exercise")
    rest_time_seconds: Optional[int] = Field(None, ge=0, le=3600, description="Rest after the set")
    notes: Optional[str] = Field(None, max_length=500)
    completed: bool = Field(False, description="Whether the set was performed")


class SetUpdateBase(BaseModel):
    """Optional shared fields for set updates."""

    version: int = Field(..., ge=0, description="Version last read by the client")
    set_number: Optional[int] = Field(None, ge=1, le=50)
    rest_time_seconds: Optional[int] = Field(None, ge=0, le=3600)
    notes: Optional[str] = Field(None, max_length=500)
    completed: Optional[bool] = None


class SetResponseBase(BaseModel):
    """Fields every set response carries."""

    id: int
    workout_exercise_id: int
    set_number: int
    rest_time_seconds: Optional[int] = None
    notes: Optional[str] = None
    completed: bool
    is_active: bool
    version: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# ============== Strength ==============

class StrengthSetCreate(SetBase):
    reps: int = Field(..., ge=1, le=1000)
    weight: Optional[float] = Field(None, gt=0, le=1000, description="Load lifted")


class StrengthSetUpdate(SetUpdateBase):
    reps: Optional[int] = Field(None, ge=1, le=1000)
    weight: Optional[float] = Field(None, gt=0, le=1000)


class StrengthSetResponse(SetResponseBase):
    reps: int
    weight: Optional[float] = None


# ============== Cardio ==============

class CardioSetCreate(SetBase):
    duration_seconds: int = Field(..., ge=1, le=14400, description="Duration, at most 4 hours")
    distance: Optional[float] = Field(None, ge=0, le=1000)
    distance_unit: Optional[str] = Field(None, max_length=10)


class CardioSetUpdate(SetUpdateBase):
    duration_seconds: Optional[int] = Field(None, ge=1, le=14400)
    distance: Optional[float] = Field(None, ge=0, le=1000)
    distance_unit: Optional[str] = Field(None, max_length=10)


class CardioSetResponse(SetResponseBase):
    duration_seconds: int
    distance: Optional[float] = None
    distance_unit: Optional[str] = None


# ============== Flexibility ==============

class FlexibilitySetCreate(SetBase):
    duration_seconds: int = Field(..., ge=1, le=14400)
    stretch_type: str = Field(..., min_length=2, max_length=50)
    intensity: int = Field(..., ge=1, le=10, description="Perceived intensity, 1-10")


class FlexibilitySetUpdate(SetUpdateBase):
    duration_seconds: Optional[int] = Field(None, ge=1, le=14400)
    stretch_type: Optional[str] = Field(None, min_length=2, max_length=50)
    intensity: Optional[int] = Field(None, ge=1, le=10)


class FlexibilitySetResponse(SetResponseBase):
    duration_seconds: int
    stretch_type: str
    intensity: int
