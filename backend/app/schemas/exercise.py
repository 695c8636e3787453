"""Pydantic schemas for the exercise catalog."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.models.exercise import DifficultyLevel, ExerciseType, TargetMuscleGroup

EXERCISE_NAME_PATTERN = r"^[a-zA-Z0-9\s\-()]+$"


class ExerciseBase(BaseModel):
    """Base schema for exercise data."""

    name: str = Field(..., min_length=1, max_length=100, pattern=EXERCISE_NAME_PATTERN)
    description: Optional[str] = Field(None, max_length=1000)
    type: ExerciseType = Field(..., description="Exercise type, decides the set kind")
    target_muscle_group: TargetMuscleGroup
    difficulty_level: DifficultyLevel
    image_url: Optional[str] = Field(None, max_length=500)


class ExerciseCreate(ExerciseBase):
    """Schema for creating an exercise."""
    pass


class ExerciseUpdate(BaseModel):
    """Schema for updating an exercise."""

    version: int = Field(..., ge=0, description="Version last read by the client")
    name: Optional[str] = Field(None, min_length=1, max_length=100, pattern=EXERCISE_NAME_PATTERN)
    description: Optional[str] = Field(None, max_length=1000)
    type: Optional[ExerciseType] = None
    target_muscle_group: Optional[TargetMuscleGroup] = None
    difficulty_level: Optional[DifficultyLevel] = None
    image_url: Optional[str] = Field(None, max_length=500)


class ExerciseResponse(ExerciseBase):
    """Schema for exercise API responses."""

    id: int = Field(..., description="Exercise ID")
    is_active: bool
    version: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": 1,
                "name": "Barbell Back Squat",
                "description": "Compound lower body lift",
                "type": "STRENGTH",
                "target_muscle_group": "QUADRICEPS",
                "difficulty_level": "INTERMEDIATE",
                "image_url": None,
                "is_active": True,
                "version": 1,
                "created_at": "2024-01-01T10:00:00",
                "updated_at": "2024-01-01T10:00:00",
            }
        }
