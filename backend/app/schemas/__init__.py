"""Pydantic schemas package for API request/response models."""

from app.schemas.common import ErrorResponse, ExistenceCheckResponse, PagedResponse
from app.schemas.user import UserCreate, UserResponse, UserUpdate
from app.schemas.exercise import ExerciseCreate, ExerciseResponse, ExerciseUpdate
from app.schemas.sets import (
    CardioSetCreate,
    CardioSetResponse,
    CardioSetUpdate,
    FlexibilitySetCreate,
    FlexibilitySetResponse,
    FlexibilitySetUpdate,
    StrengthSetCreate,
    StrengthSetResponse,
    StrengthSetUpdate,
)
from app.schemas.workout import (
    WorkoutActionRequest,
    WorkoutCreate,
    WorkoutExerciseCreate,
    WorkoutExerciseResponse,
    WorkoutExerciseUpdate,
    WorkoutResponse,
    WorkoutUpdate,
)

__all__ = [
    # Common
    "ErrorResponse",
    "ExistenceCheckResponse",
    "PagedResponse",
    # User schemas
    "UserCreate",
    "UserResponse",
    "UserUpdate",
    # Exercise schemas
    "ExerciseCreate",
    "ExerciseResponse",
    "ExerciseUpdate",
    # Set schemas
    "StrengthSetCreate",
    "StrengthSetUpdate",
    "StrengthSetResponse",
    "CardioSetCreate",
    "CardioSetUpdate",
    "CardioSetResponse",
    "FlexibilitySetCreate",
    "FlexibilitySetUpdate",
    "FlexibilitySetResponse",
    # Workout schemas
    "WorkoutActionRequest",
    "WorkoutCreate",
    "WorkoutUpdate",
    "WorkoutResponse",
    "WorkoutExerciseCreate",
    "WorkoutExerciseUpdate",
    "WorkoutExerciseResponse",
]
