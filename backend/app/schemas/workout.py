"""Pydantic schemas for workout sessions and their exercises."""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.models.exercise import ExerciseType
from app.models.workout_exercise import WorkoutExercise
from app.models.workout_session import WorkoutSession, WorkoutStatus
from app.schemas.sets import CardioSetResponse, FlexibilitySetResponse, StrengthSetResponse

WORKOUT_NAME_PATTERN = r"^[a-zA-Z0-9\s\-()]+$"


# ============== Workout Exercise Schemas ==============

class WorkoutExerciseCreate(BaseModel):
    """Schema for adding a catalog exercise to a workout."""

    exercise_id: int = Field(..., description="Catalog exercise ID")
    order_in_workout: int = Field(..., ge=1, le=100, description="Position in the workout")
    notes: Optional[str] = Field(None, max_length=1000)


class WorkoutExerciseUpdate(BaseModel):
    """Schema for updating a workout exercise."""

    version: int = Field(..., ge=0, description="Version last read by the client")
    order_in_workout: Optional[int] = Field(None, ge=1, le=100)
    notes: Optional[str] = Field(None, max_length=1000)


class WorkoutExerciseResponse(BaseModel):
    """Workout exercise with its catalog details and recorded sets."""

    id: int
    workout_session_id: int
    exercise_id: int
    exercise_name: str
    exercise_type: ExerciseType
    order_in_workout: int
    notes: Optional[str] = None
    version: int
    strength_sets: List[StrengthSetResponse] = Field(default_factory=list)
    cardio_sets: List[CardioSetResponse] = Field(default_factory=list)
    flexibility_sets: List[FlexibilitySetResponse] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, workout_exercise: WorkoutExercise) -> "WorkoutExerciseResponse":
        exercise = workout_exercise.exercise
        return cls(
            id=workout_exercise.id,
            workout_session_id=workout_exercise.workout_session_id,
            exercise_id=workout_exercise.exercise_id,
            exercise_name=exercise.name,
            exercise_type=exercise.type,
            order_in_workout=workout_exercise.order_in_workout,
            notes=workout_exercise.notes,
            version=workout_exercise.version,
            strength_sets=[StrengthSetResponse.model_validate(s) for s in workout_exercise.strength_sets],
            cardio_sets=[CardioSetResponse.model_validate(s) for s in workout_exercise.cardio_sets],
            flexibility_sets=[
                FlexibilitySetResponse.model_validate(s) for s in workout_exercise.flexibility_sets
            ],
        )


# ============== Workout Session Schemas ==============

class WorkoutCreate(BaseModel):
    """Schema for creating a workout session. The owner is the caller."""

    name: str = Field(..., min_length=2, max_length=100, pattern=WORKOUT_NAME_PATTERN)
    description: Optional[str] = Field(None, max_length=1000)
    status: WorkoutStatus = Field(WorkoutStatus.PLANNED, description="Initial status")
    scheduled_date: Optional[date] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    actual_duration_minutes: Optional[int] = Field(None, ge=1, le=1440)
    session_notes: Optional[str] = Field(None, max_length=1000)

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Leg Day",
                "description": "Squats and lunges",
                "status": "PLANNED",
                "scheduled_date": "2024-01-15",
            }
        }


class WorkoutUpdate(BaseModel):
    """
    Partial update of a workout session.

    Status is not accepted here; it changes only through the actions endpoint.
    """

    version: int = Field(..., ge=0, description="Version last read by the client")
    name: Optional[str] = Field(None, min_length=2, max_length=100, pattern=WORKOUT_NAME_PATTERN)
    description: Optional[str] = Field(None, max_length=1000)
    scheduled_date: Optional[date] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    actual_duration_minutes: Optional[int] = Field(None, ge=1, le=1440)
    session_notes: Optional[str] = Field(None, max_length=1000)


class WorkoutActionRequest(BaseModel):
    """Lifecycle action: start, pause, resume or complete."""

    action: str = Field(..., min_length=1, description="start | pause | resume | complete")
    version: Optional[int] = Field(None, ge=0, description="Optional version check")


class WorkoutResponse(BaseModel):
    """Workout session with its exercises."""

    id: int
    name: str
    description: Optional[str] = None
    user_id: int
    user_full_name: Optional[str] = None
    status: WorkoutStatus
    scheduled_date: Optional[date] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    actual_duration_minutes: Optional[int] = None
    session_notes: Optional[str] = None
    is_active: bool
    deleted_at: Optional[datetime] = None
    version: int
    created_at: datetime
    updated_at: datetime
    workout_exercises: List[WorkoutExerciseResponse] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, session: WorkoutSession, include_exercises: bool = True) -> "WorkoutResponse":
        exercises = session.workout_exercises if include_exercises else []
        return cls(
            id=session.id,
            name=session.name,
            description=session.description,
            user_id=session.user_id,
            user_full_name=session.user.full_name if session.user else None,
            status=session.status,
            scheduled_date=session.scheduled_date,
            started_at=session.started_at,
            completed_at=session.completed_at,
            actual_duration_minutes=session.actual_duration_minutes,
            session_notes=session.session_notes,
            is_active=session.is_active,
            deleted_at=session.deleted_at,
            version=session.version,
            created_at=session.created_at,
            updated_at=session.updated_at,
            workout_exercises=[WorkoutExerciseResponse.from_entity(we) for we in exercises],
        )
