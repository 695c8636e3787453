"""Services package for business logic."""

from app.services.exercise_service import ExerciseService, exercise_service
from app.services.set_service import (
    SetService,
    cardio_set_service,
    flexibility_set_service,
    strength_set_service,
)
from app.services.user_service import UserService, user_service
from app.services.workout_service import WorkoutService, workout_service

__all__ = [
    "ExerciseService",
    "exercise_service",
    "SetService",
    "strength_set_service",
    "cardio_set_service",
    "flexibility_set_service",
    "UserService",
    "user_service",
    "WorkoutService",
    "workout_service",
]
