"""Database models for the Workout Planner application."""

from app.models.base import Auditable, Base, SoftDeletable, bind_actor, utcnow
from app.models.user import User, UserRole
from app.models.exercise import DifficultyLevel, Exercise, ExerciseType, TargetMuscleGroup
from app.models.workout_session import WorkoutSession, WorkoutStatus
from app.models.workout_exercise import WorkoutExercise
from app.models.exercise_set import CardioSet, FlexibilitySet, StrengthSet

__all__ = [
    "Base",
    "Auditable",
    "SoftDeletable",
    "bind_actor",
    "utcnow",
    "User",
    "UserRole",
    "Exercise",
    "ExerciseType",
    "TargetMuscleGroup",
    "DifficultyLevel",
    "WorkoutSession",
    "WorkoutStatus",
    "WorkoutExercise",
    "StrengthSet",
    "CardioSet",
    "FlexibilitySet",
]
