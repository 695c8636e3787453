"""Exercise catalog model."""

from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Auditable, Base, SoftDeletable


class ExerciseType(str, PyEnum):
    """Exercise categories. Each one has its own set measurement type."""
    STRENGTH = "STRENGTH"
    CARDIO = "CARDIO"
    FLEXIBILITY = "FLEXIBILITY"


class TargetMuscleGroup(str, PyEnum):
    """Primary muscle group worked by an exercise."""
    CHEST = "CHEST"
    BACK = "BACK"
    LEGS = "LEGS"
    ARMS = "ARMS"
    SHOULDERS = "SHOULDERS"
    CORE = "CORE"
    GLUTES = "GLUTES"
    CALVES = "CALVES"
    BICEPS = "BICEPS"
    TRICEPS = "TRICEPS"
    FOREARMS = "FOREARMS"
    HAMSTRINGS = "HAMSTRINGS"
    QUADRICEPS = "QUADRICEPS"
    FULL_BODY = "FULL_BODY"


class DifficultyLevel(str, PyEnum):
    """Exercise difficulty."""
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"


class Exercise(SoftDeletable, Auditable, Base):
    """Catalog entry referenced by workout exercises."""

    __tablename__ = "exercises"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    type: Mapped[ExerciseType] = mapped_column(Enum(ExerciseType), index=True)
    target_muscle_group: Mapped[TargetMuscleGroup] = mapped_column(
        Enum(TargetMuscleGroup), index=True
    )
    difficulty_level: Mapped[DifficultyLevel] = mapped_column(Enum(DifficultyLevel), index=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<Exercise(id={self.id}, name='{self.name}', type={self.type})>"
