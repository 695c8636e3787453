"""Typed set models recorded against a workout exercise."""

from decimal import Decimal
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column, relationship

from app.models.base import Auditable, Base, SoftDeletable
from app.models.exercise import ExerciseType

if TYPE_CHECKING:
    from app.models.workout_exercise import WorkoutExercise


class SetColumns:
    """Columns shared by every set type."""

    # Exercise type a set of this kind may be attached to
    exercise_type: ClassVar[ExerciseType]

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    set_number: Mapped[int] = mapped_column(Integer, index=True)
    rest_time_seconds: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    completed: Mapped[bool] = mapped_column(Boolean, default=False)

    @declared_attr
    def workout_exercise_id(cls) -> Mapped[int]:
        return mapped_column(Integer, ForeignKey("workout_exercises.id"), index=True)

    @declared_attr
    def workout_exercise(cls) -> Mapped["WorkoutExercise"]:
        return relationship("WorkoutExercise")

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__}(id={self.id}, "
            f"workout_exercise={self.workout_exercise_id}, set_number={self.set_number})>"
        )


class StrengthSet(SetColumns, SoftDeletable, Auditable, Base):
    """Strength set with reps and weight."""

    __tablename__ = "strength_sets"
    exercise_type = ExerciseType.STRENGTH

    reps: Mapped[int] = mapped_column(Integer)
    weight: Mapped[Optional[Decimal]] = mapped_column(Numeric(6, 2), nullable=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}


class CardioSet(SetColumns, SoftDeletable, Auditable, Base):
    """Cardio set with duration and distance."""

    __tablename__ = "cardio_sets"
    exercise_type = ExerciseType.CARDIO

    duration_seconds: Mapped[int] = mapped_column(Integer)
    distance: Mapped[Optional[Decimal]] = mapped_column(Numeric(8, 2), nullable=True)
    distance_unit: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}


class FlexibilitySet(SetColumns, SoftDeletable, Auditable, Base):
    """Flexibility set with stretch type and intensity on a 1-10 scale."""

    __tablename__ = "flexibility_sets"
    exercise_type = ExerciseType.FLEXIBILITY

    duration_seconds: Mapped[int] = mapped_column(Integer)
    stretch_type: Mapped[str] = mapped_column(String(50))
    intensity: Mapped[int] = mapped_column(Integer)

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}
