"""Join model placing a catalog exercise inside a workout session."""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Auditable, Base, SoftDeletable

if TYPE_CHECKING:
    from app.models.exercise import Exercise
    from app.models.exercise_set import CardioSet, FlexibilitySet, StrengthSet
    from app.models.workout_session import WorkoutSession


def _active_sets(set_class: str) -> str:
    return (
        f"and_(WorkoutExercise.id == {set_class}.workout_exercise_id, "
        f"{set_class}.deleted_at.is_(None))"
    )


class WorkoutExercise(SoftDeletable, Auditable, Base):
    """An exercise performed at a given position in a workout."""

    __tablename__ = "workout_exercises"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    workout_session_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("workout_sessions.id"), index=True
    )
    exercise_id: Mapped[int] = mapped_column(Integer, ForeignKey("exercises.id"), index=True)
    order_in_workout: Mapped[int] = mapped_column(Integer, index=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    # Relationships
    workout_session: Mapped["WorkoutSession"] = relationship("WorkoutSession")
    exercise: Mapped["Exercise"] = relationship("Exercise")
    strength_sets: Mapped[List["StrengthSet"]] = relationship(
        "StrengthSet",
        primaryjoin=_active_sets("StrengthSet"),
        order_by="StrengthSet.set_number",
        viewonly=True,
    )
    cardio_sets: Mapped[List["CardioSet"]] = relationship(
        "CardioSet",
        primaryjoin=_active_sets("CardioSet"),
        order_by="CardioSet.set_number",
        viewonly=True,
    )
    flexibility_sets: Mapped[List["FlexibilitySet"]] = relationship(
        "FlexibilitySet",
        primaryjoin=_active_sets("FlexibilitySet"),
        order_by="FlexibilitySet.set_number",
        viewonly=True,
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return (
            f"<WorkoutExercise(id={self.id}, session={self.workout_session_id}, "
            f"exercise={self.exercise_id}, order={self.order_in_workout})>"
        )
