"""
Set service shared by the strength, cardio and flexibility set kinds.

One :class:`SetService` instance exists per kind; it knows the model, the
response schema and the exercise type a set of that kind may be recorded
against.
"""

import logging
from typing import Generic, List, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.exceptions import BusinessLogicError, ResourceNotFoundError
from app.models.base import bind_actor
from app.models.exercise_set import CardioSet, FlexibilitySet, StrengthSet
from app.models.workout_exercise import WorkoutExercise
from app.schemas.sets import CardioSetResponse, FlexibilitySetResponse, StrengthSetResponse
from app.services.auth_service import Principal
from app.services.persistence import (
    check_version,
    commit,
    ensure_deleted,
    find_active,
    find_including_deleted,
)
from app.services.workout_service import workout_service
from app.validation import ensure_valid, validate_update_payload

logger = logging.getLogger(__name__)

S = TypeVar("S", StrengthSet, CardioSet, FlexibilitySet)
R = TypeVar("R", bound=BaseModel)


class SetService(Generic[S, R]):
    """CRUD for one set kind, always scoped to a workout exercise."""

    def __init__(self, model: Type[S], response_schema: Type[R], resource: str):
        self.model = model
        self.response_schema = response_schema
        self.resource = resource

    def create_set(
        self, db: Session, principal: Principal, workout_exercise_id: int, payload: BaseModel
    ) -> R:
        workout_exercise = workout_service.get_accessible_workout_exercise(
            db, principal, workout_exercise_id
        )
        self._ensure_type_matches(workout_exercise)

        exercise_set = self.model(workout_exercise=workout_exercise, **payload.model_dump())
        bind_actor(db, principal.user_id)
        db.add(exercise_set)
        commit(db, self.resource)
        db.refresh(exercise_set)
        logger.info(
            f"Recorded {self.resource.lower()} {exercise_set.id} "
            f"(set {exercise_set.set_number}) on workout exercise {workout_exercise.id}"
        )
        return self.response_schema.model_validate(exercise_set)

    def list_sets(self, db: Session, principal: Principal, workout_exercise_id: int) -> List[R]:
        workout_service.get_accessible_workout_exercise(db, principal, workout_exercise_id)
        sets = (
            db.query(self.model)
            .filter(self.model.workout_exercise_id == workout_exercise_id)
            .order_by(self.model.set_number, self.model.id)
            .all()
        )
        return [self.response_schema.model_validate(s) for s in sets]

    def get_set(
        self, db: Session, principal: Principal, workout_exercise_id: int, set_id: int
    ) -> R:
        exercise_set = self._load(db, principal, workout_exercise_id, set_id)
        return self.response_schema.model_validate(exercise_set)

    def update_set(
        self,
        db: Session,
        principal: Principal,
        workout_exercise_id: int,
        set_id: int,
        payload: BaseModel,
    ) -> R:
        ensure_valid(validate_update_payload(payload))
        exercise_set = self._load(db, principal, workout_exercise_id, set_id)
        check_version(exercise_set, payload.version, self.resource)

        for field, value in payload.model_dump(exclude_unset=True, exclude={"version"}).items():
            if value is not None:
                setattr(exercise_set, field, value)

        bind_actor(db, principal.user_id)
        commit(db, self.resource)
        db.refresh(exercise_set)
        logger.info(f"Updated {self.resource.lower()} {exercise_set.id}")
        return self.response_schema.model_validate(exercise_set)

    def delete_set(
        self, db: Session, principal: Principal, workout_exercise_id: int, set_id: int
    ) -> None:
        exercise_set = self._load(db, principal, workout_exercise_id, set_id)
        exercise_set.soft_delete()
        bind_actor(db, principal.user_id)
        commit(db, self.resource)
        logger.info(f"Soft-deleted {self.resource.lower()} {set_id}")

    def restore_set(
        self, db: Session, principal: Principal, workout_exercise_id: int, set_id: int
    ) -> R:
        workout_service.get_accessible_workout_exercise(db, principal, workout_exercise_id)
        exercise_set = find_including_deleted(db, self.model, set_id, self.resource)
        if exercise_set.workout_exercise_id != workout_exercise_id:
            raise ResourceNotFoundError(self.resource, "id", set_id)
        ensure_deleted(exercise_set, self.resource)

        exercise_set.restore()
        bind_actor(db, principal.user_id)
        commit(db, self.resource)
        db.refresh(exercise_set)
        logger.info(f"Restored {self.resource.lower()} {exercise_set.id}")
        return self.response_schema.model_validate(exercise_set)

    def _load(self, db: Session, principal: Principal, workout_exercise_id: int, set_id: int) -> S:
        workout_service.get_accessible_workout_exercise(db, principal, workout_exercise_id)
        exercise_set = find_active(db, self.model, set_id, self.resource)
        # Sets are addressed through their parent; a set of another parent is not found.
        if exercise_set.workout_exercise_id != workout_exercise_id:
            raise ResourceNotFoundError(self.resource, "id", set_id)
        return exercise_set

    def _ensure_type_matches(self, workout_exercise: WorkoutExercise) -> None:
        expected = self.model.exercise_type
        actual = workout_exercise.exercise.type
        if actual != expected:
            logger.warning(
                f"Rejected {expected.value} set for {actual.value} workout exercise "
                f"{workout_exercise.id}"
            )
            raise BusinessLogicError(
                f"Cannot add {expected.value} set to {actual.value} exercise "
                f"'{workout_exercise.exercise.name}'"
            )


strength_set_service: SetService[StrengthSet, StrengthSetResponse] = SetService(
    StrengthSet, StrengthSetResponse, "Strength set"
)
cardio_set_service: SetService[CardioSet, CardioSetResponse] = SetService(
    CardioSet, CardioSetResponse, "Cardio set"
)
flexibility_set_service: SetService[FlexibilitySet, FlexibilitySetResponse] = SetService(
    FlexibilitySet, FlexibilitySetResponse, "Flexibility set"
)
