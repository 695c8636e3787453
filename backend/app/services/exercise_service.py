"""Exercise catalog management."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.models.base import bind_actor
from app.models.exercise import DifficultyLevel, Exercise, ExerciseType, TargetMuscleGroup
from app.schemas.common import PagedResponse
from app.schemas.exercise import ExerciseCreate, ExerciseResponse, ExerciseUpdate
from app.services.auth_service import Principal
from app.services.persistence import (
    check_version,
    commit,
    ensure_deleted,
    find_active,
    find_including_deleted,
    normalize_paging,
    paginate,
)
from app.validation import ensure_valid, sanitize_like_wildcards, validate_update_payload

logger = logging.getLogger(__name__)

RESOURCE = "Exercise"


class ExerciseService:
    """Create, browse and maintain catalog exercises."""

    def create_exercise(
        self, db: Session, principal: Principal, payload: ExerciseCreate
    ) -> ExerciseResponse:
        exercise = Exercise(**payload.model_dump())
        bind_actor(db, principal.user_id)
        db.add(exercise)
        commit(db, RESOURCE)
        db.refresh(exercise)
        logger.info(f"Created exercise {exercise.id} ({exercise.name}, {exercise.type.value})")
        return ExerciseResponse.model_validate(exercise)

    def get_exercise(self, db: Session, exercise_id: int) -> ExerciseResponse:
        return ExerciseResponse.model_validate(find_active(db, Exercise, exercise_id, RESOURCE))

    def list_exercises(
        self, db: Session, page: int = 0, size: Optional[int] = None
    ) -> PagedResponse[ExerciseResponse]:
        return self._page(db.query(Exercise).order_by(Exercise.name, Exercise.id), page, size)

    def search_exercises(
        self, db: Session, name: str, page: int = 0, size: Optional[int] = None
    ) -> PagedResponse[ExerciseResponse]:
        """Case-insensitive substring match on the exercise name."""
        pattern = f"%{sanitize_like_wildcards(name)}%"
        query = (
            db.query(Exercise)
            .filter(Exercise.name.ilike(pattern, escape="\\"))
            .order_by(Exercise.name, Exercise.id)
        )
        return self._page(query, page, size)

    def filter_exercises(
        self,
        db: Session,
        type: Optional[ExerciseType] = None,
        target_muscle_group: Optional[TargetMuscleGroup] = None,
        difficulty_level: Optional[DifficultyLevel] = None,
        page: int = 0,
        size: Optional[int] = None,
    ) -> PagedResponse[ExerciseResponse]:
        """Filter on any combination of criteria; an absent criterion matches all."""
        query = db.query(Exercise)
        if type is not None:
            query = query.filter(Exercise.type == type)
        if target_muscle_group is not None:
            query = query.filter(Exercise.target_muscle_group == target_muscle_group)
        if difficulty_level is not None:
            query = query.filter(Exercise.difficulty_level == difficulty_level)
        return self._page(query.order_by(Exercise.name, Exercise.id), page, size)

    def update_exercise(
        self, db: Session, principal: Principal, exercise_id: int, payload: ExerciseUpdate
    ) -> ExerciseResponse:
        ensure_valid(validate_update_payload(payload))
        exercise = find_active(db, Exercise, exercise_id, RESOURCE)
        check_version(exercise, payload.version, RESOURCE)

        for field, value in payload.model_dump(exclude_unset=True, exclude={"version"}).items():
            if value is not None:
                setattr(exercise, field, value)

        bind_actor(db, principal.user_id)
        commit(db, RESOURCE)
        db.refresh(exercise)
        logger.info(f"Updated exercise {exercise.id}")
        return ExerciseResponse.model_validate(exercise)

    def delete_exercise(self, db: Session, principal: Principal, exercise_id: int) -> None:
        exercise = find_active(db, Exercise, exercise_id, RESOURCE)
        exercise.soft_delete()
        bind_actor(db, principal.user_id)
        commit(db, RESOURCE)
        logger.info(f"Soft-deleted exercise {exercise_id}")

    def restore_exercise(
        self, db: Session, principal: Principal, exercise_id: int
    ) -> ExerciseResponse:
        exercise = find_including_deleted(db, Exercise, exercise_id, RESOURCE)
        ensure_deleted(exercise, RESOURCE)
        exercise.restore()
        bind_actor(db, principal.user_id)
        commit(db, RESOURCE)
        db.refresh(exercise)
        logger.info(f"Restored exercise {exercise.id}")
        return ExerciseResponse.model_validate(exercise)

    def _page(self, query, page: int, size: Optional[int]) -> PagedResponse[ExerciseResponse]:
        page, size = normalize_paging(page, size)
        exercises, total = paginate(query, page, size)
        return PagedResponse[ExerciseResponse].build(
            [ExerciseResponse.model_validate(e) for e in exercises], page, size, total
        )


exercise_service = ExerciseService()
