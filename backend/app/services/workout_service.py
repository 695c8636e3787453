"""
Workout session service.

Owns the workout lifecycle. Status only changes through :meth:`perform_action`,
which walks the state machine below; every other update is a version-checked
partial edit of the session's descriptive fields.

    PLANNED --start--> IN_PROGRESS --pause--> PAUSED
                           ^                    |
                           +------resume--------+
    IN_PROGRESS or PAUSED --complete--> COMPLETED
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.exceptions import BusinessLogicError, InvalidArgumentError, ResourceNotFoundError
from app.models.base import bind_actor, utcnow
from app.models.exercise import Exercise
from app.models.user import User
from app.models.workout_exercise import WorkoutExercise
from app.models.workout_session import WorkoutSession, WorkoutStatus
from app.schemas.common import PagedResponse
from app.schemas.workout import (
    WorkoutActionRequest,
    WorkoutCreate,
    WorkoutExerciseCreate,
    WorkoutExerciseResponse,
    WorkoutExerciseUpdate,
    WorkoutResponse,
    WorkoutUpdate,
)
from app.services.access_service import access_service
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
from app.validation import (
    ensure_valid,
    to_naive_utc,
    validate_update_payload,
    validate_workout_dates,
)

logger = logging.getLogger(__name__)

RESOURCE = "Workout session"
EXERCISE_RESOURCE = "Workout exercise"

# action -> (allowed source statuses, target status)
TRANSITIONS: Dict[str, Tuple[Tuple[WorkoutStatus, ...], WorkoutStatus]] = {
    "start": ((WorkoutStatus.PLANNED,), WorkoutStatus.IN_PROGRESS),
    "pause": ((WorkoutStatus.IN_PROGRESS,), WorkoutStatus.PAUSED),
    "resume": ((WorkoutStatus.PAUSED,), WorkoutStatus.IN_PROGRESS),
    "complete": ((WorkoutStatus.IN_PROGRESS, WorkoutStatus.PAUSED), WorkoutStatus.COMPLETED),
}


def next_status(current: WorkoutStatus, action: str) -> WorkoutStatus:
    """
    Resolve the status an action leads to from ``current``.

    Raises:
        InvalidArgumentError: If the action is not one of the known actions
        BusinessLogicError: If the action is not allowed from ``current``
    """
    key = (action or "").strip().lower()
    if key not in TRANSITIONS:
        raise InvalidArgumentError(
            f"Invalid action: {action}. Valid actions are: {', '.join(TRANSITIONS)}"
        )
    sources, target = TRANSITIONS[key]
    if current not in sources:
        allowed = " or ".join(s.value for s in sources)
        raise BusinessLogicError(
            f"Cannot {key} workout in {current.value} status. "
            f"Workout must be {allowed} to {key}."
        )
    return target


def apply_status_timestamps(
    workout: WorkoutSession, status: WorkoutStatus, now: Optional[datetime] = None
) -> None:
    """Stamp lifecycle timestamps for a session entering ``status``."""
    now = now or utcnow()
    if status == WorkoutStatus.IN_PROGRESS:
        if workout.started_at is None:
            workout.started_at = now
    elif status == WorkoutStatus.COMPLETED:
        # completion is only stamped for a session that was started
        if workout.started_at is None:
            return
        if workout.completed_at is None:
            workout.completed_at = now
        if workout.actual_duration_minutes is None:
            elapsed = workout.completed_at - workout.started_at
            workout.actual_duration_minutes = max(int(elapsed.total_seconds() // 60), 0)


class WorkoutService:
    """Workout sessions, their lifecycle and the exercises they contain."""

    # ============== Sessions ==============

    def create_workout(
        self, db: Session, principal: Principal, payload: WorkoutCreate
    ) -> WorkoutResponse:
        logger.debug(f"Creating workout '{payload.name}' for user {principal.user_id}")
        ensure_valid(validate_workout_dates(payload.started_at, payload.completed_at))

        data = payload.model_dump()
        data["started_at"] = to_naive_utc(data["started_at"])
        data["completed_at"] = to_naive_utc(data["completed_at"])
        workout = WorkoutSession(user_id=principal.user_id, **data)
        apply_status_timestamps(workout, workout.status)

        bind_actor(db, principal.user_id)
        db.add(workout)
        commit(db, RESOURCE)
        db.refresh(workout)

        logger.info(
            f"Created workout {workout.id} ('{workout.name}', {workout.status.value}) "
            f"for user {principal.user_id}"
        )
        return WorkoutResponse.from_entity(workout)

    def get_workout(
        self, db: Session, principal: Principal, workout_id: int, include_deleted: bool = False
    ) -> WorkoutResponse:
        """Fetch a session; ``include_deleted`` also finds soft-deleted ones."""
        if include_deleted:
            workout = find_including_deleted(db, WorkoutSession, workout_id, RESOURCE)
        else:
            workout = find_active(db, WorkoutSession, workout_id, RESOURCE)
        access_service.require_workout_access(principal, workout)
        return WorkoutResponse.from_entity(workout)

    def list_my_workouts(
        self, db: Session, principal: Principal, page: int = 0, size: Optional[int] = None
    ) -> PagedResponse[WorkoutResponse]:
        return self._page_for_user(db, principal.user_id, page, size)

    def list_user_workouts(
        self,
        db: Session,
        principal: Principal,
        user_id: int,
        page: int = 0,
        size: Optional[int] = None,
    ) -> PagedResponse[WorkoutResponse]:
        access_service.require_user_access(principal, user_id)
        find_active(db, User, user_id, "User")
        return self._page_for_user(db, user_id, page, size)

    def list_all_workouts(
        self, db: Session, principal: Principal, page: int = 0, size: Optional[int] = None
    ) -> PagedResponse[WorkoutResponse]:
        access_service.require_admin(principal)
        return self._page(db.query(WorkoutSession), page, size)

    def update_workout(
        self, db: Session, principal: Principal, workout_id: int, payload: WorkoutUpdate
    ) -> WorkoutResponse:
        ensure_valid(validate_update_payload(payload))
        workout = find_active(db, WorkoutSession, workout_id, RESOURCE)
        access_service.require_workout_access(principal, workout)
        check_version(workout, payload.version, RESOURCE)

        changes = {
            field: value
            for field, value in payload.model_dump(exclude_unset=True, exclude={"version"}).items()
            if value is not None
        }
        started_at = to_naive_utc(changes.get("started_at", workout.started_at))
        completed_at = to_naive_utc(changes.get("completed_at", workout.completed_at))
        ensure_valid(validate_workout_dates(started_at, completed_at))

        for field, value in changes.items():
            setattr(workout, field, value)
        workout.started_at = started_at
        workout.completed_at = completed_at

        bind_actor(db, principal.user_id)
        commit(db, RESOURCE)
        db.refresh(workout)
        logger.info(f"Updated workout {workout.id}")
        return WorkoutResponse.from_entity(workout)

    def perform_action(
        self, db: Session, principal: Principal, workout_id: int, request: WorkoutActionRequest
    ) -> WorkoutResponse:
        """Apply a lifecycle action (start, pause, resume, complete)."""
        workout = find_active(db, WorkoutSession, workout_id, RESOURCE)
        access_service.require_workout_access(principal, workout)
        check_version(workout, request.version, RESOURCE)

        old_status = workout.status
        try:
            new_status = next_status(old_status, request.action)
        except BusinessLogicError:
            logger.warning(
                f"Rejected action '{request.action}' on workout {workout.id} in {old_status.value}"
            )
            raise

        workout.status = new_status
        apply_status_timestamps(workout, new_status)

        bind_actor(db, principal.user_id)
        commit(db, RESOURCE)
        db.refresh(workout)
        logger.info(
            f"Workout {workout.id} status changed {old_status.value} -> {new_status.value}"
        )
        return WorkoutResponse.from_entity(workout)

    def delete_workout(self, db: Session, principal: Principal, workout_id: int) -> None:
        workout = find_active(db, WorkoutSession, workout_id, RESOURCE)
        access_service.require_workout_access(principal, workout)
        workout.soft_delete()
        bind_actor(db, principal.user_id)
        commit(db, RESOURCE)
        logger.info(f"Soft-deleted workout {workout_id} of user {workout.user_id}")

    def restore_workout(
        self, db: Session, principal: Principal, workout_id: int
    ) -> WorkoutResponse:
        workout = find_including_deleted(db, WorkoutSession, workout_id, RESOURCE)
        access_service.require_workout_access(principal, workout)
        ensure_deleted(workout, RESOURCE)
        workout.restore()
        bind_actor(db, principal.user_id)
        commit(db, RESOURCE)
        db.refresh(workout)
        logger.info(f"Restored workout {workout.id}")
        return WorkoutResponse.from_entity(workout)

    # ============== Workout exercises ==============

    def add_exercise(
        self, db: Session, principal: Principal, workout_id: int, payload: WorkoutExerciseCreate
    ) -> WorkoutExerciseResponse:
        workout = find_active(db, WorkoutSession, workout_id, RESOURCE)
        access_service.require_workout_access(principal, workout)
        exercise = find_active(db, Exercise, payload.exercise_id, "Exercise")

        workout_exercise = WorkoutExercise(
            workout_session=workout,
            exercise=exercise,
            order_in_workout=payload.order_in_workout,
            notes=payload.notes,
        )
        bind_actor(db, principal.user_id)
        db.add(workout_exercise)
        commit(db, EXERCISE_RESOURCE)
        db.refresh(workout_exercise)
        logger.info(
            f"Added exercise {exercise.id} to workout {workout.id} "
            f"at position {workout_exercise.order_in_workout}"
        )
        return WorkoutExerciseResponse.from_entity(workout_exercise)

    def list_exercises(
        self, db: Session, principal: Principal, workout_id: int
    ) -> List[WorkoutExerciseResponse]:
        workout = find_active(db, WorkoutSession, workout_id, RESOURCE)
        access_service.require_workout_access(principal, workout)
        return [WorkoutExerciseResponse.from_entity(we) for we in workout.workout_exercises]

    def update_workout_exercise(
        self,
        db: Session,
        principal: Principal,
        workout_exercise_id: int,
        payload: WorkoutExerciseUpdate,
    ) -> WorkoutExerciseResponse:
        ensure_valid(validate_update_payload(payload))
        workout_exercise = self.get_accessible_workout_exercise(db, principal, workout_exercise_id)
        check_version(workout_exercise, payload.version, EXERCISE_RESOURCE)

        for field, value in payload.model_dump(exclude_unset=True, exclude={"version"}).items():
            if value is not None:
                setattr(workout_exercise, field, value)

        bind_actor(db, principal.user_id)
        commit(db, EXERCISE_RESOURCE)
        db.refresh(workout_exercise)
        logger.info(f"Updated workout exercise {workout_exercise.id}")
        return WorkoutExerciseResponse.from_entity(workout_exercise)

    def remove_workout_exercise(
        self, db: Session, principal: Principal, workout_exercise_id: int
    ) -> None:
        workout_exercise = self.get_accessible_workout_exercise(db, principal, workout_exercise_id)
        workout_exercise.soft_delete()
        bind_actor(db, principal.user_id)
        commit(db, EXERCISE_RESOURCE)
        logger.info(f"Removed workout exercise {workout_exercise_id}")

    def get_accessible_workout_exercise(
        self, db: Session, principal: Principal, workout_exercise_id: int
    ) -> WorkoutExercise:
        """Load an active workout exercise whose session the principal may touch."""
        workout_exercise = find_active(db, WorkoutExercise, workout_exercise_id, EXERCISE_RESOURCE)
        workout = workout_exercise.workout_session
        if not workout.is_active:
            raise ResourceNotFoundError(RESOURCE, "id", workout.id)
        access_service.require_workout_access(principal, workout)
        return workout_exercise

    # ============== Helpers ==============

    def _page_for_user(
        self, db: Session, user_id: int, page: int, size: Optional[int]
    ) -> PagedResponse[WorkoutResponse]:
        return self._page(
            db.query(WorkoutSession).filter(WorkoutSession.user_id == user_id), page, size
        )

    def _page(self, query, page: int, size: Optional[int]) -> PagedResponse[WorkoutResponse]:
        page, size = normalize_paging(page, size)
        query = query.order_by(
            WorkoutSession.scheduled_date.desc(),
            WorkoutSession.created_at.desc(),
            WorkoutSession.id.desc(),
        )
        workouts, total = paginate(query, page, size)
        return PagedResponse[WorkoutResponse].build(
            [WorkoutResponse.from_entity(w) for w in workouts], page, size, total
        )


workout_service = WorkoutService()
