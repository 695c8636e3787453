"""Workouts API router for workout sessions, their lifecycle and exercises."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
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
from app.services.auth_service import Principal, require_permissions
from app.services.workout_service import workout_service

router = APIRouter(tags=["workouts"])


@router.get("", response_model=PagedResponse[WorkoutResponse])
async def list_all_workouts(
    page: int = Query(0, ge=0, description="Zero-based page index"),
    size: Optional[int] = Query(None, ge=1, description="Page size"),
    principal: Principal = Depends(require_permissions("read:workouts")),
    db: Session = Depends(get_db),
) -> PagedResponse[WorkoutResponse]:
    """List every active workout session (admins only)."""
    return workout_service.list_all_workouts(db, principal, page, size)


@router.post("", response_model=WorkoutResponse, status_code=status.HTTP_201_CREATED)
async def create_workout(
    payload: WorkoutCreate,
    principal: Principal = Depends(require_permissions("write:workouts")),
    db: Session = Depends(get_db),
) -> WorkoutResponse:
    """
    Create a workout session owned by the authenticated user.

    Raises:
        400 if started_at is in the future or completed_at is before started_at
    """
    return workout_service.create_workout(db, principal, payload)


@router.get("/my", response_model=PagedResponse[WorkoutResponse])
async def list_my_workouts(
    page: int = Query(0, ge=0),
    size: Optional[int] = Query(None, ge=1),
    principal: Principal = Depends(require_permissions("read:workouts")),
    db: Session = Depends(get_db),
) -> PagedResponse[WorkoutResponse]:
    """List the authenticated user's active workout sessions."""
    return workout_service.list_my_workouts(db, principal, page, size)


@router.get("/user/{user_id}", response_model=PagedResponse[WorkoutResponse])
async def list_user_workouts(
    user_id: int,
    page: int = Query(0, ge=0),
    size: Optional[int] = Query(None, ge=1),
    principal: Principal = Depends(require_permissions("read:workouts")),
    db: Session = Depends(get_db),
) -> PagedResponse[WorkoutResponse]:
    """List a user's workout sessions (the user themself or an admin)."""
    return workout_service.list_user_workouts(db, principal, user_id, page, size)


@router.put("/exercises/{workout_exercise_id}", response_model=WorkoutExerciseResponse)
async def update_workout_exercise(
    workout_exercise_id: int,
    payload: WorkoutExerciseUpdate,
    principal: Principal = Depends(require_permissions("write:workouts")),
    db: Session = Depends(get_db),
) -> WorkoutExerciseResponse:
    """Update the position or notes of an exercise within a workout."""
    return workout_service.update_workout_exercise(db, principal, workout_exercise_id, payload)


@router.delete("/exercises/{workout_exercise_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_workout_exercise(
    workout_exercise_id: int,
    principal: Principal = Depends(require_permissions("write:workouts")),
    db: Session = Depends(get_db),
) -> None:
    """Remove (soft-delete) an exercise from its workout."""
    workout_service.remove_workout_exercise(db, principal, workout_exercise_id)


@router.get("/{workout_id}", response_model=WorkoutResponse)
async def get_workout(
    workout_id: int,
    include_deleted: bool = Query(False, description="Also find soft-deleted sessions"),
    principal: Principal = Depends(require_permissions("read:workouts")),
    db: Session = Depends(get_db),
) -> WorkoutResponse:
    """
    Get workout details by ID.

    Args:
        workout_id: Unique identifier of the workout
        include_deleted: Whether a soft-deleted session may be returned

    Raises:
        404 if the workout does not exist (or is deleted and not requested)
        403 if the caller neither owns the workout nor is an admin
    """
    return workout_service.get_workout(db, principal, workout_id, include_deleted)


@router.put("/{workout_id}", response_model=WorkoutResponse)
async def update_workout(
    workout_id: int,
    payload: WorkoutUpdate,
    principal: Principal = Depends(require_permissions("write:workouts")),
    db: Session = Depends(get_db),
) -> WorkoutResponse:
    """Update workout details. Status changes go through the actions endpoint."""
    return workout_service.update_workout(db, principal, workout_id, payload)


@router.delete("/{workout_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_workout(
    workout_id: int,
    principal: Principal = Depends(require_permissions("delete:workouts")),
    db: Session = Depends(get_db),
) -> None:
    """Soft-delete a workout session."""
    workout_service.delete_workout(db, principal, workout_id)


@router.post("/{workout_id}/restore", response_model=WorkoutResponse)
async def restore_workout(
    workout_id: int,
    principal: Principal = Depends(require_permissions("delete:workouts")),
    db: Session = Depends(get_db),
) -> WorkoutResponse:
    """Restore a soft-deleted workout session."""
    return workout_service.restore_workout(db, principal, workout_id)


@router.post("/{workout_id}/actions", response_model=WorkoutResponse)
async def perform_workout_action(
    workout_id: int,
    request: WorkoutActionRequest,
    principal: Principal = Depends(require_permissions("write:workouts")),
    db: Session = Depends(get_db),
) -> WorkoutResponse:
    """
    Move a workout through its lifecycle.

    Actions:
    - **start**: PLANNED to IN_PROGRESS
    - **pause**: IN_PROGRESS to PAUSED
    - **resume**: PAUSED to IN_PROGRESS
    - **complete**: IN_PROGRESS or PAUSED to COMPLETED
    """
    return workout_service.perform_action(db, principal, workout_id, request)


@router.get("/{workout_id}/exercises", response_model=List[WorkoutExerciseResponse])
async def list_workout_exercises(
    workout_id: int,
    principal: Principal = Depends(require_permissions("read:workouts")),
    db: Session = Depends(get_db),
) -> List[WorkoutExerciseResponse]:
    """List the exercises of a workout in order."""
    return workout_service.list_exercises(db, principal, workout_id)


@router.post(
    "/{workout_id}/exercises",
    response_model=WorkoutExerciseResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_workout_exercise(
    workout_id: int,
    payload: WorkoutExerciseCreate,
    principal: Principal = Depends(require_permissions("write:workouts")),
    db: Session = Depends(get_db),
) -> WorkoutExerciseResponse:
    """Add a catalog exercise to a workout."""
    return workout_service.add_exercise(db, principal, workout_id, payload)
