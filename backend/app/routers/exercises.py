"""Exercises API router for the exercise catalog."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.exercise import DifficultyLevel, ExerciseType, TargetMuscleGroup
from app.schemas.common import PagedResponse
from app.schemas.exercise import ExerciseCreate, ExerciseResponse, ExerciseUpdate
from app.services.auth_service import Principal, require_permissions
from app.services.exercise_service import exercise_service

router = APIRouter(tags=["exercises"])


@router.get("", response_model=PagedResponse[ExerciseResponse])
async def list_exercises(
    page: int = Query(0, ge=0, description="Zero-based page index"),
    size: Optional[int] = Query(None, ge=1, description="Page size"),
    principal: Principal = Depends(require_permissions("read:exercises")),
    db: Session = Depends(get_db),
) -> PagedResponse[ExerciseResponse]:
    """List catalog exercises ordered by name."""
    return exercise_service.list_exercises(db, page, size)


@router.post("", response_model=ExerciseResponse, status_code=status.HTTP_201_CREATED)
async def create_exercise(
    payload: ExerciseCreate,
    principal: Principal = Depends(require_permissions("write:exercises")),
    db: Session = Depends(get_db),
) -> ExerciseResponse:
    """Add an exercise to the catalog."""
    return exercise_service.create_exercise(db, principal, payload)


@router.get("/search", response_model=PagedResponse[ExerciseResponse])
async def search_exercises(
    name: str = Query(..., min_length=1, max_length=100, description="Name fragment"),
    page: int = Query(0, ge=0),
    size: Optional[int] = Query(None, ge=1),
    principal: Principal = Depends(require_permissions("read:exercises")),
    db: Session = Depends(get_db),
) -> PagedResponse[ExerciseResponse]:
    """Search exercises by name (case-insensitive substring)."""
    return exercise_service.search_exercises(db, name, page, size)


@router.get("/filter", response_model=PagedResponse[ExerciseResponse])
async def filter_exercises(
    type: Optional[ExerciseType] = Query(None, description="Exercise type"),
    target_muscle_group: Optional[TargetMuscleGroup] = Query(None, alias="muscle_group"),
    difficulty_level: Optional[DifficultyLevel] = Query(None, alias="difficulty"),
    page: int = Query(0, ge=0),
    size: Optional[int] = Query(None, ge=1),
    principal: Principal = Depends(require_permissions("read:exercises")),
    db: Session = Depends(get_db),
) -> PagedResponse[ExerciseResponse]:
    """
    Filter exercises by type, muscle group and difficulty.

    Every criterion is optional; omitted criteria match all exercises.
    """
    return exercise_service.filter_exercises(
        db, type, target_muscle_group, difficulty_level, page, size
    )


@router.get("/{exercise_id}", response_model=ExerciseResponse)
async def get_exercise(
    exercise_id: int,
    principal: Principal = Depends(require_permissions("read:exercises")),
    db: Session = Depends(get_db),
) -> ExerciseResponse:
    """Get an exercise by ID."""
    return exercise_service.get_exercise(db, exercise_id)


@router.put("/{exercise_id}", response_model=ExerciseResponse)
async def update_exercise(
    exercise_id: int,
    payload: ExerciseUpdate,
    principal: Principal = Depends(require_permissions("write:exercises")),
    db: Session = Depends(get_db),
) -> ExerciseResponse:
    """Update an exercise; ``version`` must match the stored version."""
    return exercise_service.update_exercise(db, principal, exercise_id, payload)


@router.delete("/{exercise_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_exercise(
    exercise_id: int,
    principal: Principal = Depends(require_permissions("delete:exercises")),
    db: Session = Depends(get_db),
) -> None:
    """Soft-delete an exercise. Workouts that used it keep their history."""
    exercise_service.delete_exercise(db, principal, exercise_id)


@router.post("/{exercise_id}/restore", response_model=ExerciseResponse)
async def restore_exercise(
    exercise_id: int,
    principal: Principal = Depends(require_permissions("delete:exercises")),
    db: Session = Depends(get_db),
) -> ExerciseResponse:
    """Restore a soft-deleted exercise."""
    return exercise_service.restore_exercise(db, principal, exercise_id)
