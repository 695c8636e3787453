"""Sets API router: strength, cardio and flexibility sets of a workout exercise."""

from typing import List, Type

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.sets import (
    CardioSetCreate,
    CardioSetResponse,
    CardioSetUpdate,
    FlexibilitySetCreate,
    FlexibilitySetResponse,
    FlexibilitySetUpdate,
    StrengthSetCreate,
    StrengthSetResponse,
    StrengthSetUpdate,
)
from app.services.auth_service import Principal, require_permissions
from app.services.set_service import (
    SetService,
    cardio_set_service,
    flexibility_set_service,
    strength_set_service,
)

router = APIRouter(tags=["sets"])


def _register_set_routes(
    kind: str,
    service: SetService,
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    response_schema: Type[BaseModel],
) -> None:
    """Register the CRUD routes of one set kind under ``/{id}/{kind}-sets``."""
    base = "/{workout_exercise_id}/" + kind + "-sets"

    @router.get(base, response_model=List[response_schema], name=f"list_{kind}_sets")
    async def list_sets(
        workout_exercise_id: int,
        principal: Principal = Depends(require_permissions("read:workouts")),
        db: Session = Depends(get_db),
    ):
        return service.list_sets(db, principal, workout_exercise_id)

    @router.post(
        base,
        response_model=response_schema,
        status_code=status.HTTP_201_CREATED,
        name=f"create_{kind}_set",
    )
    async def create_set(
        workout_exercise_id: int,
        payload: create_schema,
        principal: Principal = Depends(require_permissions("write:workouts")),
        db: Session = Depends(get_db),
    ):
        return service.create_set(db, principal, workout_exercise_id, payload)

    @router.get(base + "/{set_id}", response_model=response_schema, name=f"get_{kind}_set")
    async def get_set(
        workout_exercise_id: int,
        set_id: int,
        principal: Principal = Depends(require_permissions("read:workouts")),
        db: Session = Depends(get_db),
    ):
        return service.get_set(db, principal, workout_exercise_id, set_id)

    @router.put(base + "/{set_id}", response_model=response_schema, name=f"update_{kind}_set")
    async def update_set(
        workout_exercise_id: int,
        set_id: int,
        payload: update_schema,
        principal: Principal = Depends(require_permissions("write:workouts")),
        db: Session = Depends(get_db),
    ):
        return service.update_set(db, principal, workout_exercise_id, set_id, payload)

    @router.delete(
        base + "/{set_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        name=f"delete_{kind}_set",
    )
    async def delete_set(
        workout_exercise_id: int,
        set_id: int,
        principal: Principal = Depends(require_permissions("write:workouts")),
        db: Session = Depends(get_db),
    ) -> None:
        service.delete_set(db, principal, workout_exercise_id, set_id)

    @router.post(
        base + "/{set_id}/restore",
        response_model=response_schema,
        name=f"restore_{kind}_set",
    )
    async def restore_set(
        workout_exercise_id: int,
        set_id: int,
        principal: Principal = Depends(require_permissions("write:workouts")),
        db: Session = Depends(get_db),
    ):
        return service.restore_set(db, principal, workout_exercise_id, set_id)


_register_set_routes(
    "strength", strength_set_service, StrengthSetCreate, StrengthSetUpdate, StrengthSetResponse
)
_register_set_routes(
    "cardio", cardio_set_service, CardioSetCreate, CardioSetUpdate, CardioSetResponse
)
_register_set_routes(
    "flexibility",
    flexibility_set_service,
    FlexibilitySetCreate,
    FlexibilitySetUpdate,
    FlexibilitySetResponse,
)
