"""Users API router for account management and availability checks."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.common import ExistenceCheckResponse, PagedResponse
from app.schemas.user import UserCreate, UserResponse, UserUpdate
from app.services.auth_service import Principal, get_current_principal, require_permissions
from app.services.user_service import user_service

router = APIRouter(tags=["users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    principal: Principal = Depends(require_permissions("write:users")),
    db: Session = Depends(get_db),
) -> UserResponse:
    """
    Create a user account.

    Raises:
        409 if the username, email or identity subject is already taken
    """
    return user_service.create_user(db, principal, payload)


@router.get("", response_model=PagedResponse[UserResponse])
async def list_users(
    page: int = Query(0, ge=0, description="Zero-based page index"),
    size: Optional[int] = Query(None, ge=1, description="Page size"),
    principal: Principal = Depends(require_permissions("read:users")),
    db: Session = Depends(get_db),
) -> PagedResponse[UserResponse]:
    """List active users, one page at a time."""
    return user_service.list_users(db, principal, page, size)


@router.get("/me", response_model=UserResponse)
async def get_me(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> UserResponse:
    """Get the profile of the authenticated user."""
    return user_service.get_current_user(db, principal)


@router.get("/search", response_model=PagedResponse[UserResponse])
async def search_users(
    first_name: str = Query(..., min_length=1, max_length=50, description="First name fragment"),
    page: int = Query(0, ge=0),
    size: Optional[int] = Query(None, ge=1),
    principal: Principal = Depends(require_permissions("read:users")),
    db: Session = Depends(get_db),
) -> PagedResponse[UserResponse]:
    """Search users by first name (case-insensitive substring)."""
    return user_service.search_users(db, principal, first_name, page, size)


@router.get("/check-username", response_model=ExistenceCheckResponse)
async def check_username(
    username: str = Query(..., min_length=1, max_length=50),
    db: Session = Depends(get_db),
) -> ExistenceCheckResponse:
    """Public: whether a username is already taken."""
    return ExistenceCheckResponse(exists=user_service.username_exists(db, username))


@router.get("/check-email", response_model=ExistenceCheckResponse)
async def check_email(
    email: str = Query(..., min_length=3, max_length=255),
    db: Session = Depends(get_db),
) -> ExistenceCheckResponse:
    """Public: whether an email address is already registered."""
    return ExistenceCheckResponse(exists=user_service.email_exists(db, email))


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> UserResponse:
    """
    Get a user by ID.

    Users may read their own profile; admins may read any profile.
    """
    return user_service.get_user(db, principal, user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    payload: UserUpdate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> UserResponse:
    """
    Update a user profile.

    Raises:
        409 if ``version`` is stale or the new email is taken
    """
    return user_service.update_user(db, principal, user_id, payload)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> None:
    """
    Soft-delete a user.

    Raises:
        400 while the user still owns active workout sessions
    """
    user_service.delete_user(db, principal, user_id)


@router.post("/{user_id}/restore", response_model=UserResponse)
async def restore_user(
    user_id: int,
    principal: Principal = Depends(require_permissions("write:users")),
    db: Session = Depends(get_db),
) -> UserResponse:
    """Restore a soft-deleted user (admins only)."""
    return user_service.restore_user(db, principal, user_id)
