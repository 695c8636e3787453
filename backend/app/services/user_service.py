"""User account management."""

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.exceptions import BusinessLogicError, ResourceConflictError
from app.models.base import bind_actor
from app.models.user import User
from app.models.workout_session import WorkoutSession
from app.schemas.common import PagedResponse
from app.schemas.user import UserCreate, UserResponse, UserUpdate
from app.services.access_service import access_service
from app.services.auth_service import Principal
from app.services.persistence import (
    check_version,
    commit,
    ensure_deleted,
    find_active,
    find_including_deleted,
    include_deleted,
    normalize_paging,
    paginate,
)
from app.validation import ensure_valid, sanitize_like_wildcards, validate_update_payload

logger = logging.getLogger(__name__)

RESOURCE = "User"


class UserService:
    """CRUD, search and availability checks for user accounts."""

    def create_user(self, db: Session, principal: Principal, payload: UserCreate) -> UserResponse:
        logger.debug(f"Creating user {payload.username}")
        self._ensure_unique(db, "username", payload.username)
        self._ensure_unique(db, "email", payload.email)
        if payload.auth_subject:
            self._ensure_unique(db, "auth_subject", payload.auth_subject)

        user = User(**payload.model_dump())
        bind_actor(db, principal.user_id)
        db.add(user)
        commit(db, RESOURCE)
        db.refresh(user)

        logger.info(f"Created user {user.id} ({user.username})")
        return UserResponse.model_validate(user)

    def get_user(self, db: Session, principal: Principal, user_id: int) -> UserResponse:
        user = find_active(db, User, user_id, RESOURCE)
        access_service.require_user_access(principal, user.id)
        return UserResponse.model_validate(user)

    def get_current_user(self, db: Session, principal: Principal) -> UserResponse:
        return UserResponse.model_validate(find_active(db, User, principal.user_id, RESOURCE))

    def list_users(
        self, db: Session, principal: Principal, page: int = 0, size: Optional[int] = None
    ) -> PagedResponse[UserResponse]:
        page, size = normalize_paging(page, size)
        query = db.query(User).order_by(User.id)
        users, total = paginate(query, page, size)
        return PagedResponse[UserResponse].build(
            [UserResponse.model_validate(u) for u in users], page, size, total
        )

    def search_users(
        self,
        db: Session,
        principal: Principal,
        first_name: str,
        page: int = 0,
        size: Optional[int] = None,
    ) -> PagedResponse[UserResponse]:
        """Case-insensitive substring match on first name."""
        page, size = normalize_paging(page, size)
        pattern = f"%{sanitize_like_wildcards(first_name)}%"
        query = (
            db.query(User)
            .filter(User.first_name.ilike(pattern, escape="\\"))
            .order_by(User.first_name, User.id)
        )
        users, total = paginate(query, page, size)
        return PagedResponse[UserResponse].build(
            [UserResponse.model_validate(u) for u in users], page, size, total
        )

    def update_user(
        self, db: Session, principal: Principal, user_id: int, payload: UserUpdate
    ) -> UserResponse:
        ensure_valid(validate_update_payload(payload))
        user = find_active(db, User, user_id, RESOURCE)
        access_service.require_user_access(principal, user.id)
        check_version(user, payload.version, RESOURCE)

        changes = payload.model_dump(exclude_unset=True, exclude={"version"})
        if changes.get("email") and changes["email"] != user.email:
            self._ensure_unique(db, "email", changes["email"])

        for field, value in changes.items():
            if value is not None:
                setattr(user, field, value)

        bind_actor(db, principal.user_id)
        commit(db, RESOURCE)
        db.refresh(user)
        logger.info(f"Updated user {user.id}")
        return UserResponse.model_validate(user)

    def delete_user(self, db: Session, principal: Principal, user_id: int) -> None:
        """
        Soft-delete a user.

        Refused while the user still owns active workout sessions; those must
        be deleted first.
        """
        user = find_active(db, User, user_id, RESOURCE)
        access_service.require_user_access(principal, user.id)

        active_sessions = (
            db.query(func.count(WorkoutSession.id))
            .filter(WorkoutSession.user_id == user.id)
            .scalar()
        )
        if active_sessions:
            logger.warning(f"Refusing to delete user {user.id} with {active_sessions} workouts")
            raise BusinessLogicError(
                f"Cannot delete user with id {user.id}: "
                f"user has {active_sessions} active workout session(s)"
            )

        user.soft_delete()
        bind_actor(db, principal.user_id)
        commit(db, RESOURCE)
        logger.info(f"Soft-deleted user {user.id}")

    def restore_user(self, db: Session, principal: Principal, user_id: int) -> UserResponse:
        access_service.require_admin(principal)
        user = find_including_deleted(db, User, user_id, RESOURCE)
        ensure_deleted(user, RESOURCE)

        user.restore()
        bind_actor(db, principal.user_id)
        commit(db, RESOURCE)
        db.refresh(user)
        logger.info(f"Restored user {user.id}")
        return UserResponse.model_validate(user)

    def username_exists(self, db: Session, username: str) -> bool:
        return self._exists(db, "username", username)

    def email_exists(self, db: Session, email: str) -> bool:
        return self._exists(db, "email", email)

    def _exists(self, db: Session, field: str, value: str) -> bool:
        # Deleted accounts still hold their username and email.
        query = db.query(User.id).filter(getattr(User, field) == value)
        return include_deleted(query).first() is not None

    def _ensure_unique(self, db: Session, field: str, value: str) -> None:
        if self._exists(db, field, value):
            logger.warning(f"Duplicate {field} rejected: {value}")
            raise ResourceConflictError(RESOURCE, field, value)


user_service = UserService()
