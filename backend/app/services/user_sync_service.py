"""Keeps local user rows in step with identity provider tokens."""

import logging
import re
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from app.models.base import INCLUDE_DELETED, bind_actor
from app.models.user import User, UserRole
from app.services.auth_service import AuthenticationError, extract_role

logger = logging.getLogger(__name__)

USERNAME_MAX_LENGTH = 50


class AccountDeactivatedError(Exception):
    """Raised when a token belongs to a soft-deleted local user."""

    def __init__(self, subject: str):
        self.subject = subject
        super().__init__(f"User account for {subject} is deactivated")


class UserSyncService:
    """Creates or refreshes the local user for a verified token."""

    def sync_user(self, db: Session, claims: Dict[str, Any]) -> User:
        """
        Resolve the claims of a verified token to a local user.

        The user is looked up by subject, then by email so that accounts
        created through ``POST /users`` get linked on first login. Unknown
        subjects are provisioned. Email and role are refreshed when the token
        disagrees with the stored row.

        Raises:
            AuthenticationError: If the token has no usable email
            AccountDeactivatedError: If the matching user is soft-deleted
        """
        subject = claims["sub"]
        email = claims.get("email")

        user = (
            db.query(User)
            .execution_options(**{INCLUDE_DELETED: True})
            .filter(User.auth_subject == subject)
            .first()
        )
        if user is None and email:
            user = (
                db.query(User)
                .execution_options(**{INCLUDE_DELETED: True})
                .filter(User.email == email)
                .first()
            )
            if user is not None and user.auth_subject not in (None, subject):
                user = None

        if user is not None and not user.is_active:
            logger.warning(f"SECURITY: deactivated user {user.id} presented a valid token")
            raise AccountDeactivatedError(subject)

        role = extract_role(claims)
        if user is None:
            return self._provision(db, subject, email, role, claims)

        changed = False
        if user.auth_subject is None:
            user.auth_subject = subject
            changed = True
        if email and user.email != email:
            user.email = email
            changed = True
        if user.role != role:
            user.role = role
            changed = True

        if changed:
            bind_actor(db, user.id)
            db.commit()
            db.refresh(user)
            logger.info(f"Synchronised user {user.id} from identity provider")
        return user

    def _provision(
        self,
        db: Session,
        subject: str,
        email: Optional[str],
        role: UserRole,
        claims: Dict[str, Any],
    ) -> User:
        if not email:
            raise AuthenticationError("Invalid token: missing email claim")

        user = User(
            auth_subject=subject,
            username=self.unique_username(db, self._preferred_username(claims, email)),
            email=email,
            first_name=claims.get("given_name") or claims.get("name") or "",
            last_name=claims.get("family_name") or "",
            role=role,
        )
        bind_actor(db, None)
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info(f"Provisioned user {user.id} ({user.username}) for subject {subject}")
        return user

    @staticmethod
    def _preferred_username(claims: Dict[str, Any], email: str) -> str:
        raw = claims.get("nickname") or claims.get("preferred_username") or email.split("@")[0]
        cleaned = re.sub(r"[^a-zA-Z0-9_]", "_", raw)
        return cleaned[:USERNAME_MAX_LENGTH] or "user"

    def unique_username(self, db: Session, base: str) -> str:
        """Append a counter to ``base`` until no user, deleted or not, holds it."""
        candidate = base
        counter = 1
        while (
            db.query(User.id)
            .execution_options(**{INCLUDE_DELETED: True})
            .filter(User.username == candidate)
            .first()
            is not None
        ):
            suffix = str(counter)
            candidate = f"{base[:USERNAME_MAX_LENGTH - len(suffix)]}{suffix}"
            counter += 1
        return candidate


user_sync_service = UserSyncService()
