"""Ownership checks on top of the coarse route permissions."""

import logging

from app.exceptions import AccessDeniedError
from app.models.workout_session import WorkoutSession
from app.services.auth_service import Principal

logger = logging.getLogger(__name__)


class AccessService:
    """Decides whether a principal may act on a user's data."""

    def can_access_user(self, principal: Principal, user_id: int) -> bool:
        return principal.can_act_for(user_id)

    def require_user_access(self, principal: Principal, user_id: int) -> None:
        if not self.can_access_user(principal, user_id):
            logger.warning(
                f"SECURITY: user {principal.user_id} denied access to data of user {user_id}"
            )
            raise AccessDeniedError()

    def require_admin(self, principal: Principal) -> None:
        if not principal.is_admin:
            logger.warning(f"SECURITY: user {principal.user_id} denied admin-only operation")
            raise AccessDeniedError()

    def require_workout_access(self, principal: Principal, workout: WorkoutSession) -> None:
        """Only the owner of a workout, or an admin, may read or change it."""
        self.require_user_access(principal, workout.user_id)


access_service = AccessService()
