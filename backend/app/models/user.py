"""User model for accounts synchronised from the identity provider."""

from enum import Enum as PyEnum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Auditable, Base, SoftDeletable

if TYPE_CHECKING:
    from app.models.workout_session import WorkoutSession


class UserRole(str, PyEnum):
    """Account roles."""
    USER = "USER"
    ADMIN = "ADMIN"
    MODERATOR = "MODERATOR"


class User(SoftDeletable, Auditable, Base):
    """User account, optionally linked to an identity provider subject."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    auth_subject: Mapped[Optional[str]] = mapped_column(
        String(100), unique=True, index=True, nullable=True
    )  # "{provider}|{id}"
    username: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    first_name: Mapped[str] = mapped_column(String(50))
    last_name: Mapped[str] = mapped_column(String(50), default="")
    role: Mapped[UserRole] = mapped_column(Enum(UserRole), default=UserRole.USER)

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    # Relationships
    workout_sessions: Mapped[List["WorkoutSession"]] = relationship(
        "WorkoutSession",
        primaryjoin="and_(User.id == WorkoutSession.user_id, WorkoutSession.deleted_at.is_(None))",
        order_by="WorkoutSession.started_at.desc()",
        viewonly=True,
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', role={self.role})>"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
