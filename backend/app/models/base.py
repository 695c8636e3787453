"""
Declarative base and the capabilities shared by every entity.

Entities compose two capabilities as mixins:

- ``SoftDeletable``: a nullable ``deleted_at`` timestamp. Rows with a value are
  hidden from every ORM SELECT by the ``do_orm_execute`` hook below unless the
  statement carries the ``include_deleted`` execution option.
- ``Auditable``: created/updated timestamps and actor ids, stamped by the
  ``before_flush`` hook from the actor bound to the session with
  :func:`bind_actor`.

Optimistic locking is declared per model through ``version_id_col`` so that
SQLAlchemy increments ``version`` on every UPDATE and raises ``StaleDataError``
when the stored row has moved on.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Integer, event
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    ORMExecuteState,
    Session,
    mapped_column,
    with_loader_criteria,
)

INCLUDE_DELETED = "include_deleted"
ACTOR_KEY = "actor_id"


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how DateTime columns are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Declarative base for all models."""


class SoftDeletable:
    """Capability: rows are marked deleted instead of being removed."""

    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True, index=True)

    @property
    def is_active(self) -> bool:
        return self.deleted_at is None

    def soft_delete(self) -> None:
        # Idempotent: a second delete keeps the first timestamp.
        if self.deleted_at is None:
            self.deleted_at = utcnow()

    def restore(self) -> None:
        self.deleted_at = None


class Auditable:
    """Capability: creation/modification timestamps and acting user ids."""

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    created_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    updated_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)


def bind_actor(session: Session, actor_id: Optional[int]) -> None:
    """Record which user the pending changes in ``session`` are made by."""
    session.info[ACTOR_KEY] = actor_id


@event.listens_for(Session, "before_flush")
def _stamp_audit_fields(session: Session, flush_context, instances) -> None:
    actor_id = session.info.get(ACTOR_KEY)
    now = utcnow()

    for obj in session.new:
        if isinstance(obj, Auditable):
            obj.created_at = obj.created_at or now
            obj.updated_at = now
            if obj.created_by is None:
                obj.created_by = actor_id
            obj.updated_by = actor_id if actor_id is not None else obj.created_by

    for obj in session.dirty:
        if isinstance(obj, Auditable) and session.is_modified(obj, include_collections=False):
            obj.updated_at = now
            if actor_id is not None:
                obj.updated_by = actor_id


@event.listens_for(Session, "do_orm_execute")
def _exclude_soft_deleted(execute_state: ORMExecuteState) -> None:
    if (
        execute_state.is_select
        and not execute_state.is_column_load
        and not execute_state.is_relationship_load
        and not execute_state.execution_options.get(INCLUDE_DELETED, False)
    ):
        # Many-to-one loads (e.g. a workout exercise's catalog entry) must still
        # resolve after the target is deleted, so the criteria is not
        # propagated to lazy loaders. Collections filter in their primaryjoin.
        execute_state.statement = execute_state.statement.options(
            with_loader_criteria(
                SoftDeletable,
                lambda cls: cls.deleted_at.is_(None),
                include_aliases=True,
                propagate_to_loaders=False,
            )
        )
