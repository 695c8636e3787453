"""
Lookup, versioning and commit helpers shared by the domain services.

Every entity follows the same convention: default lookups only see active
rows, an explicit accessor sees soft-deleted rows too, updates are checked
against the version the client last read, and commits translate database
concurrency and constraint failures into domain errors.
"""

import logging
from typing import List, Optional, Tuple, Type, TypeVar

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session
from sqlalchemy.orm.exc import StaleDataError

from app.config import settings
from app.exceptions import (
    BusinessLogicError,
    OptimisticLockConflictError,
    ResourceConflictError,
    ResourceNotFoundError,
)
from app.models.base import INCLUDE_DELETED, SoftDeletable

logger = logging.getLogger(__name__)

M = TypeVar("M")


def find_active(db: Session, model: Type[M], entity_id: int, resource: Optional[str] = None) -> M:
    """Load an active row by id or raise ``ResourceNotFoundError``."""
    entity = db.query(model).filter(model.id == entity_id).first()
    if entity is None:
        raise ResourceNotFoundError(resource or model.__name__, "id", entity_id)
    return entity


def find_including_deleted(
    db: Session, model: Type[M], entity_id: int, resource: Optional[str] = None
) -> M:
    """Load a row by id whether or not it has been soft-deleted."""
    entity = (
        db.query(model)
        .execution_options(**{INCLUDE_DELETED: True})
        .filter(model.id == entity_id)
        .first()
    )
    if entity is None:
        raise ResourceNotFoundError(resource or model.__name__, "id", entity_id)
    return entity


def check_version(entity, expected: Optional[int], resource: str) -> None:
    """Reject changes based on a version other than the stored one."""
    if expected is not None and entity.version != expected:
        logger.warning(
            f"Version conflict on {resource} {entity.id}: "
            f"client has {expected}, stored is {entity.version}"
        )
        raise OptimisticLockConflictError(resource, expected=expected, actual=entity.version)


def ensure_deleted(entity: SoftDeletable, resource: str) -> None:
    """Restore is only meaningful for rows that are currently deleted."""
    if entity.is_active:
        raise BusinessLogicError(f"{resource} with id {entity.id} is not deleted")


def commit(db: Session, resource: str) -> None:
    """
    Commit the unit of work.

    ``StaleDataError`` means another writer bumped the version between our
    read and our UPDATE; ``IntegrityError`` means a unique constraint caught
    a race the explicit uniqueness checks missed.
    """
    try:
        db.commit()
    except StaleDataError:
        db.rollback()
        logger.warning(f"Concurrent modification detected while saving {resource}")
        raise OptimisticLockConflictError(resource)
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Integrity violation while saving {resource}: {e.orig}")
        raise ResourceConflictError(resource, "unique constraint", "duplicate value")


def include_deleted(query: Query) -> Query:
    return query.execution_options(**{INCLUDE_DELETED: True})


def normalize_paging(page: int, size: Optional[int]) -> Tuple[int, int]:
    """Clamp paging parameters to sane values."""
    size = size or settings.DEFAULT_PAGE_SIZE
    return max(page, 0), max(1, min(size, settings.MAX_PAGE_SIZE))


def paginate(query: Query, page: int, size: int) -> Tuple[List, int]:
    """Return the rows of one page and the total row count."""
    entity = query.column_descriptions[0]["entity"]
    total = query.with_entities(func.count(entity.id)).order_by(None).scalar() or 0
    items = query.offset(page * size).limit(size).all()
    return items, total
