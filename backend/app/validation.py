"""
Explicit business validation.

Pydantic schemas check field shapes (lengths, ranges, patterns). Rules that
span several fields or depend on the clock live here as plain functions that
return a list of :class:`FieldError`; services call :func:`ensure_valid`
before touching the database.
"""

from datetime import datetime, timezone
from typing import Iterable, List, Optional

from pydantic import BaseModel

from app.exceptions import FieldError, ValidationFailedError
from app.models.base import utcnow


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalise an incoming timestamp to the naive UTC form stored in the DB."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def validate_workout_dates(
    started_at: Optional[datetime],
    completed_at: Optional[datetime],
    now: Optional[datetime] = None,
) -> List[FieldError]:
    """
    Check workout timestamps against the clock and each other.

    Rules:
        - started_at cannot be in the future
        - completed_at cannot be before started_at
        - completed_at cannot be in the future
    """
    errors: List[FieldError] = []
    started_at = to_naive_utc(started_at)
    completed_at = to_naive_utc(completed_at)
    if started_at is None and completed_at is None:
        return errors

    now = now or utcnow()

    if started_at is not None and started_at > now:
        errors.append(FieldError("started_at", "Workout session cannot start in the future"))

    if completed_at is not None:
        if started_at is not None and completed_at < started_at:
            errors.append(
                FieldError("completed_at", "Workout session cannot be completed before it starts")
            )
        elif completed_at > now:
            errors.append(
                FieldError("completed_at", "Workout session cannot be completed in the future")
            )

    return errors


def validate_update_payload(payload: BaseModel, ignore: Iterable[str] = ("version",)) -> List[FieldError]:
    """Reject partial updates that carry no field besides the version."""
    provided = payload.model_dump(exclude_unset=True)
    for name in ignore:
        provided.pop(name, None)
    if not provided:
        return [FieldError("body", "At least one field must be provided for update")]
    return []


def ensure_valid(errors: List[FieldError]) -> None:
    """Raise ``ValidationFailedError`` when ``errors`` is non-empty."""
    if errors:
        raise ValidationFailedError(errors)


def sanitize_like_wildcards(value: Optional[str]) -> str:
    """Escape LIKE wildcards so user input matches literally (escape char ``\\``)."""
    if value is None:
        return ""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
