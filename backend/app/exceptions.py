"""
Domain exceptions raised by the service layer.

Each exception maps to one HTTP status in ``app.error_handlers``; services
never build HTTP responses themselves.
"""

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional


class WorkoutPlannerError(Exception):
    """Base class for all errors the API translates into structured bodies."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ResourceNotFoundError(WorkoutPlannerError):
    """Raised when an entity looked up by id does not exist."""

    status_code = 404

    def __init__(self, resource: str, field: str, value: Any):
        self.resource = resource
        self.field = field
        self.value = value
        super().__init__(f"{resource} not found with {field}: {value}")


class ResourceConflictError(WorkoutPlannerError):
    """Raised when a unique field already holds the requested value."""

    status_code = 409

    def __init__(self, resource: str, field: str, value: Any):
        self.resource = resource
        self.field = field
        self.value = value
        super().__init__(f"{resource} already exists with {field}: {value}")


class OptimisticLockConflictError(WorkoutPlannerError):
    """Raised when an update was based on a stale version of the entity."""

    status_code = 409

    def __init__(self, resource: str, expected: Optional[int] = None, actual: Optional[int] = None):
        self.resource = resource
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"The {resource} was modified by another user. Please refresh and try again."
        )


class BusinessLogicError(WorkoutPlannerError):
    """Raised when a request is well-formed but breaks a business rule."""

    status_code = 400


class InvalidArgumentError(WorkoutPlannerError):
    """Raised for unrecognised argument values such as unknown workout actions."""

    status_code = 400


@dataclass(frozen=True)
class FieldError:
    """A single validation failure keyed by field name."""

    field: str
    message: str


class ValidationFailedError(WorkoutPlannerError):
    """Raised when explicit validation returns one or more field errors."""

    status_code = 400

    def __init__(self, errors: Iterable[FieldError]):
        self.errors: List[FieldError] = list(errors)
        super().__init__("Validation failed")

    def as_dict(self) -> dict:
        return {error.field: error.message for error in self.errors}


class RateLimitExceededError(WorkoutPlannerError):
    """Raised when a client exceeds its request allowance for the window."""

    status_code = 429

    def __init__(self, retry_after: int):
        self.retry_after = retry_after
        super().__init__(f"Rate limit exceeded. Retry after {retry_after} seconds.")


class AccessDeniedError(WorkoutPlannerError):
    """Raised when the caller may not touch a resource owned by someone else."""

    status_code = 403

    def __init__(self, message: str = "Access denied. You don't have permission to access this resource."):
        super().__init__(message)
