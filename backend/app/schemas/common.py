"""Shared response envelopes."""

import math
from typing import Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PagedResponse(BaseModel, Generic[T]):
    """One page of a list endpoint plus paging metadata."""

    content: List[T] = Field(default_factory=list, description="Items on this page")
    page_number: int = Field(..., ge=0, description="Zero-based page index")
    page_size: int = Field(..., ge=1, description="Requested page size")
    total_elements: int = Field(..., ge=0, description="Items across all pages")
    total_pages: int = Field(..., ge=0, description="Number of pages")
    first: bool = Field(..., description="Whether this is the first page")
    last: bool = Field(..., description="Whether this is the last page")
    empty: bool = Field(..., description="Whether this page has no items")

    @classmethod
    def build(cls, items: List[T], page: int, size: int, total: int) -> "PagedResponse[T]":
        total_pages = math.ceil(total / size) if size else 0
        return cls(
            content=items,
            page_number=page,
            page_size=size,
            total_elements=total,
            total_pages=total_pages,
            first=page == 0,
            last=page >= total_pages - 1,
            empty=not items,
        )


class ExistenceCheckResponse(BaseModel):
    """Result of a username/email availability check."""

    exists: bool


class ErrorResponse(BaseModel):
    """Body returned for every handled error."""

    message: str = Field(..., description="Human readable error message")
    status: int = Field(..., description="HTTP status code")
    errors: Optional[Dict[str, str]] = Field(None, description="Field level validation messages")

    class Config:
        json_schema_extra = {
            "example": {
                "message": "Validation failed",
                "status": 400,
                "errors": {"started_at": "Workout session cannot start in the future"},
            }
        }
