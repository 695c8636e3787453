"""
User-related Pydantic schemas.

These schemas define the request/response models for the user endpoints.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from app.models.user import UserRole

NAME_PATTERN = r"^[a-zA-Z\s'-]+$"


class UserCreate(BaseModel):
    """Request body for creating a user account."""

    username: str = Field(
        ...,
        min_length=1,
        max_length=50,
        pattern=r"^[a-zA-Z0-9_]+$",
        description="Unique username (letters, numbers and underscores)",
    )
    email: EmailStr = Field(..., description="Unique email address")
    first_name: str = Field(..., min_length=1, max_length=50, pattern=NAME_PATTERN)
    last_name: str = Field(..., min_length=1, max_length=50, pattern=NAME_PATTERN)
    auth_subject: Optional[str] = Field(
        None,
        max_length=100,
        pattern=r"^[a-z0-9-]+\|.+$",
        description="Identity provider subject in the form {provider}|{id}",
    )

    class Config:
        json_schema_extra = {
            "example": {
                "username": "alice",
                "email": "alice@example.com",
                "first_name": "Alice",
                "last_name": "Lifter",
            }
        }


class UserUpdate(BaseModel):
    """
    Partial update of a user profile.

    ``version`` must be the value returned by the last read; a stale value is
    rejected with 409.
    """

    version: int = Field(..., ge=0, description="Version last read by the client")
    email: Optional[EmailStr] = Field(None, description="New email address")
    first_name: Optional[str] = Field(None, min_length=1, max_length=50, pattern=NAME_PATTERN)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50, pattern=NAME_PATTERN)


class UserResponse(BaseModel):
    """User profile response schema."""

    id: int = Field(..., description="Internal user ID")
    auth_subject: Optional[str] = Field(None, description="Identity provider subject")
    username: str
    email: str
    first_name: str
    last_name: str
    role: UserRole
    is_active: bool = Field(..., description="False once the account is soft-deleted")
    version: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": 1,
                "auth_subject": "auth0|64b0c0ffee",
                "username": "alice",
                "email": "alice@example.com",
                "first_name": "Alice",
                "last_name": "Lifter",
                "role": "USER",
                "is_active": True,
                "version": 1,
                "created_at": "2024-01-01T10:00:00",
                "updated_at": "2024-01-01T10:00:00",
            }
        }
