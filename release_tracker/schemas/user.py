"""
User Pydantic Schemas

Schemas:
- UserCreate: Registration data (email, password, optional name)
- LoginRequest: Login credentials
- UserResponse: Public user data (never exposes the password hash)
- AuthResponse: Session token plus the user it belongs to
- MeResponse: Wrapper returned by /auth/me
"""

from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from release_tracker.schemas.base import CamelModel


class UserCreate(CamelModel):
    """Schema for user registration."""

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["reader@example.com"],
    )

    password: str = Field(
        ...,
        min_length=6,
        max_length=72,  # bcrypt ignores everything past 72 bytes
        description="Password (min 6 characters)",
        examples=["secret1"],
    )

    name: str | None = Field(
        default=None,
        max_length=255,
        description="Display name",
        examples=["Jane Reader"],
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None


class LoginRequest(CamelModel):
    """Schema for email/password login."""

    email: EmailStr = Field(..., description="Registered email address")
    password: str = Field(..., min_length=1, description="Account password")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class UserResponse(CamelModel):
    """
    Schema for user responses.

    SECURITY: Never includes the password hash.
    """

    id: int = Field(..., description="Unique user identifier", examples=[1])
    email: str = Field(..., description="User's email address")
    name: str | None = Field(default=None, description="Display name")
    created_at: datetime = Field(..., description="When the user registered")


class AuthResponse(CamelModel):
    """Returned by register and login."""

    token: str = Field(..., description="Bearer token valid for 30 days")
    user: UserResponse


class MeResponse(CamelModel):
    user: UserResponse
