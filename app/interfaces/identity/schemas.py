"""
Pydantic schemas for identity API request/response validation.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class SignUpRequest(BaseModel):
    """Request schema for account creation.

    Attributes:
        email: Account email. Must match the application email to link it.
        password: At least 8 characters.
    """

    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., max_length=128)


class SignInRequest(BaseModel):
    """Request schema for sign-in."""

    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class IdentityResponse(BaseModel):
    """The authenticated caller."""

    id: UUID
    email: str
    is_operator: bool


class SessionResponse(BaseModel):
    """Response schema for a successful sign-in."""

    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: IdentityResponse
