"""
Data Transfer Objects for the identity application layer.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class SignUpCommand:
    """Input DTO for creating an account."""

    email: str
    password: str


@dataclass(frozen=True)
class SignInCommand:
    """Input DTO for opening a session."""

    email: str
    password: str


@dataclass(frozen=True)
class IdentityResult:
    """Output DTO describing the caller."""

    user_id: UUID
    email: str
    is_operator: bool


@dataclass(frozen=True)
class SessionResult:
    """Output DTO for a successful sign-in."""

    access_token: str
    token_type: str
    expires_at: datetime
    identity: IdentityResult
