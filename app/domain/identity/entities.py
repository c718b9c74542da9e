"""
Domain entities for the identity bounded context.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class Identity:
    """An authenticated caller."""

    user_id: UUID
    email: str
    is_operator: bool = False


@dataclass(frozen=True)
class SessionToken:
    """A bearer token issued at sign-in."""

    access_token: str
    expires_at: datetime
    identity: Identity
