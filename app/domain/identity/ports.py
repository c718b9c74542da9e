"""
Port interfaces (ABCs) for the identity bounded context.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from app.domain.identity.entities import Identity, SessionToken


class IdentityPort(ABC):
    """Port for the identity service: accounts, sessions and roles."""

    @abstractmethod
    def sign_up(self, email: str, password: str) -> Identity:
        """Create an account.

        Raises:
            EmailAlreadyRegisteredError: If the email is taken.
        """
        raise NotImplementedError

    @abstractmethod
    def sign_in(self, email: str, password: str) -> SessionToken:
        """Open a session.

        Raises:
            InvalidCredentialsError: If the pair does not match.
        """
        raise NotImplementedError

    @abstractmethod
    def sign_out(self, access_token: str) -> None:
        """Revoke the session behind a token. Unknown tokens are ignored."""
        raise NotImplementedError

    @abstractmethod
    def resolve_session(self, access_token: str) -> Optional[Identity]:
        """Return the caller behind a token, or None if invalid/revoked."""
        raise NotImplementedError

    @abstractmethod
    def grant_operator(self, user_id: UUID) -> None:
        """Give a user the operator role (idempotent)."""
        raise NotImplementedError

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[Identity]:
        """Return the account with this email, or None."""
        raise NotImplementedError
