"""
Use case: Sign in with email and password.

Input: SignInCommand (email, password)
Output: SessionResult
Side effects: Opens a server-side session.
Failure cases: InvalidCredentialsError.
"""

import logging

from app.application.identity.dtos import IdentityResult, SessionResult, SignInCommand
from app.domain.identity.ports import IdentityPort

logger = logging.getLogger(__name__)


class SignInUseCase:
    def __init__(self, identity: IdentityPort) -> None:
        self._identity = identity

    def execute(self, command: SignInCommand) -> SessionResult:
        """Run the sign in use case."""
        token = self._identity.sign_in(command.email.strip().lower(), command.password)
        logger.info("Signed in: user=%s", token.identity.user_id)
        return SessionResult(
            access_token=token.access_token,
            token_type="bearer",
            expires_at=token.expires_at,
            identity=IdentityResult(
                user_id=token.identity.user_id,
                email=token.identity.email,
                is_operator=token.identity.is_operator,
            ),
        )
