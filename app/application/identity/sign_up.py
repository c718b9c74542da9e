"""
Use case: Create an email/password account.

Input: SignUpCommand (email, password)
Output: IdentityResult
Side effects: Inserts a user row.
Failure cases: ValidationError, WeakPasswordError, EmailAlreadyRegisteredError.
"""

import logging

from email_validator import EmailNotValidError, validate_email

from app.application.identity.dtos import IdentityResult, SignUpCommand
from app.domain.identity.errors import WeakPasswordError
from app.domain.identity.ports import IdentityPort
from app.domain.settlement.errors import ValidationError

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class SignUpUseCase:
    """Registers a new account. Accounts start without the operator role."""

    def __init__(self, identity: IdentityPort) -> None:
        self._identity = identity

    def execute(self, command: SignUpCommand) -> IdentityResult:
        """Run the sign up use case."""
        try:
            email = validate_email(
                command.email.strip(), check_deliverability=False
            ).normalized.lower()
        except EmailNotValidError:
            raise ValidationError({"email": "Enter a valid email"})
        if len(command.password) < MIN_PASSWORD_LENGTH:
            raise WeakPasswordError(MIN_PASSWORD_LENGTH)

        identity = self._identity.sign_up(email, command.password)
        logger.info("Account created: user=%s", identity.user_id)
        return IdentityResult(
            user_id=identity.user_id,
            email=identity.email,
            is_operator=identity.is_operator,
        )
