"""
Domain-specific errors for the identity bounded context.

These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""


class IdentityDomainError(Exception):
    """Base error for all identity domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class InvalidCredentialsError(IdentityDomainError):
    """Raised when an email/password pair does not match an account."""

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class EmailAlreadyRegisteredError(IdentityDomainError):
    """Raised when signing up with an email that already has an account."""

    def __init__(self, email: str) -> None:
        super().__init__("Email already registered")
        self.email = email


class WeakPasswordError(IdentityDomainError):
    """Raised when a password does not meet the minimum length."""

    def __init__(self, min_length: int) -> None:
        super().__init__(f"Password must be at least {min_length} characters")
        self.min_length = min_length


class NotAuthenticatedError(IdentityDomainError):
    """Raised when a request carries no valid session."""

    def __init__(self) -> None:
        super().__init__("Not authenticated")


class PermissionDeniedError(IdentityDomainError):
    """Raised when the caller lacks the operator role."""

    def __init__(self, action: str) -> None:
        super().__init__(f"Operator role required to {action}")
        self.action = action
