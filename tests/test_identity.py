"""
Tests for the identity context: accounts, sessions and the operator role.
"""

from datetime import timedelta

import pytest

from app.application.identity.dtos import SignInCommand, SignUpCommand
from app.application.identity.sign_in import SignInUseCase
from app.application.identity.sign_out import SignOutUseCase
from app.application.identity.sign_up import SignUpUseCase
from app.domain.identity.errors import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    WeakPasswordError,
)
from app.domain.settlement.errors import ValidationError
from app.infrastructure.identity.sql_identity_adapter import SqlIdentityAdapter
from factories import START


class MutableClock:
    def __init__(self) -> None:
        self.now = START

    def __call__(self):
        return self.now


class TestSignUp:
    """Tests for SignUpUseCase."""

    def test_creates_non_operator_account(self, identity_service) -> None:
        result = SignUpUseCase(identity_service).execute(
            SignUpCommand(email="Client@Example.com", password="correct-horse")
        )
        assert result.email == "client@example.com"
        assert result.is_operator is False

    def test_short_password_rejected(self, identity_service) -> None:
        with pytest.raises(WeakPasswordError):
            SignUpUseCase(identity_service).execute(
                SignUpCommand(email="client@example.com", password="short")
            )
        assert identity_service.get_by_email("client@example.com") is None

    def test_invalid_email_rejected(self, identity_service) -> None:
        with pytest.raises(ValidationError) as exc:
            SignUpUseCase(identity_service).execute(
                SignUpCommand(email="nope", password="correct-horse")
            )
        assert exc.value.fields == {"email": "Enter a valid email"}

    def test_duplicate_email_rejected(self, identity_service) -> None:
        use_case = SignUpUseCase(identity_service)
        use_case.execute(SignUpCommand(email="client@example.com", password="correct-horse"))
        with pytest.raises(EmailAlreadyRegisteredError):
            use_case.execute(SignUpCommand(email="CLIENT@example.com", password="other-pass"))


class TestSessions:
    """Tests for sign-in, session resolution and sign-out."""

    def test_sign_in_resolves_to_identity(self, identity_service) -> None:
        identity_service.sign_up("client@example.com", "correct-horse")
        session = SignInUseCase(identity_service).execute(
            SignInCommand(email="client@example.com", password="correct-horse")
        )
        assert session.token_type == "bearer"

        identity = identity_service.resolve_session(session.access_token)
        assert identity is not None
        assert identity.email == "client@example.com"

    def test_wrong_password(self, identity_service) -> None:
        identity_service.sign_up("client@example.com", "correct-horse")
        with pytest.raises(InvalidCredentialsError):
            identity_service.sign_in("client@example.com", "wrong-horse")

    def test_unknown_email(self, identity_service) -> None:
        with pytest.raises(InvalidCredentialsError):
            identity_service.sign_in("ghost@example.com", "correct-horse")

    def test_sign_out_revokes_session(self, identity_service) -> None:
        identity_service.sign_up("client@example.com", "correct-horse")
        session = identity_service.sign_in("client@example.com", "correct-horse")

        SignOutUseCase(identity_service).execute(session.access_token)
        assert identity_service.resolve_session(session.access_token) is None

    def test_sign_out_ignores_garbage(self, identity_service) -> None:
        SignOutUseCase(identity_service).execute("not-a-token")

    def test_tampered_token_rejected(self, engine, identity_service) -> None:
        identity_service.sign_up("client@example.com", "correct-horse")
        session = identity_service.sign_in("client@example.com", "correct-horse")
        other = SqlIdentityAdapter(engine=engine, secret="another-secret")
        assert other.resolve_session(session.access_token) is None

    def test_expired_session_rejected(self, engine) -> None:
        clock = MutableClock()
        service = SqlIdentityAdapter(engine=engine, secret="s", ttl_minutes=30, clock=clock)
        service.sign_up("client@example.com", "correct-horse")
        session = service.sign_in("client@example.com", "correct-horse")
        assert service.resolve_session(session.access_token) is not None

        clock.now = START + timedelta(minutes=31)
        assert service.resolve_session(session.access_token) is None


class TestOperatorRole:
    """Tests for granting and reading the operator role."""

    def test_grant_is_idempotent_and_visible_on_session(self, identity_service) -> None:
        identity = identity_service.sign_up("ops@example.com", "correct-horse")
        identity_service.grant_operator(identity.user_id)
        identity_service.grant_operator(identity.user_id)

        session = identity_service.sign_in("ops@example.com", "correct-horse")
        assert session.identity.is_operator is True
        assert identity_service.resolve_session(session.access_token).is_operator is True

    def test_set_password(self, identity_service) -> None:
        identity = identity_service.sign_up("ops@example.com", "correct-horse")
        identity_service.set_password(identity.user_id, "battery-staple")
        with pytest.raises(InvalidCredentialsError):
            identity_service.sign_in("ops@example.com", "correct-horse")
        assert identity_service.sign_in("ops@example.com", "battery-staple")
