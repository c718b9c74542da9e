"""
Centralized error handlers for FastAPI.

Maps domain-specific errors to HTTP responses.
No stack traces or internal details are exposed to clients.
All error responses use the ErrorResponse schema.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.domain.assistant.errors import (
    AssistantDomainError,
    AssistantUnavailableError,
    InvalidConversationError,
)
from app.domain.identity.errors import (
    EmailAlreadyRegisteredError,
    IdentityDomainError,
    InvalidCredentialsError,
    NotAuthenticatedError,
    PermissionDeniedError,
    WeakPasswordError,
)
from app.domain.settlement.errors import (
    AgreementNotAvailableError,
    BrokerCredentialNotFoundError,
    ClientNotFoundError,
    ConfirmationRequiredError,
    ConstraintViolationError,
    InvalidStatusCombinationError,
    InvalidTransitionError,
    PaymentProofNotFoundError,
    ServiceUnavailableError,
    SettlementDomainError,
    SettlementNotAvailableError,
    ValidationError,
)

logger = logging.getLogger(__name__)

HTTP_401 = 401
HTTP_403 = 403
HTTP_404 = 404
HTTP_409 = 409
HTTP_422 = 422
HTTP_500 = 500
HTTP_503 = 503


def _error_response(
    status_code: int,
    error: str,
    detail: Optional[str] = None,
    fields: Optional[dict[str, str]] = None,
) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict[str, object] = {"error": error}
    if detail:
        body["detail"] = detail
    if fields:
        body["fields"] = fields
    headers = {"WWW-Authenticate": "Bearer"} if status_code == HTTP_401 else None
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def register_error_handlers(app: FastAPI) -> None:
    """Register all domain error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    # ------------------------------------------------------------------
    # Settlement
    # ------------------------------------------------------------------

    @app.exception_handler(ValidationError)
    async def handle_validation(_request: Request, exc: ValidationError) -> JSONResponse:
        """Handle field validation failures."""
        logger.info("Validation failed: %s", sorted(exc.fields))
        return _error_response(HTTP_422, "Validation failed", fields=exc.fields)

    @app.exception_handler(ClientNotFoundError)
    async def handle_client_not_found(
        _request: Request, exc: ClientNotFoundError
    ) -> JSONResponse:
        logger.warning("Client not found: %s", exc.client_id)
        return _error_response(HTTP_404, "Client not found")

    @app.exception_handler(PaymentProofNotFoundError)
    async def handle_proof_not_found(
        _request: Request, exc: PaymentProofNotFoundError
    ) -> JSONResponse:
        logger.warning("Payment proof not found: %s", exc.proof_id)
        return _error_response(HTTP_404, "Payment proof not found")

    @app.exception_handler(BrokerCredentialNotFoundError)
    async def handle_credential_not_found(
        _request: Request, exc: BrokerCredentialNotFoundError
    ) -> JSONResponse:
        logger.warning("Broker credential not found: %s", exc.credential_id)
        return _error_response(HTTP_404, "Broker credential not found")

    @app.exception_handler(InvalidTransitionError)
    async def handle_invalid_transition(
        _request: Request, exc: InvalidTransitionError
    ) -> JSONResponse:
        """Handle lifecycle edges that do not exist."""
        logger.warning("Invalid transition: %s", exc.message)
        return _error_response(HTTP_409, "Invalid transition", exc.message)

    @app.exception_handler(InvalidStatusCombinationError)
    async def handle_invalid_combination(
        _request: Request, exc: InvalidStatusCombinationError
    ) -> JSONResponse:
        logger.warning("Invalid status combination: %s", exc.message)
        return _error_response(HTTP_409, "Invalid status combination", exc.message)

    @app.exception_handler(AgreementNotAvailableError)
    async def handle_agreement_unavailable(
        _request: Request, exc: AgreementNotAvailableError
    ) -> JSONResponse:
        logger.warning("Agreement not available: status=%s", exc.status)
        return _error_response(HTTP_409, "Agreement not available", exc.message)

    @app.exception_handler(SettlementNotAvailableError)
    async def handle_settlement_unavailable(
        _request: Request, exc: SettlementNotAvailableError
    ) -> JSONResponse:
        logger.info("Settlement not available: %s", exc.reason)
        return _error_response(HTTP_409, "Settlement not available", exc.reason)

    @app.exception_handler(ConfirmationRequiredError)
    async def handle_confirmation_required(
        _request: Request, exc: ConfirmationRequiredError
    ) -> JSONResponse:
        logger.info("Confirmation required: %s", exc.action)
        return _error_response(HTTP_409, "Confirmation required", exc.message)

    @app.exception_handler(ConstraintViolationError)
    async def handle_constraint_violation(
        _request: Request, exc: ConstraintViolationError
    ) -> JSONResponse:
        """Handle writes rejected by the record store."""
        logger.warning("Constraint violation: %s", exc.reason)
        return _error_response(HTTP_409, "Constraint violation", exc.reason)

    @app.exception_handler(ServiceUnavailableError)
    async def handle_service_unavailable(
        _request: Request, exc: ServiceUnavailableError
    ) -> JSONResponse:
        logger.error("Service unavailable: %s", exc.message)
        return _error_response(HTTP_503, "Service unavailable", exc.service)

    @app.exception_handler(SettlementDomainError)
    async def handle_settlement_domain(
        _request: Request, exc: SettlementDomainError
    ) -> JSONResponse:
        """Catch-all for unhandled settlement domain errors."""
        logger.error("Unhandled settlement domain error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @app.exception_handler(NotAuthenticatedError)
    async def handle_not_authenticated(
        _request: Request, exc: NotAuthenticatedError
    ) -> JSONResponse:
        return _error_response(HTTP_401, "Not authenticated")

    @app.exception_handler(InvalidCredentialsError)
    async def handle_invalid_credentials(
        _request: Request, exc: InvalidCredentialsError
    ) -> JSONResponse:
        return _error_response(HTTP_401, "Invalid credentials", exc.message)

    @app.exception_handler(PermissionDeniedError)
    async def handle_permission_denied(
        _request: Request, exc: PermissionDeniedError
    ) -> JSONResponse:
        logger.warning("Permission denied: %s", exc.action)
        return _error_response(HTTP_403, "Permission denied", exc.message)

    @app.exception_handler(EmailAlreadyRegisteredError)
    async def handle_email_registered(
        _request: Request, exc: EmailAlreadyRegisteredError
    ) -> JSONResponse:
        logger.info("Sign-up with an existing email")
        return _error_response(HTTP_409, "Email already registered")

    @app.exception_handler(WeakPasswordError)
    async def handle_weak_password(
        _request: Request, exc: WeakPasswordError
    ) -> JSONResponse:
        return _error_response(
            HTTP_422, "Validation failed", fields={"password": exc.message}
        )

    @app.exception_handler(IdentityDomainError)
    async def handle_identity_domain(
        _request: Request, exc: IdentityDomainError
    ) -> JSONResponse:
        """Catch-all for unhandled identity domain errors."""
        logger.error("Unhandled identity domain error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    # ------------------------------------------------------------------
    # Assistant
    # ------------------------------------------------------------------

    @app.exception_handler(InvalidConversationError)
    async def handle_invalid_conversation(
        _request: Request, exc: InvalidConversationError
    ) -> JSONResponse:
        logger.info("Invalid conversation: %s", exc.reason)
        return _error_response(HTTP_422, "Invalid conversation", exc.reason)

    @app.exception_handler(AssistantUnavailableError)
    async def handle_assistant_unavailable(
        _request: Request, exc: AssistantUnavailableError
    ) -> JSONResponse:
        logger.error("Assistant unavailable: %s", exc.reason)
        return _error_response(HTTP_503, "Service unavailable", "assistant")

    @app.exception_handler(AssistantDomainError)
    async def handle_assistant_domain(
        _request: Request, exc: AssistantDomainError
    ) -> JSONResponse:
        logger.error("Unhandled assistant domain error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected(
        _request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(HTTP_500, "Internal server error")
