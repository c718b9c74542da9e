"""
FastAPI router for the identity bounded context.

All routes delegate to use cases. No business logic here.
"""

from fastapi import APIRouter, Depends, Request, status

from app.application.identity.dtos import SignInCommand, SignUpCommand
from app.application.identity.sign_in import SignInUseCase
from app.application.identity.sign_out import SignOutUseCase
from app.application.identity.sign_up import SignUpUseCase
from app.core.config import settings
from app.domain.identity.entities import Identity
from app.interfaces.identity.dependencies import (
    get_bearer_token,
    get_current_identity,
    get_sign_in_use_case,
    get_sign_out_use_case,
    get_sign_up_use_case,
)
from app.interfaces.identity.schemas import (
    IdentityResponse,
    SessionResponse,
    SignInRequest,
    SignUpRequest,
)
from app.interfaces.settlement.schemas import ErrorResponse
from app.shared.security.rate_limiting import limiter

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/sign-up",
    response_model=IdentityResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    summary="Create an account",
)
@limiter.limit(settings.rate_limit_heavy)
def sign_up(
    request: Request,
    body: SignUpRequest,
    use_case: SignUpUseCase = Depends(get_sign_up_use_case),
) -> IdentityResponse:
    """Create an email/password account."""
    result = use_case.execute(SignUpCommand(email=body.email, password=body.password))
    return IdentityResponse(id=result.user_id, email=result.email, is_operator=result.is_operator)


@router.post(
    "/sign-in",
    response_model=SessionResponse,
    responses={401: {"model": ErrorResponse}},
    summary="Sign in",
)
@limiter.limit(settings.rate_limit_heavy)
def sign_in(
    request: Request,
    body: SignInRequest,
    use_case: SignInUseCase = Depends(get_sign_in_use_case),
) -> SessionResponse:
    """Exchange email and password for a bearer token."""
    result = use_case.execute(SignInCommand(email=body.email, password=body.password))
    return SessionResponse(
        access_token=result.access_token,
        token_type=result.token_type,
        expires_at=result.expires_at,
        user=IdentityResponse(
            id=result.identity.user_id,
            email=result.identity.email,
            is_operator=result.identity.is_operator,
        ),
    )


@router.post(
    "/sign-out",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Sign out",
)
def sign_out(
    token: str = Depends(get_bearer_token),
    use_case: SignOutUseCase = Depends(get_sign_out_use_case),
) -> None:
    """Revoke the current session."""
    use_case.execute(token)


@router.get(
    "/me",
    response_model=IdentityResponse,
    responses={401: {"model": ErrorResponse}},
    summary="Current caller",
)
def me(identity: Identity = Depends(get_current_identity)) -> IdentityResponse:
    return IdentityResponse(
        id=identity.user_id, email=identity.email, is_operator=identity.is_operator
    )
