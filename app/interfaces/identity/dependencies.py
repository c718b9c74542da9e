"""
Dependency injection for the identity bounded context.

Provides the use cases and the authentication dependencies every other
router relies on: ``get_current_identity`` and ``require_operator``.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.application.identity.sign_in import SignInUseCase
from app.application.identity.sign_out import SignOutUseCase
from app.application.identity.sign_up import SignUpUseCase
from app.domain.identity.entities import Identity
from app.domain.identity.errors import NotAuthenticatedError, PermissionDeniedError
from app.domain.identity.ports import IdentityPort
from app.interfaces.dependencies import get_identity_service

bearer_scheme = HTTPBearer(auto_error=False)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """Return the raw bearer token or fail with 401."""
    if credentials is None or not credentials.credentials:
        raise NotAuthenticatedError()
    return credentials.credentials


def get_current_identity(
    token: str = Depends(get_bearer_token),
    identity_service: IdentityPort = Depends(get_identity_service),
) -> Identity:
    """Resolve the caller behind the bearer token."""
    identity = identity_service.resolve_session(token)
    if identity is None:
        raise NotAuthenticatedError()
    return identity


def require_operator(identity: Identity = Depends(get_current_identity)) -> Identity:
    """Allow only callers holding the operator role."""
    if not identity.is_operator:
        raise PermissionDeniedError("use the operator console")
    return identity


def get_sign_up_use_case(
    identity_service: IdentityPort = Depends(get_identity_service),
) -> SignUpUseCase:
    return SignUpUseCase(identity=identity_service)


def get_sign_in_use_case(
    identity_service: IdentityPort = Depends(get_identity_service),
) -> SignInUseCase:
    return SignInUseCase(identity=identity_service)


def get_sign_out_use_case(
    identity_service: IdentityPort = Depends(get_identity_service),
) -> SignOutUseCase:
    return SignOutUseCase(identity=identity_service)
