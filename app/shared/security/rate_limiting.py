"""
Rate limiting configuration and setup.

Uses slowapi with per-IP keys. The default limit covers every route;
sign-up, sign-in, applications, proof uploads and the assistant relay
carry the stricter heavy limit. Counters live in memory unless
``rate_limit_storage_uri`` points at a shared store.
"""

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from app.core.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit_default],
    storage_uri=settings.rate_limit_storage_uri,
    enabled=settings.rate_limit_enabled,
)


async def rate_limit_exceeded_handler(
    _request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """Answer 429 with the standard error envelope.

    Returns:
        A 429 JSON response naming the limit that was hit.
    """
    return JSONResponse(
        status_code=429,
        content={"error": "Rate limit exceeded", "detail": str(exc.detail)},
        headers={"Retry-After": "60"},
    )
