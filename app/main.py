"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (one per bounded context)
- Error handlers (centralized domain-to-HTTP mapping)
- Security middleware (headers, rate limiting)
- Logging configuration
- Database schema and the uploads static mount

No business logic belongs here.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.core.config import settings
from app.infrastructure.database import init_db
from app.interfaces.assistant.router import router as assistant_router
from app.interfaces.dependencies import get_engine, get_notifier
from app.interfaces.health import router as health_router
from app.interfaces.identity.router import router as identity_router
from app.interfaces.realtime import router as realtime_router
from app.interfaces.settlement.admin_router import router as admin_router
from app.interfaces.settlement.router import router as client_router
from app.shared.errors.handlers import register_error_handlers
from app.shared.logging import configure_logging
from app.shared.security.headers import SecurityHeadersMiddleware
from app.shared.security.rate_limiting import limiter, rate_limit_exceeded_handler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: prepare the schema, drain the notifier on exit."""
    if settings.auto_create_schema:
        init_db(app.dependency_overrides.get(get_engine, get_engine)())
    yield
    notifier = app.dependency_overrides.get(get_notifier, get_notifier)()
    close = getattr(notifier, "close", None)
    if close is not None:
        close(wait=False)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and security middleware.
    This is the composition root of the application.

    Returns:
        A fully configured FastAPI application instance.
    """
    configure_logging(level=settings.log_level, sql_echo=settings.debug)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # --- Rate Limiting ---
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # --- Security Middleware ---
    app.add_middleware(SecurityHeadersMiddleware)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(identity_router, prefix="/api/v1")
    app.include_router(client_router, prefix="/api/v1")
    app.include_router(admin_router, prefix="/api/v1")
    app.include_router(assistant_router, prefix="/api/v1")
    app.include_router(realtime_router, prefix="/api/v1")

    # --- Uploaded payment screenshots (unless served from elsewhere) ---
    if settings.blob_public_url.startswith("/"):
        Path(settings.blob_dir).mkdir(parents=True, exist_ok=True)
        app.mount(
            settings.blob_public_url,
            StaticFiles(directory=settings.blob_dir),
            name="uploads",
        )

    return app


app = create_app()
