"""
Health check router.

Provides liveness and readiness endpoints for probes.
No business logic. Returns application status and version.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.interfaces.dependencies import get_engine
from app.interfaces.settlement.schemas import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns application health status and version.",
)
def health_check() -> HealthResponse:
    """Return current application health status."""
    return HealthResponse(status="ok", version=settings.version)


@router.get(
    "/health/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
    summary="Readiness check",
    description="Returns ok only when the record store answers.",
)
def readiness_check(engine: Engine = Depends(get_engine)):
    """Ping the database."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("Readiness check failed: %s", type(exc).__name__)
        return JSONResponse(
            status_code=503, content={"status": "unavailable", "version": settings.version}
        )
    return HealthResponse(status="ok", version=settings.version)
