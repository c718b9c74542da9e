"""
Shared dependency providers.

Process-wide adapters (engine, change stream, notifier, blob store,
identity service) are built once and reused by every context's
dependency functions. Tests replace them through
``app.dependency_overrides``.
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.engine import Engine

from app.core.config import settings
from app.domain.identity.ports import IdentityPort
from app.domain.settlement.ports import BlobStorePort, ChangeFeedPort, NotifierPort
from app.infrastructure.database import create_db_engine
from app.infrastructure.identity.sql_identity_adapter import SqlIdentityAdapter
from app.infrastructure.realtime.change_stream import ChangeStreamManager
from app.infrastructure.settlement.local_blob_store import LocalBlobStoreAdapter
from app.infrastructure.settlement.webhook_notifier import WebhookNotifierAdapter


@lru_cache
def get_engine() -> Engine:
    """Return the application's SQLAlchemy engine."""
    return create_db_engine(settings.database_url)


@lru_cache
def get_change_stream() -> ChangeStreamManager:
    return ChangeStreamManager()


def get_change_feed() -> ChangeFeedPort:
    """Publishing side of the change stream."""
    return get_change_stream()


@lru_cache
def get_notifier() -> NotifierPort:
    return WebhookNotifierAdapter(
        webhook_url=settings.notifier_webhook_url,
        timeout=settings.notifier_timeout_seconds,
    )


@lru_cache
def get_blob_store() -> BlobStorePort:
    return LocalBlobStoreAdapter(root=settings.blob_dir, public_base_url=settings.blob_public_url)


def get_identity_service(engine: Engine = Depends(get_engine)) -> IdentityPort:
    return SqlIdentityAdapter(
        engine=engine,
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl_minutes=settings.session_ttl_minutes,
    )
