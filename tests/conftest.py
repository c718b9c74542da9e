"""
Shared test fixtures.

Every test runs against a fresh in-memory SQLite database; outbound
ports (change feed, notifier, blob store) are replaced by recording
fakes so assertions can inspect what was published.
"""

import os
import tempfile

# Settings are read at import time; point them at throwaway resources first.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BLOB_DIR", tempfile.mkdtemp(prefix="profitshare-blobs-"))
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.infrastructure.database import create_db_engine, init_db
from app.infrastructure.identity.sql_identity_adapter import SqlIdentityAdapter
from app.infrastructure.realtime.change_stream import ChangeStreamManager
from app.infrastructure.settlement.admin_setting_repository import (
    AdminSettingRepositoryAdapter,
)
from app.infrastructure.settlement.broker_credential_repository import (
    BrokerCredentialRepositoryAdapter,
)
from app.infrastructure.settlement.client_repository import ClientRepositoryAdapter
from app.infrastructure.settlement.payment_proof_repository import (
    PaymentProofRepositoryAdapter,
)
from app.interfaces.dependencies import (
    get_blob_store,
    get_change_feed,
    get_change_stream,
    get_engine,
    get_identity_service,
    get_notifier,
)
from app.shared.security.rate_limiting import limiter
from factories import (
    InMemoryBlobStore,
    RecordingChangeFeed,
    RecordingNotifier,
    TickingClock,
)


@pytest.fixture(autouse=True)
def _disable_rate_limits():
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def change_feed() -> RecordingChangeFeed:
    return RecordingChangeFeed()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def blob_store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture
def client_repo(engine) -> ClientRepositoryAdapter:
    return ClientRepositoryAdapter(engine=engine)


@pytest.fixture
def proof_repo(engine) -> PaymentProofRepositoryAdapter:
    return PaymentProofRepositoryAdapter(engine=engine)


@pytest.fixture
def credential_repo(engine) -> BrokerCredentialRepositoryAdapter:
    return BrokerCredentialRepositoryAdapter(engine=engine)


@pytest.fixture
def setting_repo(engine) -> AdminSettingRepositoryAdapter:
    return AdminSettingRepositoryAdapter(engine=engine)


@pytest.fixture
def identity_service(engine) -> SqlIdentityAdapter:
    return SqlIdentityAdapter(engine=engine, secret="test-secret")


@pytest.fixture
def change_stream() -> ChangeStreamManager:
    return ChangeStreamManager(max_queue_size=10, keepalive_seconds=0.05)


@pytest.fixture
def api_app(engine, identity_service, change_stream, notifier, blob_store) -> FastAPI:
    """The real application wired to test infrastructure."""
    from app.main import create_app

    app = create_app()
    app.dependency_overrides[get_engine] = lambda: engine
    app.dependency_overrides[get_identity_service] = lambda: identity_service
    app.dependency_overrides[get_change_stream] = lambda: change_stream
    app.dependency_overrides[get_change_feed] = lambda: change_stream
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    return app


@pytest.fixture
def api(api_app) -> TestClient:
    return TestClient(api_app)
