"""
Database engine and schema.

All tables are declared as SQLAlchemy Core ``Table`` objects on one
``MetaData`` so the same schema runs on PostgreSQL in production and on
SQLite in tests.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    Uuid,
    create_engine,
)
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

metadata = MetaData()

MONEY = Numeric(14, 2, asdecimal=True)

clients = Table(
    "clients",
    metadata,
    Column("id", Uuid, primary_key=True),
    Column("user_id", Uuid, nullable=True, unique=True),
    Column("full_name", String(100), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("whatsapp", String(20), nullable=False),
    Column("platform", String(50), nullable=False),
    Column("account_balance", MONEY, nullable=False),
    Column("starting_balance", MONEY, nullable=True),
    Column("status", String(32), nullable=False),
    Column("activation_status", String(32), nullable=False),
    Column("agreement_accepted", Boolean, nullable=False, default=False),
    Column("agreement_accepted_at", DateTime(timezone=True), nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("last_updated", DateTime(timezone=True), nullable=False),
)

broker_credentials = Table(
    "broker_credentials",
    metadata,
    Column("id", Uuid, primary_key=True),
    Column("user_id", Uuid, nullable=False, index=True),
    Column("broker_name", String(100), nullable=False),
    Column("server_name", String(100), nullable=False),
    Column("login_number", String(100), nullable=False),
    Column("password", String(100), nullable=False),
    Column("platform", String(20), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

payment_proofs = Table(
    "payment_proofs",
    metadata,
    Column("id", Uuid, primary_key=True),
    Column("client_id", Uuid, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False),
    Column("user_id", Uuid, nullable=False),
    Column("screenshot_url", Text, nullable=False),
    Column("amount", MONEY, nullable=False),
    Column("status", String(16), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("confirmed_at", DateTime(timezone=True), nullable=True),
    Column("confirmed_by", Uuid, nullable=True),
    Index("ix_payment_proofs_client_id", "client_id"),
)

admin_settings = Table(
    "admin_settings",
    metadata,
    Column("key", String(64), primary_key=True),
    Column("value", String(255), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

users = Table(
    "users",
    metadata,
    Column("id", Uuid, primary_key=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("password_hash", String(255), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

user_roles = Table(
    "user_roles",
    metadata,
    Column("user_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role", String(32), primary_key=True),
)

sessions = Table(
    "sessions",
    metadata,
    Column("id", Uuid, primary_key=True),
    Column("user_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("expires_at", DateTime(timezone=True), nullable=False),
    Column("revoked_at", DateTime(timezone=True), nullable=True),
)


def create_db_engine(database_url: str) -> Engine:
    """Build an engine for the configured database.

    In-memory SQLite shares one connection across threads so that every
    request sees the same database.
    """
    if database_url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite+pysqlite://"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url, pool_pre_ping=True)


def init_db(engine: Engine) -> None:
    """Create any missing tables."""
    metadata.create_all(engine)
    logger.info("Database schema ready (%d tables).", len(metadata.tables))


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes read back from SQLite."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)
