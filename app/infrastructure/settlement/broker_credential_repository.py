"""
Adapter: Broker credential repository.

Implements BrokerCredentialRepository port.
"""

from typing import Any, Optional
from uuid import UUID

from sqlalchemy import delete, insert, select
from sqlalchemy.engine import Engine

from app.domain.settlement.entities import BrokerCredential
from app.domain.settlement.ports import BrokerCredentialRepository
from app.infrastructure.database import as_utc, broker_credentials
from app.infrastructure.settlement.sql_errors import translate_db_errors


def _to_entity(row: Any) -> BrokerCredential:
    return BrokerCredential(
        id=row.id,
        user_id=row.user_id,
        broker_name=row.broker_name,
        server_name=row.server_name,
        login_number=row.login_number,
        password=row.password,
        platform=row.platform,
        created_at=as_utc(row.created_at),
    )


class BrokerCredentialRepositoryAdapter(BrokerCredentialRepository):
    """SQL implementation of the broker credential repository."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def add(self, credential: BrokerCredential) -> None:
        with translate_db_errors("insert broker credential"):
            with self._engine.begin() as conn:
                conn.execute(
                    insert(broker_credentials).values(
                        id=credential.id,
                        user_id=credential.user_id,
                        broker_name=credential.broker_name,
                        server_name=credential.server_name,
                        login_number=credential.login_number,
                        password=credential.password,
                        platform=credential.platform,
                        created_at=credential.created_at,
                    )
                )

    def get(self, credential_id: UUID) -> Optional[BrokerCredential]:
        with translate_db_errors("get broker credential"):
            with self._engine.connect() as conn:
                row = conn.execute(
                    select(broker_credentials).where(broker_credentials.c.id == credential_id)
                ).first()
        return _to_entity(row) if row is not None else None

    def _list(self, condition: Any = None) -> list[BrokerCredential]:
        query = select(broker_credentials).order_by(broker_credentials.c.created_at.desc())
        if condition is not None:
            query = query.where(condition)
        with translate_db_errors("list broker credentials"):
            with self._engine.connect() as conn:
                rows = conn.execute(query).fetchall()
        return [_to_entity(row) for row in rows]

    def list_for_user(self, user_id: UUID) -> list[BrokerCredential]:
        return self._list(broker_credentials.c.user_id == user_id)

    def list_all(self) -> list[BrokerCredential]:
        return self._list()

    def delete(self, credential_id: UUID) -> bool:
        with translate_db_errors("delete broker credential"):
            with self._engine.begin() as conn:
                result = conn.execute(
                    delete(broker_credentials).where(broker_credentials.c.id == credential_id)
                )
        return result.rowcount > 0
