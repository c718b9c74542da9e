"""
Adapter: Client repository.

Implements ClientRepository port.
Responsible for persisting and retrieving clients through SQLAlchemy Core.
"""

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.engine import Engine

from app.domain.settlement.entities import ActivationStatus, Client, ClientStatus
from app.domain.settlement.errors import ClientNotFoundError
from app.domain.settlement.ports import ClientRepository
from app.infrastructure.database import as_utc, broker_credentials, clients, payment_proofs
from app.infrastructure.settlement.sql_errors import translate_db_errors

logger = logging.getLogger(__name__)


def _to_row(client: Client) -> dict[str, Any]:
    return {
        "id": client.id,
        "user_id": client.user_id,
        "full_name": client.full_name,
        "email": client.email,
        "whatsapp": client.whatsapp,
        "platform": client.platform,
        "account_balance": client.account_balance,
        "starting_balance": client.starting_balance,
        "status": client.status.value,
        "activation_status": client.activation_status.value,
        "agreement_accepted": client.agreement_accepted,
        "agreement_accepted_at": client.agreement_accepted_at,
        "created_at": client.created_at,
        "last_updated": client.last_updated,
    }


def _to_entity(row: Any) -> Client:
    return Client(
        id=row.id,
        user_id=row.user_id,
        full_name=row.full_name,
        email=row.email,
        whatsapp=row.whatsapp,
        platform=row.platform,
        account_balance=row.account_balance,
        starting_balance=row.starting_balance,
        status=ClientStatus(row.status),
        activation_status=ActivationStatus(row.activation_status),
        agreement_accepted=bool(row.agreement_accepted),
        agreement_accepted_at=as_utc(row.agreement_accepted_at),
        created_at=as_utc(row.created_at),
        last_updated=as_utc(row.last_updated),
    )


class ClientRepositoryAdapter(ClientRepository):
    """SQL implementation of the client repository.

    Implements the ClientRepository port defined in the domain layer.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def _fetch_one(self, condition: Any, operation: str) -> Optional[Client]:
        with translate_db_errors(operation):
            with self._engine.connect() as conn:
                row = conn.execute(select(clients).where(condition)).first()
        return _to_entity(row) if row is not None else None

    def get_by_id(self, client_id: UUID) -> Optional[Client]:
        return self._fetch_one(clients.c.id == client_id, "get client")

    def get_by_user_id(self, user_id: UUID) -> Optional[Client]:
        return self._fetch_one(clients.c.user_id == user_id, "get client by user")

    def get_by_email(self, email: str) -> Optional[Client]:
        return self._fetch_one(
            func.lower(clients.c.email) == email.strip().lower(), "get client by email"
        )

    def list_clients(
        self, activation_status: Optional[ActivationStatus] = None
    ) -> list[Client]:
        """Return clients newest first, optionally filtered by activation."""
        query = select(clients).order_by(clients.c.created_at.desc())
        if activation_status is not None:
            query = query.where(clients.c.activation_status == activation_status.value)
        with translate_db_errors("list clients"):
            with self._engine.connect() as conn:
                rows = conn.execute(query).fetchall()
        return [_to_entity(row) for row in rows]

    def add(self, client: Client) -> None:
        with translate_db_errors("insert client"):
            with self._engine.begin() as conn:
                conn.execute(insert(clients).values(**_to_row(client)))

    def save(self, client: Client) -> None:
        row = _to_row(client)
        row.pop("id")
        row.pop("created_at")
        with translate_db_errors("update client"):
            with self._engine.begin() as conn:
                result = conn.execute(
                    update(clients).where(clients.c.id == client.id).values(**row)
                )
        if result.rowcount == 0:
            raise ClientNotFoundError(str(client.id))

    def delete_cascade(self, client_id: UUID) -> bool:
        """Delete a client, its payment proofs and its broker credentials.

        Credentials belong to the client's linked identity; an unlinked
        client has none.
        """
        with translate_db_errors("delete client"):
            with self._engine.begin() as conn:
                user_id = conn.execute(
                    select(clients.c.user_id).where(clients.c.id == client_id)
                ).first()
                if user_id is None:
                    return False
                proofs = conn.execute(
                    delete(payment_proofs).where(payment_proofs.c.client_id == client_id)
                ).rowcount
                credentials = 0
                if user_id[0] is not None:
                    credentials = conn.execute(
                        delete(broker_credentials).where(
                            broker_credentials.c.user_id == user_id[0]
                        )
                    ).rowcount
                conn.execute(delete(clients).where(clients.c.id == client_id))
        logger.info(
            "Deleted client %s with %d proofs and %d credentials",
            client_id,
            proofs,
            credentials,
        )
        return True

    def activate_pending(
        self, eligible: Iterable[ClientStatus], now: datetime
    ) -> list[UUID]:
        """Flip every eligible pending client to active in one transaction."""
        statuses = [status.value for status in eligible]
        condition = (
            clients.c.activation_status == ActivationStatus.PENDING_SUNDAY_ACTIVATION.value
        ) & clients.c.status.in_(statuses)
        with translate_db_errors("sunday activation"):
            with self._engine.begin() as conn:
                ids = list(conn.execute(select(clients.c.id).where(condition)).scalars())
                if ids:
                    conn.execute(
                        update(clients)
                        .where(condition & clients.c.id.in_(ids))
                        .values(
                            activation_status=ActivationStatus.ACTIVE.value,
                            last_updated=now,
                        )
                    )
        return ids
