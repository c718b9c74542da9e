"""
Adapter: Payment proof repository.

Implements PaymentProofRepository port.
Confirmation is a conditional update so concurrent confirmations of the
same proof leave exactly one recorded.
"""

from typing import Any, Optional
from uuid import UUID

from sqlalchemy import insert, select, update
from sqlalchemy.engine import Engine

from app.domain.settlement.entities import PaymentProof, ProofStatus
from app.domain.settlement.ports import PaymentProofRepository
from app.infrastructure.database import as_utc, payment_proofs
from app.infrastructure.settlement.sql_errors import translate_db_errors


def _to_entity(row: Any) -> PaymentProof:
    return PaymentProof(
        id=row.id,
        client_id=row.client_id,
        user_id=row.user_id,
        screenshot_url=row.screenshot_url,
        amount=row.amount,
        status=ProofStatus(row.status),
        created_at=as_utc(row.created_at),
        confirmed_at=as_utc(row.confirmed_at),
        confirmed_by=row.confirmed_by,
    )


class PaymentProofRepositoryAdapter(PaymentProofRepository):
    """SQL implementation of the payment proof repository."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def add(self, proof: PaymentProof) -> None:
        with translate_db_errors("insert payment proof"):
            with self._engine.begin() as conn:
                conn.execute(
                    insert(payment_proofs).values(
                        id=proof.id,
                        client_id=proof.client_id,
                        user_id=proof.user_id,
                        screenshot_url=proof.screenshot_url,
                        amount=proof.amount,
                        status=proof.status.value,
                        created_at=proof.created_at,
                        confirmed_at=proof.confirmed_at,
                        confirmed_by=proof.confirmed_by,
                    )
                )

    def get(self, proof_id: UUID) -> Optional[PaymentProof]:
        with translate_db_errors("get payment proof"):
            with self._engine.connect() as conn:
                row = conn.execute(
                    select(payment_proofs).where(payment_proofs.c.id == proof_id)
                ).first()
        return _to_entity(row) if row is not None else None

    def _list(self, condition: Any = None) -> list[PaymentProof]:
        query = select(payment_proofs).order_by(payment_proofs.c.created_at.desc())
        if condition is not None:
            query = query.where(condition)
        with translate_db_errors("list payment proofs"):
            with self._engine.connect() as conn:
                rows = conn.execute(query).fetchall()
        return [_to_entity(row) for row in rows]

    def list_for_client(self, client_id: UUID) -> list[PaymentProof]:
        return self._list(payment_proofs.c.client_id == client_id)

    def list_all(self) -> list[PaymentProof]:
        return self._list()

    def mark_confirmed(self, proof: PaymentProof) -> bool:
        """Write the confirmation only if the stored row is still pending."""
        with translate_db_errors("confirm payment proof"):
            with self._engine.begin() as conn:
                result = conn.execute(
                    update(payment_proofs)
                    .where(
                        (payment_proofs.c.id == proof.id)
                        & (payment_proofs.c.status == ProofStatus.PENDING.value)
                    )
                    .values(
                        status=ProofStatus.CONFIRMED.value,
                        confirmed_at=proof.confirmed_at,
                        confirmed_by=proof.confirmed_by,
                    )
                )
        return result.rowcount == 1
