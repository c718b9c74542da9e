"""
Payment proof workflow.

    pending ──(operator confirms)──▶ confirmed

A proof can only be created while the client has a positive net
profit, and confirmation is terminal and idempotent.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional
from uuid import UUID

from app.domain.settlement.entities import (
    Client,
    DashboardGate,
    PaymentProof,
    ProofStatus,
)
from app.domain.settlement.errors import SettlementNotAvailableError, ValidationError
from app.domain.settlement.lifecycle import dashboard_gate
from app.domain.settlement.money import ZERO, quantize
from app.domain.settlement.share_calculator import ShareBreakdown


@dataclass(frozen=True)
class SettlementTotals:
    """Rollup of proof amounts by status."""

    pending: Decimal
    confirmed: Decimal
    pending_count: int
    confirmed_count: int


def require_settlement(client: Client) -> ShareBreakdown:
    """Return the current breakdown if the client can settle now.

    Raises:
        SettlementNotAvailableError: If the dashboard is not ready, the
            client is not linked, or there is no positive net profit.
    """
    if dashboard_gate(client) is not DashboardGate.READY:
        raise SettlementNotAvailableError("dashboard is not unlocked")
    if client.user_id is None:
        raise SettlementNotAvailableError("client is not linked to an account")
    breakdown = client.breakdown
    if not breakdown.settlement_due:
        raise SettlementNotAvailableError("no positive net profit")
    return breakdown


def open_proof(
    client: Client,
    screenshot_url: str,
    now: datetime,
    amount: Optional[Decimal] = None,
) -> PaymentProof:
    """Create a pending proof for a client's current settlement.

    Args:
        client: The submitting client. Must be fully onboarded and linked.
        screenshot_url: Public URL of the uploaded evidence.
        now: Creation timestamp.
        amount: Claimed amount. Defaults to the current share.

    Returns:
        A new PaymentProof in the pending state.

    Raises:
        SettlementNotAvailableError: If the client cannot settle now.
        ValidationError: If the amount or evidence is missing/invalid.
    """
    breakdown = require_settlement(client)

    errors: dict[str, str] = {}
    claimed = breakdown.share if amount is None else quantize(amount)
    if claimed <= 0:
        errors["amount"] = "Amount must be greater than zero"
    if not screenshot_url:
        errors["screenshot"] = "A payment screenshot is required"
    if errors:
        raise ValidationError(errors)

    return PaymentProof(
        client_id=client.id,
        user_id=client.user_id,  # type: ignore[arg-type]
        screenshot_url=screenshot_url,
        amount=claimed,
        created_at=now,
    )


def confirm_proof(proof: PaymentProof, operator_id: UUID, now: datetime) -> bool:
    """Mark a proof confirmed.

    Returns:
        True if the proof moved to confirmed, False if it already was.
    """
    if proof.status is ProofStatus.CONFIRMED:
        return False
    proof.status = ProofStatus.CONFIRMED
    proof.confirmed_at = now
    proof.confirmed_by = operator_id
    return True


def settlement_totals(proofs: Iterable[PaymentProof]) -> SettlementTotals:
    """Sum proof amounts by status. Each proof is counted once."""
    pending = confirmed = ZERO
    pending_count = confirmed_count = 0
    seen: set[UUID] = set()
    for proof in proofs:
        if proof.id in seen:
            continue
        seen.add(proof.id)
        if proof.status is ProofStatus.CONFIRMED:
            confirmed += proof.amount
            confirmed_count += 1
        else:
            pending += proof.amount
            pending_count += 1
    return SettlementTotals(
        pending=quantize(pending),
        confirmed=quantize(confirmed),
        pending_count=pending_count,
        confirmed_count=confirmed_count,
    )
