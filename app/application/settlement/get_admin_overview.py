"""
Use case: Headline statistics for the operator console.

Input: None
Output: AdminOverviewResult
Side effects: None (read-only query).
Failure cases: None.
"""

from app.application.settlement.dtos import AdminOverviewResult
from app.domain.settlement.entities import ActivationStatus
from app.domain.settlement.money import ZERO, quantize
from app.domain.settlement.payment_workflow import settlement_totals
from app.domain.settlement.ports import (
    BrokerCredentialRepository,
    ClientRepository,
    PaymentProofRepository,
)


class GetAdminOverviewUseCase:
    """Rolls up clients, proofs and credentials. Nothing here is stored."""

    def __init__(
        self,
        client_repo: ClientRepository,
        proof_repo: PaymentProofRepository,
        credential_repo: BrokerCredentialRepository,
    ) -> None:
        self._client_repo = client_repo
        self._proof_repo = proof_repo
        self._credential_repo = credential_repo

    def execute(self) -> AdminOverviewResult:
        """Run the admin overview query."""
        clients = self._client_repo.list_clients()
        totals = settlement_totals(self._proof_repo.list_all())

        total_net_profit = sum((c.breakdown.net_profit for c in clients), ZERO)
        return AdminOverviewResult(
            total_clients=len(clients),
            active_count=sum(
                1 for c in clients if c.activation_status is ActivationStatus.ACTIVE
            ),
            pending_sunday_count=sum(
                1
                for c in clients
                if c.activation_status is ActivationStatus.PENDING_SUNDAY_ACTIVATION
            ),
            total_net_profit=quantize(total_net_profit),
            share_pending=totals.pending,
            share_confirmed=totals.confirmed,
            pending_proof_count=totals.pending_count,
            credential_count=len(self._credential_repo.list_all()),
        )
