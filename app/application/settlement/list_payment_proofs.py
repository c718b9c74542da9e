"""
Use case: List payment proofs for the operator console.

Input: None
Output: PaymentProofListResult
Side effects: None (read-only query).
Failure cases: None.
"""

from app.application.settlement.dtos import PaymentProofListResult
from app.application.settlement.mappers import proof_to_result
from app.domain.settlement.payment_workflow import settlement_totals
from app.domain.settlement.ports import ClientRepository, PaymentProofRepository


class ListPaymentProofsUseCase:
    """Returns every proof with its client's name and the status rollups."""

    def __init__(
        self,
        proof_repo: PaymentProofRepository,
        client_repo: ClientRepository,
    ) -> None:
        self._proof_repo = proof_repo
        self._client_repo = client_repo

    def execute(self) -> PaymentProofListResult:
        """Run the list payment proofs query."""
        proofs = self._proof_repo.list_all()
        names = {c.id: c.full_name for c in self._client_repo.list_clients()}
        totals = settlement_totals(proofs)
        return PaymentProofListResult(
            proofs=[proof_to_result(p, client_name=names.get(p.client_id)) for p in proofs],
            pending_total=totals.pending,
            confirmed_total=totals.confirmed,
            pending_count=totals.pending_count,
        )
