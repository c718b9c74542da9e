"""
Use case: The client's settlement section.

Input: GetSettlementDetailsQuery (user_id, email)
Output: SettlementDetailsResult
Side effects: Links the identity to an application on first use.
Failure cases: None. Without an application the section is empty.
"""

from collections.abc import Callable
from datetime import datetime

from app.application.settlement.client_lookup import resolve_client
from app.application.settlement.dtos import (
    GetSettlementDetailsQuery,
    SettlementDetailsResult,
)
from app.application.settlement.mappers import proof_to_result
from app.domain.settlement.entities import DashboardGate
from app.domain.settlement.lifecycle import dashboard_gate
from app.domain.settlement.money import ZERO
from app.domain.settlement.ports import (
    AdminSettingRepository,
    ChangeFeedPort,
    ClientRepository,
    PaymentProofRepository,
)
from app.domain.settlement.settings_store import resolve_all
from app.shared.clock import utcnow


class GetSettlementDetailsUseCase:
    """Amount due, where to send it, and what was already sent."""

    def __init__(
        self,
        client_repo: ClientRepository,
        proof_repo: PaymentProofRepository,
        setting_repo: AdminSettingRepository,
        change_feed: ChangeFeedPort,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._client_repo = client_repo
        self._proof_repo = proof_repo
        self._setting_repo = setting_repo
        self._change_feed = change_feed
        self._clock = clock

    def execute(self, query: GetSettlementDetailsQuery) -> SettlementDetailsResult:
        """Run the settlement details query."""
        destinations = resolve_all(self._setting_repo.get_all())
        client = resolve_client(
            self._client_repo,
            self._change_feed,
            user_id=query.user_id,
            email=query.email,
            now=self._clock(),
        )
        if client is None or dashboard_gate(client) is not DashboardGate.READY:
            return SettlementDetailsResult(
                available=False, amount_due=ZERO, destinations=destinations, proofs=[]
            )

        breakdown = client.breakdown
        proofs = self._proof_repo.list_for_client(client.id)
        return SettlementDetailsResult(
            available=breakdown.settlement_due,
            amount_due=breakdown.share,
            destinations=destinations,
            proofs=[proof_to_result(p) for p in proofs],
        )
