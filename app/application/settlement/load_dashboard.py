"""
Use case: Load the signed-in client's dashboard.

Input: LoadDashboardQuery (user_id, email)
Output: DashboardResult (financials only once the dashboard is ready)
Side effects: Links the identity to an application on first load.
Failure cases: None. A missing client is reported as the no_record gate.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from app.application.settlement.client_lookup import resolve_client
from app.application.settlement.dtos import DashboardResult, LoadDashboardQuery
from app.application.settlement.mappers import client_to_profile, client_to_result
from app.domain.settlement.entities import DashboardGate
from app.domain.settlement.lifecycle import dashboard_gate
from app.domain.settlement.ports import ChangeFeedPort, ClientRepository
from app.shared.clock import utcnow

logger = logging.getLogger(__name__)


class LoadDashboardUseCase:
    """Builds the dashboard view from the latest stored client record.

    The view is always re-derived from a fresh read so that duplicate
    or out-of-order change notifications cannot leave it stale.
    """

    def __init__(
        self,
        client_repo: ClientRepository,
        change_feed: ChangeFeedPort,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._client_repo = client_repo
        self._change_feed = change_feed
        self._clock = clock

    def execute(self, query: LoadDashboardQuery) -> DashboardResult:
        """Run the load dashboard use case."""
        client = resolve_client(
            self._client_repo,
            self._change_feed,
            user_id=query.user_id,
            email=query.email,
            now=self._clock(),
        )
        gate = dashboard_gate(client)
        logger.debug("Dashboard gate for %s: %s", query.user_id, gate.value)

        if client is None:
            return DashboardResult(
                gate=gate.value,
                profile=None,
                client=None,
                show_financials=False,
                settlement_due=False,
            )

        if gate is not DashboardGate.READY:
            return DashboardResult(
                gate=gate.value,
                profile=client_to_profile(client),
                client=None,
                show_financials=False,
                settlement_due=False,
            )

        return DashboardResult(
            gate=gate.value,
            profile=client_to_profile(client),
            client=client_to_result(client),
            show_financials=True,
            settlement_due=client.breakdown.settlement_due,
        )
