"""
Use case: Sunday Activation.

Input: None
Output: SundayActivationResult
Side effects: Every non-rejected client pending Sunday activation
    becomes active, in one transaction.
Failure cases: ServiceUnavailableError (nothing is reported as flipped).
"""

import logging
from collections.abc import Callable
from datetime import datetime

from app.application.settlement.dtos import SundayActivationResult
from app.domain.settlement.events import ChangeEvent, ChangeOp, Collection
from app.domain.settlement.lifecycle import SUNDAY_ELIGIBLE_STATUSES
from app.domain.settlement.ports import ChangeFeedPort, ClientRepository
from app.shared.clock import utcnow

logger = logging.getLogger(__name__)


class ActivateSundayBatchUseCase:
    """Flips the pending Sunday batch to active.

    Idempotent: a second run finds nothing pending and flips nothing.
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

    def execute(self) -> SundayActivationResult:
        """Run the Sunday Activation batch."""
        flipped = self._client_repo.activate_pending(
            SUNDAY_ELIGIBLE_STATUSES, self._clock()
        )
        logger.info("Sunday activation: %d client(s) activated", len(flipped))

        for client_id in flipped:
            self._change_feed.publish(
                ChangeEvent(
                    collection=Collection.CLIENTS,
                    op=ChangeOp.UPDATE,
                    record_id=str(client_id),
                    client_id=client_id,
                )
            )
        return SundayActivationResult(activated_count=len(flipped), client_ids=flipped)
