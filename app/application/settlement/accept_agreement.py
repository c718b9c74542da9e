"""
Use case: Accept the profit-share agreement.

Input: AcceptAgreementCommand (user_id, email)
Output: AcceptAgreementResult
Side effects: Sets agreement_accepted and its timestamp, once.
Failure cases: ClientNotFoundError, AgreementNotAvailableError.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from app.application.settlement.client_lookup import resolve_client
from app.application.settlement.dtos import AcceptAgreementCommand, AcceptAgreementResult
from app.application.settlement.mappers import client_to_result
from app.domain.settlement.errors import ClientNotFoundError
from app.domain.settlement.events import ChangeEvent, ChangeOp, Collection
from app.domain.settlement.lifecycle import accept_agreement
from app.domain.settlement.ports import ChangeFeedPort, ClientRepository
from app.shared.clock import utcnow

logger = logging.getLogger(__name__)


class AcceptAgreementUseCase:
    """Records the one-time agreement acceptance for the caller's client."""

    def __init__(
        self,
        client_repo: ClientRepository,
        change_feed: ChangeFeedPort,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._client_repo = client_repo
        self._change_feed = change_feed
        self._clock = clock

    def execute(self, command: AcceptAgreementCommand) -> AcceptAgreementResult:
        """Run the accept agreement use case.

        Raises:
            ClientNotFoundError: If the caller has no application.
            AgreementNotAvailableError: If the client is not approved/active.
        """
        now = self._clock()
        client = resolve_client(
            self._client_repo,
            self._change_feed,
            user_id=command.user_id,
            email=command.email,
            now=now,
        )
        if client is None:
            raise ClientNotFoundError(str(command.user_id))

        changed = accept_agreement(client, now)
        if changed:
            self._client_repo.save(client)
            logger.info("Agreement accepted: client=%s", client.id)
            self._change_feed.publish(
                ChangeEvent(
                    collection=Collection.CLIENTS,
                    op=ChangeOp.UPDATE,
                    record_id=str(client.id),
                    client_id=client.id,
                )
            )
        return AcceptAgreementResult(client=client_to_result(client), changed=changed)
