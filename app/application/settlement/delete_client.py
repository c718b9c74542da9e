"""
Use case: Operator deletes a client.

Input: DeleteClientCommand (client_id, confirmed)
Output: None
Side effects: Deletes the client, its payment proofs and broker credentials.
Failure cases: ConfirmationRequiredError, ClientNotFoundError.
"""

import logging

from app.application.settlement.dtos import DeleteClientCommand
from app.domain.settlement.errors import ClientNotFoundError, ConfirmationRequiredError
from app.domain.settlement.events import ChangeEvent, ChangeOp, Collection
from app.domain.settlement.ports import ChangeFeedPort, ClientRepository

logger = logging.getLogger(__name__)


class DeleteClientUseCase:
    """Removes a client and everything it owns."""

    def __init__(self, client_repo: ClientRepository, change_feed: ChangeFeedPort) -> None:
        self._client_repo = client_repo
        self._change_feed = change_feed

    def execute(self, command: DeleteClientCommand) -> None:
        """Run the delete client use case.

        Raises:
            ConfirmationRequiredError: If the caller did not confirm.
            ClientNotFoundError: If the client does not exist.
        """
        if not command.confirmed:
            raise ConfirmationRequiredError("delete a client")

        if not self._client_repo.delete_cascade(command.client_id):
            raise ClientNotFoundError(str(command.client_id))

        logger.info("Client deleted: client=%s", command.client_id)
        self._change_feed.publish(
            ChangeEvent(
                collection=Collection.CLIENTS,
                op=ChangeOp.DELETE,
                record_id=str(command.client_id),
                client_id=command.client_id,
            )
        )
