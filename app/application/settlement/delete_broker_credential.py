"""
Use case: Client deletes one of their broker logins.

Input: DeleteBrokerCredentialCommand (credential_id, user_id, confirmed)
Output: None
Side effects: Deletes the credential; publishes a change event.
Failure cases: ConfirmationRequiredError, BrokerCredentialNotFoundError.
"""

import logging

from app.application.settlement.dtos import DeleteBrokerCredentialCommand
from app.domain.settlement.errors import (
    BrokerCredentialNotFoundError,
    ConfirmationRequiredError,
)
from app.domain.settlement.events import ChangeEvent, ChangeOp, Collection
from app.domain.settlement.ports import BrokerCredentialRepository, ChangeFeedPort

logger = logging.getLogger(__name__)


class DeleteBrokerCredentialUseCase:
    """Removes a credential owned by the caller."""

    def __init__(
        self,
        credential_repo: BrokerCredentialRepository,
        change_feed: ChangeFeedPort,
    ) -> None:
        self._credential_repo = credential_repo
        self._change_feed = change_feed

    def execute(self, command: DeleteBrokerCredentialCommand) -> None:
        """Run the delete broker credential use case.

        Another user's credential is reported as not found.
        """
        if not command.confirmed:
            raise ConfirmationRequiredError("remove broker credentials")

        credential = self._credential_repo.get(command.credential_id)
        if credential is None or credential.user_id != command.user_id:
            raise BrokerCredentialNotFoundError(str(command.credential_id))

        if not self._credential_repo.delete(credential.id):
            raise BrokerCredentialNotFoundError(str(command.credential_id))

        logger.info("Broker credential deleted: id=%s", credential.id)
        self._change_feed.publish(
            ChangeEvent(
                collection=Collection.BROKER_CREDENTIALS,
                op=ChangeOp.DELETE,
                record_id=str(credential.id),
                user_id=credential.user_id,
            )
        )
