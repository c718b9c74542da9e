"""
Use case: Client submits a broker login.

Input: SubmitBrokerCredentialCommand
Output: BrokerCredentialResult (password masked)
Side effects: Inserts a credential; publishes a change event.
Failure cases: ValidationError.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from uuid import uuid4

from app.application.settlement.dtos import (
    BrokerCredentialResult,
    SubmitBrokerCredentialCommand,
)
from app.application.settlement.mappers import credential_to_result
from app.domain.settlement.entities import BrokerCredential
from app.domain.settlement.events import ChangeEvent, ChangeOp, Collection
from app.domain.settlement.ports import BrokerCredentialRepository, ChangeFeedPort
from app.domain.settlement.validation import validate_credential
from app.shared.clock import utcnow

logger = logging.getLogger(__name__)


class SubmitBrokerCredentialUseCase:
    """Stores a broker login for the calling user."""

    def __init__(
        self,
        credential_repo: BrokerCredentialRepository,
        change_feed: ChangeFeedPort,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._credential_repo = credential_repo
        self._change_feed = change_feed
        self._clock = clock

    def execute(self, command: SubmitBrokerCredentialCommand) -> BrokerCredentialResult:
        """Run the submit broker credential use case."""
        form = validate_credential(
            broker_name=command.broker_name,
            server_name=command.server_name,
            login_number=command.login_number,
            password=command.password,
            platform=command.platform,
        )
        credential = BrokerCredential(
            id=uuid4(),
            user_id=command.user_id,
            broker_name=form.broker_name,
            server_name=form.server_name,
            login_number=form.login_number,
            password=form.password,
            platform=form.platform,
            created_at=self._clock(),
        )
        self._credential_repo.add(credential)
        logger.info(
            "Broker credential submitted: id=%s user=%s platform=%s",
            credential.id,
            credential.user_id,
            credential.platform,
        )
        self._change_feed.publish(
            ChangeEvent(
                collection=Collection.BROKER_CREDENTIALS,
                op=ChangeOp.INSERT,
                record_id=str(credential.id),
                user_id=credential.user_id,
            )
        )
        return credential_to_result(credential)
