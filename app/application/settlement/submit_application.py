"""
Use case: Submit an onboarding application.

Input: SubmitApplicationCommand (name, whatsapp, email, platform, balance, terms)
Output: ClientResult
Side effects: Inserts a client; publishes a change event; notifies the operator.
Failure cases: ValidationError, ConstraintViolationError.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from typing import Optional

from app.application.settlement.dtos import ClientResult, SubmitApplicationCommand
from app.application.settlement.mappers import client_to_result
from app.domain.settlement.entities import Client, ClientStatus
from app.domain.settlement.events import (
    ChangeEvent,
    ChangeOp,
    Collection,
    Notification,
    NotificationKind,
)
from app.domain.settlement.ports import ChangeFeedPort, ClientRepository, NotifierPort
from app.domain.settlement.validation import validate_application
from app.shared.clock import utcnow

logger = logging.getLogger(__name__)


class SubmitApplicationUseCase:
    """Orchestrates the public onboarding form.

    Validates every field before touching the record store, inserts the
    applicant, and tells the operator about it without waiting on the
    notifier.
    """

    def __init__(
        self,
        client_repo: ClientRepository,
        notifier: NotifierPort,
        change_feed: ChangeFeedPort,
        auto_approve_min_balance: Optional[Decimal] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._client_repo = client_repo
        self._notifier = notifier
        self._change_feed = change_feed
        self._auto_approve_min_balance = auto_approve_min_balance
        self._clock = clock

    def execute(self, command: SubmitApplicationCommand) -> ClientResult:
        """Run the submit application use case.

        Args:
            command: The raw form values.

        Returns:
            The created client.

        Raises:
            ValidationError: If any field is invalid. Nothing is written.
            ConstraintViolationError: If the email already applied.
        """
        form = validate_application(
            full_name=command.full_name,
            whatsapp=command.whatsapp,
            email=command.email,
            platform=command.platform,
            account_balance=command.account_balance,
            agreed_terms=command.agreed_terms,
        )

        now = self._clock()
        auto_approved = (
            self._auto_approve_min_balance is not None
            and form.account_balance >= self._auto_approve_min_balance
        )
        client = Client(
            full_name=form.full_name,
            email=form.email,
            whatsapp=form.whatsapp,
            platform=form.platform,
            account_balance=form.account_balance,
            status=ClientStatus.APPROVED if auto_approved else ClientStatus.NEW_APPLICANT,
            starting_balance=form.account_balance if auto_approved else None,
            created_at=now,
            last_updated=now,
        )
        self._client_repo.add(client)
        logger.info(
            "Application submitted: client=%s auto_approved=%s", client.id, auto_approved
        )

        self._change_feed.publish(
            ChangeEvent(
                collection=Collection.CLIENTS,
                op=ChangeOp.INSERT,
                record_id=str(client.id),
                client_id=client.id,
            )
        )
        self._notifier.notify(
            Notification(
                kind=NotificationKind.AUTO_APPROVED if auto_approved else NotificationKind.NEW_SIGNUP,
                client_name=client.full_name,
                client_email=client.email,
                client_whatsapp=client.whatsapp,
                status=client.status.value,
            )
        )
        return client_to_result(client)
