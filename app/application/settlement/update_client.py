"""
Use case: Operator edits a client.

Input: UpdateClientCommand (client_id, balances, status, activation_status)
Output: ClientResult
Side effects: Updates the client and bumps last_updated.
Failure cases: ClientNotFoundError, ValidationError, InvalidTransitionError,
    InvalidStatusCombinationError.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from enum import Enum
from typing import Optional, TypeVar

from app.application.settlement.dtos import ClientResult, UpdateClientCommand
from app.application.settlement.mappers import client_to_result
from app.domain.settlement.entities import ActivationStatus, ClientStatus
from app.domain.settlement.errors import ClientNotFoundError, ValidationError
from app.domain.settlement.events import ChangeEvent, ChangeOp, Collection
from app.domain.settlement.lifecycle import apply_operator_edit
from app.domain.settlement.ports import ChangeFeedPort, ClientRepository
from app.shared.clock import utcnow

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def _parse_enum(enum_cls: type[E], raw: Optional[str], field: str, errors: dict) -> Optional[E]:
    if raw is None:
        return None
    try:
        return enum_cls(raw)
    except ValueError:
        errors[field] = f"Unknown value: {raw}"
        return None


class UpdateClientUseCase:
    """Applies an operator edit to balances and lifecycle fields.

    The edit is validated in full against the lifecycle rules before
    anything is written.
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

    def execute(self, command: UpdateClientCommand) -> ClientResult:
        """Run the update client use case."""
        errors: dict[str, str] = {}
        status = _parse_enum(ClientStatus, command.status, "status", errors)
        activation = _parse_enum(
            ActivationStatus, command.activation_status, "activation_status", errors
        )
        if errors:
            raise ValidationError(errors)

        client = self._client_repo.get_by_id(command.client_id)
        if client is None:
            raise ClientNotFoundError(str(command.client_id))

        apply_operator_edit(
            client,
            self._clock(),
            status=status,
            activation_status=activation,
            account_balance=command.account_balance,
            starting_balance=command.starting_balance,
        )
        self._client_repo.save(client)
        logger.info(
            "Client updated: client=%s status=%s activation=%s",
            client.id,
            client.status.value,
            client.activation_status.value,
        )
        self._change_feed.publish(
            ChangeEvent(
                collection=Collection.CLIENTS,
                op=ChangeOp.UPDATE,
                record_id=str(client.id),
                client_id=client.id,
            )
        )
        return client_to_result(client)
