"""
Use case: List clients for the operator console.

Input: ListClientsQuery (optional activation filter)
Output: list[ClientResult]
Side effects: None (read-only query).
Failure cases: ValidationError for an unknown filter value.
"""

import logging

from app.application.settlement.dtos import ClientResult, ListClientsQuery
from app.application.settlement.mappers import client_to_result
from app.domain.settlement.entities import ActivationStatus
from app.domain.settlement.errors import ValidationError
from app.domain.settlement.ports import ClientRepository

logger = logging.getLogger(__name__)


class ListClientsUseCase:
    """Returns clients, newest first, with derived net profit and share."""

    def __init__(self, client_repo: ClientRepository) -> None:
        self._client_repo = client_repo

    def execute(self, query: ListClientsQuery) -> list[ClientResult]:
        """Run the list clients use case."""
        activation = None
        if query.activation_status is not None:
            try:
                activation = ActivationStatus(query.activation_status)
            except ValueError:
                raise ValidationError(
                    {"activation_status": f"Unknown value: {query.activation_status}"}
                ) from None

        clients = self._client_repo.list_clients(activation_status=activation)
        return [client_to_result(c) for c in clients]
