"""
Use case: List broker logins.

Input: ListBrokerCredentialsQuery (optional owner, reveal flag)
Output: list[BrokerCredentialResult]
Side effects: None (read-only query).
Failure cases: None.
"""

from app.application.settlement.dtos import (
    BrokerCredentialResult,
    ListBrokerCredentialsQuery,
)
from app.application.settlement.mappers import credential_to_result
from app.domain.settlement.ports import BrokerCredentialRepository, ClientRepository


class ListBrokerCredentialsUseCase:
    """Returns credentials with passwords masked by default.

    The operator view (no owner filter) also names the owning client.
    """

    def __init__(
        self,
        credential_repo: BrokerCredentialRepository,
        client_repo: ClientRepository,
    ) -> None:
        self._credential_repo = credential_repo
        self._client_repo = client_repo

    def execute(self, query: ListBrokerCredentialsQuery) -> list[BrokerCredentialResult]:
        """Run the list broker credentials query."""
        if query.user_id is not None:
            credentials = self._credential_repo.list_for_user(query.user_id)
            return [credential_to_result(c, reveal=query.reveal) for c in credentials]

        names = {
            c.user_id: c.full_name
            for c in self._client_repo.list_clients()
            if c.user_id is not None
        }
        return [
            credential_to_result(
                c, reveal=query.reveal, client_name=names.get(c.user_id)
            )
            for c in self._credential_repo.list_all()
        ]
