"""
Use case: Sign out.

Input: The caller's bearer token.
Output: None
Side effects: Revokes the session; the token stops resolving.
Failure cases: None. Unknown tokens are ignored.
"""

from app.domain.identity.ports import IdentityPort


class SignOutUseCase:
    def __init__(self, identity: IdentityPort) -> None:
        self._identity = identity

    def execute(self, access_token: str) -> None:
        """Run the sign out use case."""
        self._identity.sign_out(access_token)
