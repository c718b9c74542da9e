"""
Domain-specific errors for the settlement bounded context.

All errors raised from the domain layer must be defined here.
These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""


class SettlementDomainError(Exception):
    """Base error for all settlement domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class ValidationError(SettlementDomainError):
    """Raised when input fails validation before any write is attempted.

    Attributes:
        fields: Mapping of field name to a user-facing message.
    """

    def __init__(self, fields: dict[str, str]) -> None:
        super().__init__("Validation failed: " + ", ".join(sorted(fields)))
        self.fields = dict(fields)


class ClientNotFoundError(SettlementDomainError):
    """Raised when a client record cannot be found."""

    def __init__(self, client_id: str) -> None:
        super().__init__(f"Client not found: {client_id}")
        self.client_id = client_id


class PaymentProofNotFoundError(SettlementDomainError):
    """Raised when a payment proof cannot be found."""

    def __init__(self, proof_id: str) -> None:
        super().__init__(f"Payment proof not found: {proof_id}")
        self.proof_id = proof_id


class BrokerCredentialNotFoundError(SettlementDomainError):
    """Raised when a broker credential cannot be found for the caller."""

    def __init__(self, credential_id: str) -> None:
        super().__init__(f"Broker credential not found: {credential_id}")
        self.credential_id = credential_id


class InvalidTransitionError(SettlementDomainError):
    """Raised when a lifecycle field is moved along an edge that does not exist."""

    def __init__(self, axis: str, current: str, target: str) -> None:
        super().__init__(f"Invalid {axis} transition: {current} -> {target}")
        self.axis = axis
        self.current = current
        self.target = target


class InvalidStatusCombinationError(SettlementDomainError):
    """Raised when status and activation status would form an invalid pair."""

    def __init__(self, status: str, activation_status: str) -> None:
        super().__init__(
            f"Invalid combination: status={status}, activation_status={activation_status}"
        )
        self.status = status
        self.activation_status = activation_status


class AgreementNotAvailableError(SettlementDomainError):
    """Raised when a client tries to accept the agreement before approval."""

    def __init__(self, status: str) -> None:
        super().__init__(f"Agreement cannot be accepted while status is {status}")
        self.status = status


class SettlementNotAvailableError(SettlementDomainError):
    """Raised when a payment proof is submitted without anything to settle."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Settlement not available: {reason}")
        self.reason = reason


class ConfirmationRequiredError(SettlementDomainError):
    """Raised when a destructive operation is called without confirmation."""

    def __init__(self, action: str) -> None:
        super().__init__(f"Explicit confirmation required to {action}")
        self.action = action


class ConstraintViolationError(SettlementDomainError):
    """Raised when the record store rejects a write (duplicate, bad reference)."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Constraint violation: {reason}")
        self.reason = reason


class ServiceUnavailableError(SettlementDomainError):
    """Raised when a boundary service (database, blob store) fails."""

    def __init__(self, service: str, reason: str) -> None:
        super().__init__(f"{service} unavailable: {reason}")
        self.service = service
        self.reason = reason
