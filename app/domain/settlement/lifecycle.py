"""
Client lifecycle rules.

A client carries two independent state axes:

    status             new_applicant ──▶ approved ──▶ active ◀──▶ paused
                             │              │           │           │
                             └──────────────┴───────────┴───────────┴──▶ rejected

    activation_status  pending_sunday_activation ──▶ active ──▶ pending_settlement
                             ▲                                        │
                             └──────────── settled ◀──────────────────┘

A rejected client can never be active, so every write is checked against
VALID_COMBINATIONS.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from app.domain.settlement.entities import (
    ActivationStatus,
    Client,
    ClientStatus,
    DashboardGate,
)
from app.domain.settlement.errors import (
    AgreementNotAvailableError,
    InvalidStatusCombinationError,
    InvalidTransitionError,
    ValidationError,
)

MIN_STARTING_BALANCE = Decimal("20")

STATUS_TRANSITIONS: dict[ClientStatus, frozenset[ClientStatus]] = {
    ClientStatus.NEW_APPLICANT: frozenset({ClientStatus.APPROVED, ClientStatus.REJECTED}),
    ClientStatus.APPROVED: frozenset({ClientStatus.ACTIVE, ClientStatus.REJECTED}),
    ClientStatus.ACTIVE: frozenset({ClientStatus.PAUSED, ClientStatus.REJECTED}),
    ClientStatus.PAUSED: frozenset({ClientStatus.ACTIVE, ClientStatus.REJECTED}),
    ClientStatus.REJECTED: frozenset(),
}

ACTIVATION_TRANSITIONS: dict[ActivationStatus, frozenset[ActivationStatus]] = {
    ActivationStatus.PENDING_SUNDAY_ACTIVATION: frozenset({ActivationStatus.ACTIVE}),
    ActivationStatus.ACTIVE: frozenset({ActivationStatus.PENDING_SETTLEMENT}),
    ActivationStatus.PENDING_SETTLEMENT: frozenset({ActivationStatus.SETTLED}),
    # Starting a new cycle is always an explicit operator edit.
    ActivationStatus.SETTLED: frozenset({ActivationStatus.PENDING_SUNDAY_ACTIVATION}),
}

_ALL_ACTIVATIONS = frozenset(ActivationStatus)

VALID_COMBINATIONS: dict[ClientStatus, frozenset[ActivationStatus]] = {
    ClientStatus.NEW_APPLICANT: _ALL_ACTIVATIONS,
    ClientStatus.APPROVED: _ALL_ACTIVATIONS,
    ClientStatus.ACTIVE: _ALL_ACTIVATIONS,
    ClientStatus.PAUSED: _ALL_ACTIVATIONS,
    ClientStatus.REJECTED: _ALL_ACTIVATIONS - {ActivationStatus.ACTIVE},
}

# Statuses whose holders see financial dashboard sections.
ENGAGED_STATUSES = frozenset({ClientStatus.APPROVED, ClientStatus.ACTIVE})

# Statuses eligible for the Sunday Activation batch. Rejected clients cannot
# be active, so they stay pending.
SUNDAY_ELIGIBLE_STATUSES = frozenset(ClientStatus) - {ClientStatus.REJECTED}


def is_valid_combination(status: ClientStatus, activation: ActivationStatus) -> bool:
    """Return True if the pair is an allowed composite state."""
    return activation in VALID_COMBINATIONS[status]


def check_status_transition(current: ClientStatus, target: ClientStatus) -> None:
    """Raise InvalidTransitionError unless ``current -> target`` is allowed.

    Staying in the same state is always allowed.
    """
    if current is target:
        return
    if target not in STATUS_TRANSITIONS[current]:
        raise InvalidTransitionError("status", current.value, target.value)


def check_activation_transition(
    current: ActivationStatus, target: ActivationStatus
) -> None:
    """Raise InvalidTransitionError unless ``current -> target`` is allowed."""
    if current is target:
        return
    if target not in ACTIVATION_TRANSITIONS[current]:
        raise InvalidTransitionError("activation_status", current.value, target.value)


def check_combination(status: ClientStatus, activation: ActivationStatus) -> None:
    """Raise InvalidStatusCombinationError for a forbidden pair."""
    if not is_valid_combination(status, activation):
        raise InvalidStatusCombinationError(status.value, activation.value)


def apply_operator_edit(
    client: Client,
    now: datetime,
    *,
    status: Optional[ClientStatus] = None,
    activation_status: Optional[ActivationStatus] = None,
    account_balance: Optional[Decimal] = None,
    starting_balance: Optional[Decimal] = None,
) -> Client:
    """Apply an operator edit to a client in place.

    All checks run before any field is touched, so a rejected edit
    leaves the client unchanged.

    Args:
        client: The client to edit.
        now: Timestamp used for ``last_updated``.
        status: New engagement status, if changing.
        activation_status: New activation status, if changing.
        account_balance: New current balance, if changing.
        starting_balance: New starting balance, if changing.

    Returns:
        The same client instance, updated.

    Raises:
        ValidationError: If a balance is negative or the starting balance
            is below the minimum capital.
        InvalidTransitionError: If a status axis moves along a missing edge.
        InvalidStatusCombinationError: If the resulting pair is forbidden.
    """
    errors: dict[str, str] = {}
    if account_balance is not None and account_balance < 0:
        errors["account_balance"] = "Balance cannot be negative"
    if starting_balance is not None and starting_balance < MIN_STARTING_BALANCE:
        errors["starting_balance"] = "Minimum capital is $20"
    if errors:
        raise ValidationError(errors)

    new_status = status or client.status
    new_activation = activation_status or client.activation_status
    check_status_transition(client.status, new_status)
    check_activation_transition(client.activation_status, new_activation)
    check_combination(new_status, new_activation)

    new_starting = starting_balance if starting_balance is not None else client.starting_balance
    new_account = account_balance if account_balance is not None else client.account_balance
    if new_status in ENGAGED_STATUSES and new_starting is None:
        # Approval fixes the starting balance at the current balance.
        if new_account < MIN_STARTING_BALANCE:
            raise ValidationError({"starting_balance": "Minimum capital is $20"})
        new_starting = new_account

    client.status = new_status
    client.activation_status = new_activation
    client.account_balance = new_account
    client.starting_balance = new_starting
    client.last_updated = now
    return client


def dashboard_gate(client: Optional[Client]) -> DashboardGate:
    """Decide what a client may see on their dashboard."""
    if client is None:
        return DashboardGate.NO_RECORD
    if client.status not in ENGAGED_STATUSES:
        return DashboardGate.PENDING_REVIEW
    if not client.agreement_accepted:
        return DashboardGate.AGREEMENT_REQUIRED
    return DashboardGate.READY


def accept_agreement(client: Client, now: datetime) -> bool:
    """Flip the agreement flag once.

    Returns:
        True if the flag changed, False if it was already accepted.

    Raises:
        AgreementNotAvailableError: If the client is not approved/active.
    """
    if client.status not in ENGAGED_STATUSES:
        raise AgreementNotAvailableError(client.status.value)
    if client.agreement_accepted:
        return False
    client.agreement_accepted = True
    client.agreement_accepted_at = now
    client.last_updated = now
    return True


def is_sunday_eligible(client: Client) -> bool:
    """Return True if the Sunday Activation batch would flip this client."""
    return (
        client.activation_status is ActivationStatus.PENDING_SUNDAY_ACTIVATION
        and client.status in SUNDAY_ELIGIBLE_STATUSES
    )
