"""
Data Transfer Objects for the settlement application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID


# ------------------------------------------------------------------
# Clients
# ------------------------------------------------------------------


@dataclass(frozen=True)
class SubmitApplicationCommand:
    """Input DTO for the public onboarding form.

    Attributes:
        full_name: Applicant's name.
        whatsapp: WhatsApp number used for notifications.
        email: Contact email, later used to link the sign-in account.
        platform: Trading platform label from the form.
        account_balance: Declared capital (raw form value).
        agreed_terms: Whether the terms checkbox was ticked.
    """

    full_name: str
    whatsapp: str
    email: str
    platform: str
    account_balance: object
    agreed_terms: bool


@dataclass(frozen=True)
class ClientResult:
    """Output DTO describing one client with derived financials.

    Attributes:
        net_profit: account_balance - starting_balance (zero before approval).
        share: Operator's 50% share of positive net profit.
    """

    id: UUID
    full_name: str
    email: str
    whatsapp: str
    platform: str
    account_balance: Decimal
    starting_balance: Optional[Decimal]
    net_profit: Decimal
    share: Decimal
    status: str
    activation_status: str
    agreement_accepted: bool
    agreement_accepted_at: Optional[datetime]
    created_at: Optional[datetime]
    last_updated: Optional[datetime]
    user_id: Optional[UUID] = None


@dataclass(frozen=True)
class ClientProfileResult:
    """A client's identity and lifecycle state, without any money fields."""

    id: UUID
    full_name: str
    email: str
    platform: str
    status: str
    activation_status: str
    agreement_accepted: bool
    user_id: Optional[UUID] = None


@dataclass(frozen=True)
class LoadDashboardQuery:
    """Input DTO for loading the signed-in client's dashboard."""

    user_id: UUID
    email: str


@dataclass(frozen=True)
class DashboardResult:
    """Output DTO for the client dashboard.

    Attributes:
        gate: no_record, pending_review, agreement_required or ready.
        profile: The linked client without balances, profit or share.
        client: The full client record, only when gate is ready.
        show_financials: True only when gate is ready.
        settlement_due: True when there is a positive net profit to settle.
    """

    gate: str
    profile: Optional[ClientProfileResult]
    client: Optional[ClientResult]
    show_financials: bool
    settlement_due: bool


@dataclass(frozen=True)
class AcceptAgreementCommand:
    """Input DTO for accepting the profit-share agreement."""

    user_id: UUID
    email: str


@dataclass(frozen=True)
class AcceptAgreementResult:
    """Output DTO for agreement acceptance.

    Attributes:
        changed: False when the agreement had already been accepted.
    """

    client: ClientResult
    changed: bool


@dataclass(frozen=True)
class UpdateClientCommand:
    """Input DTO for an operator edit. None means "leave unchanged"."""

    client_id: UUID
    account_balance: Optional[Decimal] = None
    starting_balance: Optional[Decimal] = None
    status: Optional[str] = None
    activation_status: Optional[str] = None


@dataclass(frozen=True)
class DeleteClientCommand:
    """Input DTO for deleting a client."""

    client_id: UUID
    confirmed: bool = False


@dataclass(frozen=True)
class ListClientsQuery:
    """Input DTO for the operator's client table.

    Attributes:
        activation_status: Optional activation filter tab.
    """

    activation_status: Optional[str] = None


@dataclass(frozen=True)
class SundayActivationResult:
    """Output DTO for the Sunday Activation batch."""

    activated_count: int
    client_ids: list[UUID] = field(default_factory=list)


@dataclass(frozen=True)
class AdminOverviewResult:
    """Output DTO for the operator's headline statistics."""

    total_clients: int
    active_count: int
    pending_sunday_count: int
    total_net_profit: Decimal
    share_pending: Decimal
    share_confirmed: Decimal
    pending_proof_count: int
    credential_count: int


# ------------------------------------------------------------------
# Broker credentials
# ------------------------------------------------------------------


@dataclass(frozen=True)
class SubmitBrokerCredentialCommand:
    """Input DTO for submitting a broker login."""

    user_id: UUID
    broker_name: str
    server_name: str
    login_number: str
    password: str
    platform: str


@dataclass(frozen=True)
class ListBrokerCredentialsQuery:
    """Input DTO for listing broker logins.

    Attributes:
        user_id: Owner filter. None lists every credential (operator view).
        reveal: Return passwords in clear instead of masked.
    """

    user_id: Optional[UUID] = None
    reveal: bool = False


@dataclass(frozen=True)
class BrokerCredentialResult:
    """Output DTO for one broker login."""

    id: UUID
    user_id: UUID
    broker_name: str
    server_name: str
    login_number: str
    password: str
    platform: str
    created_at: Optional[datetime]
    client_name: Optional[str] = None


@dataclass(frozen=True)
class DeleteBrokerCredentialCommand:
    """Input DTO for deleting one of the caller's broker logins."""

    credential_id: UUID
    user_id: UUID
    confirmed: bool = False


# ------------------------------------------------------------------
# Payment proofs
# ------------------------------------------------------------------


@dataclass(frozen=True)
class SubmitPaymentProofCommand:
    """Input DTO for uploading a settlement screenshot.

    Attributes:
        amount: Claimed amount. Defaults to the current share.
    """

    user_id: UUID
    email: str
    filename: str
    content_type: str
    data: bytes
    amount: Optional[Decimal] = None


@dataclass(frozen=True)
class PaymentProofResult:
    """Output DTO for one payment proof."""

    id: UUID
    client_id: UUID
    screenshot_url: str
    amount: Decimal
    status: str
    created_at: Optional[datetime]
    confirmed_at: Optional[datetime]
    confirmed_by: Optional[UUID]
    client_name: Optional[str] = None


@dataclass(frozen=True)
class ConfirmPaymentProofCommand:
    """Input DTO for an operator confirming a proof."""

    proof_id: UUID
    operator_id: UUID


@dataclass(frozen=True)
class ConfirmPaymentProofResult:
    """Output DTO for a confirmation.

    Attributes:
        changed: False when the proof had already been confirmed.
    """

    proof: PaymentProofResult
    changed: bool


@dataclass(frozen=True)
class PaymentProofListResult:
    """Output DTO for the operator's proof list with rollups."""

    proofs: list[PaymentProofResult]
    pending_total: Decimal
    confirmed_total: Decimal
    pending_count: int


@dataclass(frozen=True)
class GetSettlementDetailsQuery:
    """Input DTO for the client's settlement section."""

    user_id: UUID
    email: str


@dataclass(frozen=True)
class SettlementDetailsResult:
    """Output DTO for the client's settlement section.

    Attributes:
        available: True when a proof can be submitted now.
        amount_due: Current share.
        destinations: Payment settings with the not-configured sentinel.
        proofs: The client's proof history, newest first.
    """

    available: bool
    amount_due: Decimal
    destinations: dict[str, str]
    proofs: list[PaymentProofResult]


# ------------------------------------------------------------------
# Settings
# ------------------------------------------------------------------


@dataclass(frozen=True)
class PaymentSettingsResult:
    """Output DTO for payment settings.

    Attributes:
        values: Raw stored values (empty string when missing).
        display: Values with the not-configured sentinel applied.
    """

    values: dict[str, str]
    display: dict[str, str]


@dataclass(frozen=True)
class SavePaymentSettingsCommand:
    """Input DTO for saving payment settings."""

    values: dict[str, str]


@dataclass(frozen=True)
class SavePaymentSettingsResult:
    """Output DTO for a settings save.

    Attributes:
        changed_keys: Keys that were actually written.
    """

    changed_keys: list[str]
    settings: PaymentSettingsResult
