"""
Pydantic schemas for settlement API request/response validation.

These schemas enforce input validation and define the API contract.
Field-level business rules (minimum capital, platform lists) are
enforced by the domain so every field error is reported at once.
No business logic belongs here.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.application.settlement.dtos import (
    BrokerCredentialResult,
    ClientProfileResult,
    ClientResult,
    PaymentProofResult,
)

# ------------------------------------------------------------------
# Shared
# ------------------------------------------------------------------


class HealthResponse(BaseModel):
    """Response schema for health check endpoint."""

    status: str
    version: str


class ErrorResponse(BaseModel):
    """Standard error response schema.

    Attributes:
        error: Short error category.
        detail: Human-readable explanation, when safe to expose.
        fields: Per-field messages for validation failures.
    """

    error: str
    detail: Optional[str] = None
    fields: Optional[dict[str, str]] = None


# ------------------------------------------------------------------
# Clients
# ------------------------------------------------------------------


class ApplicationRequest(BaseModel):
    """Request schema for the public onboarding form."""

    full_name: str = Field(default="", max_length=200)
    whatsapp: str = Field(default="", max_length=50)
    email: str = Field(default="", max_length=320)
    platform: str = Field(default="", max_length=50)
    account_balance: Decimal = Field(..., description="Declared capital in USD")
    agreed_terms: bool = False


class ClientResponse(BaseModel):
    """A client with derived financials."""

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

    @classmethod
    def from_result(cls, result: ClientResult) -> "ClientResponse":
        return cls(
            id=result.id,
            full_name=result.full_name,
            email=result.email,
            whatsapp=result.whatsapp,
            platform=result.platform,
            account_balance=result.account_balance,
            starting_balance=result.starting_balance,
            net_profit=result.net_profit,
            share=result.share,
            status=result.status,
            activation_status=result.activation_status,
            agreement_accepted=result.agreement_accepted,
            agreement_accepted_at=result.agreement_accepted_at,
            created_at=result.created_at,
            last_updated=result.last_updated,
        )


class ClientProfileResponse(BaseModel):
    """A client as shown before the dashboard unlocks. Carries no money fields."""

    id: UUID
    full_name: str
    email: str
    platform: str
    status: str
    activation_status: str
    agreement_accepted: bool

    @classmethod
    def from_result(cls, result: ClientProfileResult) -> "ClientProfileResponse":
        return cls(
            id=result.id,
            full_name=result.full_name,
            email=result.email,
            platform=result.platform,
            status=result.status,
            activation_status=result.activation_status,
            agreement_accepted=result.agreement_accepted,
        )


class DashboardResponse(BaseModel):
    """Response schema for the client dashboard.

    Attributes:
        gate: no_record, pending_review, agreement_required or ready.
        show_financials: Whether balances, profit and share may be shown.
        settlement_due: Whether the settlement section should be offered.
        profile: The linked client, without financials.
        client: The full client record, only once the gate is ready.
    """

    gate: str
    show_financials: bool
    settlement_due: bool
    profile: Optional[ClientProfileResponse] = None
    client: Optional[ClientResponse] = None


class AcceptAgreementResponse(BaseModel):
    """Response schema for agreement acceptance."""

    changed: bool
    client: ClientResponse


class UpdateClientRequest(BaseModel):
    """Operator edit. Omitted fields are left unchanged."""

    account_balance: Optional[Decimal] = Field(default=None, ge=0)
    starting_balance: Optional[Decimal] = Field(default=None, ge=0)
    status: Optional[str] = Field(default=None, max_length=32)
    activation_status: Optional[str] = Field(default=None, max_length=32)


class SundayActivationResponse(BaseModel):
    """Response schema for the Sunday Activation batch."""

    activated_count: int
    client_ids: list[UUID]


class AdminOverviewResponse(BaseModel):
    """Headline statistics for the operator console."""

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


class BrokerCredentialRequest(BaseModel):
    """Request schema for submitting a broker login."""

    broker_name: str = Field(default="", max_length=200)
    server_name: str = Field(default="", max_length=200)
    login_number: str = Field(default="", max_length=200)
    password: str = Field(default="", max_length=200)
    platform: str = Field(default="", max_length=20)


class BrokerCredentialResponse(BaseModel):
    """A broker login. The password is masked unless revealed."""

    id: UUID
    broker_name: str
    server_name: str
    login_number: str
    password: str
    platform: str
    created_at: Optional[datetime]
    client_name: Optional[str] = None

    @classmethod
    def from_result(cls, result: BrokerCredentialResult) -> "BrokerCredentialResponse":
        return cls(
            id=result.id,
            broker_name=result.broker_name,
            server_name=result.server_name,
            login_number=result.login_number,
            password=result.password,
            platform=result.platform,
            created_at=result.created_at,
            client_name=result.client_name,
        )


# ------------------------------------------------------------------
# Payment proofs
# ------------------------------------------------------------------


class PaymentProofResponse(BaseModel):
    """One payment proof."""

    id: UUID
    client_id: UUID
    screenshot_url: str
    amount: Decimal
    status: str
    created_at: Optional[datetime]
    confirmed_at: Optional[datetime]
    client_name: Optional[str] = None

    @classmethod
    def from_result(cls, result: PaymentProofResult) -> "PaymentProofResponse":
        return cls(
            id=result.id,
            client_id=result.client_id,
            screenshot_url=result.screenshot_url,
            amount=result.amount,
            status=result.status,
            created_at=result.created_at,
            confirmed_at=result.confirmed_at,
            client_name=result.client_name,
        )


class PaymentProofListResponse(BaseModel):
    """Operator proof list with rollups."""

    proofs: list[PaymentProofResponse]
    pending_total: Decimal
    confirmed_total: Decimal
    pending_count: int


class ConfirmPaymentProofResponse(BaseModel):
    """Response schema for a confirmation. changed is False on repeats."""

    changed: bool
    proof: PaymentProofResponse


class SettlementDetailsResponse(BaseModel):
    """The client's settlement section."""

    available: bool
    amount_due: Decimal
    destinations: dict[str, str]
    proofs: list[PaymentProofResponse]


# ------------------------------------------------------------------
# Settings
# ------------------------------------------------------------------


class PaymentSettingsResponse(BaseModel):
    """Payment destinations.

    Attributes:
        values: Stored values, empty when missing (for the edit form).
        display: Values with "Not configured" for missing ones.
    """

    values: dict[str, str]
    display: dict[str, str]


class SavePaymentSettingsRequest(BaseModel):
    """Operator settings form. Omitted keys are left unchanged."""

    mpesa_name: Optional[str] = Field(default=None, max_length=255)
    mpesa_number: Optional[str] = Field(default=None, max_length=255)
    crypto_network: Optional[str] = Field(default=None, max_length=255)
    crypto_wallet_address: Optional[str] = Field(default=None, max_length=255)


class SavePaymentSettingsResponse(BaseModel):
    """Response schema for a settings save."""

    changed_keys: list[str]
    settings: PaymentSettingsResponse
