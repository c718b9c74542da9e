"""
Domain entities for the settlement bounded context.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from app.domain.settlement.money import ZERO
from app.domain.settlement.share_calculator import ShareBreakdown, compute_share


class ClientStatus(Enum):
    """Application / engagement state of a client."""

    NEW_APPLICANT = "new_applicant"
    APPROVED = "approved"
    ACTIVE = "active"
    PAUSED = "paused"
    REJECTED = "rejected"


class ActivationStatus(Enum):
    """Trading-cycle state of a client's managed account."""

    PENDING_SUNDAY_ACTIVATION = "pending_sunday_activation"
    ACTIVE = "active"
    PENDING_SETTLEMENT = "pending_settlement"
    SETTLED = "settled"


class ProofStatus(Enum):
    """Review state of a payment proof."""

    PENDING = "pending"
    CONFIRMED = "confirmed"


class DashboardGate(Enum):
    """What a client is allowed to see on their dashboard."""

    NO_RECORD = "no_record"
    PENDING_REVIEW = "pending_review"
    AGREEMENT_REQUIRED = "agreement_required"
    READY = "ready"


class TradingPlatform(Enum):
    """Platforms offered on the application form."""

    MT4 = "MetaTrader 4 (MT4)"
    MT5 = "MetaTrader 5 (MT5)"
    CTRADER = "cTrader"
    TRADINGVIEW = "TradingView"
    OTHER = "Other"


class CredentialPlatform(Enum):
    """Platform tag attached to submitted broker logins."""

    MT4 = "MT4"
    MT5 = "MT5"
    CTRADER = "cTrader"
    TRADINGVIEW = "TradingView"


@dataclass
class Client:
    """An applicant and, once approved, a managed trading account.

    Net profit is never stored; it is always derived from the two
    balances, which the operator edits independently.
    """

    full_name: str
    email: str
    whatsapp: str
    platform: str
    account_balance: Decimal
    id: UUID = field(default_factory=uuid4)
    user_id: Optional[UUID] = None
    starting_balance: Optional[Decimal] = None
    status: ClientStatus = ClientStatus.NEW_APPLICANT
    activation_status: ActivationStatus = ActivationStatus.PENDING_SUNDAY_ACTIVATION
    agreement_accepted: bool = False
    agreement_accepted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    last_updated: Optional[datetime] = None

    @property
    def breakdown(self) -> ShareBreakdown:
        """Net profit and share; zero until a starting balance is set."""
        if self.starting_balance is None:
            return ShareBreakdown(net_profit=ZERO, share=ZERO)
        return compute_share(self.starting_balance, self.account_balance)


@dataclass(frozen=True)
class BrokerCredential:
    """A broker login submitted by a client. Created or deleted, never edited."""

    id: UUID
    user_id: UUID
    broker_name: str
    server_name: str
    login_number: str
    password: str
    platform: str
    created_at: Optional[datetime] = None


@dataclass
class PaymentProof:
    """Evidence that a client sent the operator's share."""

    client_id: UUID
    user_id: UUID
    screenshot_url: str
    amount: Decimal
    id: UUID = field(default_factory=uuid4)
    status: ProofStatus = ProofStatus.PENDING
    created_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    confirmed_by: Optional[UUID] = None


@dataclass(frozen=True)
class AdminSetting:
    """A single payment-destination setting (last write wins)."""

    key: str
    value: str
    updated_at: Optional[datetime] = None
