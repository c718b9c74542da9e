"""
Events emitted by the settlement context.

ChangeEvent deliberately carries no record body: subscribers treat it
as a signal to re-fetch the authoritative record.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID


class Collection(Enum):
    """Record collections that publish change events."""

    CLIENTS = "clients"
    BROKER_CREDENTIALS = "broker_credentials"
    PAYMENT_PROOFS = "payment_proofs"
    ADMIN_SETTINGS = "admin_settings"


class ChangeOp(Enum):
    """Kind of write that happened."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class ChangeEvent:
    """A record in a collection was written."""

    collection: Collection
    op: ChangeOp
    record_id: str
    client_id: Optional[UUID] = None
    user_id: Optional[UUID] = None
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        return {
            "collection": self.collection.value,
            "op": self.op.value,
            "record_id": self.record_id,
            "client_id": str(self.client_id) if self.client_id else None,
            "occurred_at": self.occurred_at.isoformat(),
        }


class NotificationKind(Enum):
    """Outbound notifications sent to the operator."""

    NEW_SIGNUP = "new_signup"
    AUTO_APPROVED = "auto_approved"


@dataclass(frozen=True)
class Notification:
    """Fire-and-forget message for the operator's messaging channel."""

    kind: NotificationKind
    client_name: str
    client_email: str
    client_whatsapp: str
    status: str

    def to_payload(self) -> dict[str, str]:
        return {
            "event": self.kind.value,
            "client_name": self.client_name,
            "client_email": self.client_email,
            "client_whatsapp": self.client_whatsapp,
            "status": self.status,
        }
