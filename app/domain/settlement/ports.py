"""
Port interfaces (ABCs) for the settlement bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime
from typing import Optional
from uuid import UUID

from app.domain.settlement.entities import (
    ActivationStatus,
    BrokerCredential,
    Client,
    ClientStatus,
    PaymentProof,
)
from app.domain.settlement.events import ChangeEvent, Notification


class ClientRepository(ABC):
    """Port for persisting and retrieving clients."""

    @abstractmethod
    def get_by_id(self, client_id: UUID) -> Optional[Client]:
        """Return a client by its ID, or None if not found."""
        raise NotImplementedError

    @abstractmethod
    def get_by_user_id(self, user_id: UUID) -> Optional[Client]:
        """Return the client linked to an identity, or None."""
        raise NotImplementedError

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[Client]:
        """Return the client with this email (case-insensitive), or None."""
        raise NotImplementedError

    @abstractmethod
    def list_clients(
        self, activation_status: Optional[ActivationStatus] = None
    ) -> list[Client]:
        """Return clients ordered by created_at descending."""
        raise NotImplementedError

    @abstractmethod
    def add(self, client: Client) -> None:
        """Insert a new client.

        Raises:
            ConstraintViolationError: If the email is already registered.
        """
        raise NotImplementedError

    @abstractmethod
    def save(self, client: Client) -> None:
        """Update an existing client.

        Raises:
            ClientNotFoundError: If the client no longer exists.
        """
        raise NotImplementedError

    @abstractmethod
    def delete_cascade(self, client_id: UUID) -> bool:
        """Delete a client with its payment proofs and broker credentials.

        Runs in a single transaction.

        Returns:
            True if the client existed.
        """
        raise NotImplementedError

    @abstractmethod
    def activate_pending(
        self, eligible: Iterable[ClientStatus], now: datetime
    ) -> list[UUID]:
        """Flip every eligible pending_sunday_activation client to active.

        Runs in a single transaction: either every eligible client flips
        or none does.

        Returns:
            IDs of the clients that were flipped.
        """
        raise NotImplementedError


class BrokerCredentialRepository(ABC):
    """Port for broker logins submitted by clients."""

    @abstractmethod
    def add(self, credential: BrokerCredential) -> None:
        """Insert a credential."""
        raise NotImplementedError

    @abstractmethod
    def get(self, credential_id: UUID) -> Optional[BrokerCredential]:
        """Return a credential by ID, or None."""
        raise NotImplementedError

    @abstractmethod
    def list_for_user(self, user_id: UUID) -> list[BrokerCredential]:
        """Return a user's credentials, newest first."""
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> list[BrokerCredential]:
        """Return every credential, newest first."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, credential_id: UUID) -> bool:
        """Delete a credential. Returns True if it existed."""
        raise NotImplementedError


class PaymentProofRepository(ABC):
    """Port for payment proofs."""

    @abstractmethod
    def add(self, proof: PaymentProof) -> None:
        """Insert a new pending proof."""
        raise NotImplementedError

    @abstractmethod
    def get(self, proof_id: UUID) -> Optional[PaymentProof]:
        """Return a proof by ID, or None."""
        raise NotImplementedError

    @abstractmethod
    def list_for_client(self, client_id: UUID) -> list[PaymentProof]:
        """Return a client's proofs, newest first."""
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> list[PaymentProof]:
        """Return every proof, newest first."""
        raise NotImplementedError

    @abstractmethod
    def mark_confirmed(self, proof: PaymentProof) -> bool:
        """Persist a confirmation, only if the stored proof is still pending.

        Returns:
            True if the stored row moved from pending to confirmed.
        """
        raise NotImplementedError


class AdminSettingRepository(ABC):
    """Port for the payment-destination key/value store."""

    @abstractmethod
    def get_all(self) -> dict[str, str]:
        """Return every stored setting as a key → value map."""
        raise NotImplementedError

    @abstractmethod
    def upsert(self, key: str, value: str, now: datetime) -> None:
        """Write one setting and stamp its update time."""
        raise NotImplementedError


class BlobStorePort(ABC):
    """Port for uploading payment screenshots."""

    @abstractmethod
    def upload(self, data: bytes, path: str, content_type: str) -> str:
        """Store bytes under a path and return a public URL.

        Raises:
            ServiceUnavailableError: If the blob could not be stored.
        """
        raise NotImplementedError


class NotifierPort(ABC):
    """Port for fire-and-forget operator notifications."""

    @abstractmethod
    def notify(self, notification: Notification) -> None:
        """Send a notification. Must never raise or block on delivery."""
        raise NotImplementedError


class ChangeFeedPort(ABC):
    """Port for publishing record change events to subscribers."""

    @abstractmethod
    def publish(self, event: ChangeEvent) -> None:
        """Publish an event. Must never raise."""
        raise NotImplementedError
