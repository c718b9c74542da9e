"""
Use case: Client submits a settlement payment proof.

Input: SubmitPaymentProofCommand (caller, screenshot bytes, optional amount)
Output: PaymentProofResult
Side effects: Uploads the screenshot; inserts a pending proof; publishes
    a change event.
Failure cases: SettlementNotAvailableError, ValidationError,
    ServiceUnavailableError.
"""

import logging
import re
from collections.abc import Callable
from datetime import datetime
from pathlib import PurePath

from app.application.settlement.client_lookup import resolve_client
from app.application.settlement.dtos import PaymentProofResult, SubmitPaymentProofCommand
from app.application.settlement.mappers import proof_to_result
from app.domain.settlement.errors import SettlementNotAvailableError, ValidationError
from app.domain.settlement.events import ChangeEvent, ChangeOp, Collection
from app.domain.settlement.money import quantize
from app.domain.settlement.payment_workflow import open_proof, require_settlement
from app.domain.settlement.ports import (
    BlobStorePort,
    ChangeFeedPort,
    ClientRepository,
    PaymentProofRepository,
)
from app.shared.clock import utcnow

logger = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def _safe_filename(filename: str) -> str:
    """Reduce an uploaded filename to a safe basename."""
    name = _UNSAFE_CHARS.sub("_", PurePath(filename or "").name).strip("._")
    return name or "screenshot"


class SubmitPaymentProofUseCase:
    """Uploads settlement evidence and records a pending proof.

    Every precondition is checked before the upload so a rejected
    submission never leaves an orphaned blob behind.
    """

    def __init__(
        self,
        client_repo: ClientRepository,
        proof_repo: PaymentProofRepository,
        blob_store: BlobStorePort,
        change_feed: ChangeFeedPort,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._client_repo = client_repo
        self._proof_repo = proof_repo
        self._blob_store = blob_store
        self._change_feed = change_feed
        self._max_upload_bytes = max_upload_bytes
        self._clock = clock

    def execute(self, command: SubmitPaymentProofCommand) -> PaymentProofResult:
        """Run the submit payment proof use case."""
        now = self._clock()
        client = resolve_client(
            self._client_repo,
            self._change_feed,
            user_id=command.user_id,
            email=command.email,
            now=now,
        )
        if client is None:
            raise SettlementNotAvailableError("no application on file")
        require_settlement(client)

        errors: dict[str, str] = {}
        if not command.data:
            errors["screenshot"] = "A payment screenshot is required"
        elif len(command.data) > self._max_upload_bytes:
            errors["screenshot"] = "Screenshot is too large"
        elif not (command.content_type or "").startswith("image/"):
            errors["screenshot"] = "Screenshot must be an image"
        amount = None if command.amount is None else quantize(command.amount)
        if amount is not None and amount <= 0:
            errors["amount"] = "Amount must be greater than zero"
        if errors:
            raise ValidationError(errors)

        path = f"{command.user_id}/{int(now.timestamp() * 1000)}_{_safe_filename(command.filename)}"
        url = self._blob_store.upload(command.data, path, command.content_type)

        proof = open_proof(client, url, now, amount=amount)
        self._proof_repo.add(proof)
        logger.info(
            "Payment proof submitted: proof=%s client=%s amount=%s",
            proof.id,
            client.id,
            proof.amount,
        )
        self._change_feed.publish(
            ChangeEvent(
                collection=Collection.PAYMENT_PROOFS,
                op=ChangeOp.INSERT,
                record_id=str(proof.id),
                client_id=client.id,
                user_id=client.user_id,
            )
        )
        return proof_to_result(proof, client_name=client.full_name)
