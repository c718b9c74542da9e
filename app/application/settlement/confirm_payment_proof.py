"""
Use case: Operator confirms a payment proof.

Input: ConfirmPaymentProofCommand (proof_id, operator_id)
Output: ConfirmPaymentProofResult
Side effects: Moves the proof from pending to confirmed, once.
Failure cases: PaymentProofNotFoundError.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from app.application.settlement.dtos import (
    ConfirmPaymentProofCommand,
    ConfirmPaymentProofResult,
)
from app.application.settlement.mappers import proof_to_result
from app.domain.settlement.errors import PaymentProofNotFoundError
from app.domain.settlement.events import ChangeEvent, ChangeOp, Collection
from app.domain.settlement.payment_workflow import confirm_proof
from app.domain.settlement.ports import ChangeFeedPort, PaymentProofRepository
from app.shared.clock import utcnow

logger = logging.getLogger(__name__)


class ConfirmPaymentProofUseCase:
    """Confirms a pending proof.

    Confirming an already-confirmed proof is a no-op reported with
    ``changed=False``; the stored confirmation is never overwritten.
    """

    def __init__(
        self,
        proof_repo: PaymentProofRepository,
        change_feed: ChangeFeedPort,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._proof_repo = proof_repo
        self._change_feed = change_feed
        self._clock = clock

    def execute(self, command: ConfirmPaymentProofCommand) -> ConfirmPaymentProofResult:
        """Run the confirm payment proof use case."""
        proof = self._proof_repo.get(command.proof_id)
        if proof is None:
            raise PaymentProofNotFoundError(str(command.proof_id))

        changed = confirm_proof(proof, command.operator_id, self._clock())
        if changed and not self._proof_repo.mark_confirmed(proof):
            # Another operator confirmed it between our read and write.
            changed = False
            proof = self._proof_repo.get(command.proof_id) or proof

        if changed:
            logger.info(
                "Payment proof confirmed: proof=%s by=%s", proof.id, command.operator_id
            )
            self._change_feed.publish(
                ChangeEvent(
                    collection=Collection.PAYMENT_PROOFS,
                    op=ChangeOp.UPDATE,
                    record_id=str(proof.id),
                    client_id=proof.client_id,
                )
            )
        else:
            logger.info("Payment proof already confirmed: proof=%s", proof.id)
        return ConfirmPaymentProofResult(proof=proof_to_result(proof), changed=changed)
