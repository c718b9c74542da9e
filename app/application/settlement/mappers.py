"""
Entity to DTO mapping shared by settlement use cases.
"""

from typing import Optional

from app.application.settlement.dtos import (
    BrokerCredentialResult,
    ClientProfileResult,
    ClientResult,
    PaymentProofResult,
)
from app.domain.settlement.entities import BrokerCredential, Client, PaymentProof

MASKED_PASSWORD = "••••••••"


def client_to_result(client: Client) -> ClientResult:
    breakdown = client.breakdown
    return ClientResult(
        id=client.id,
        full_name=client.full_name,
        email=client.email,
        whatsapp=client.whatsapp,
        platform=client.platform,
        account_balance=client.account_balance,
        starting_balance=client.starting_balance,
        net_profit=breakdown.net_profit,
        share=breakdown.share,
        status=client.status.value,
        activation_status=client.activation_status.value,
        agreement_accepted=client.agreement_accepted,
        agreement_accepted_at=client.agreement_accepted_at,
        created_at=client.created_at,
        last_updated=client.last_updated,
        user_id=client.user_id,
    )


def client_to_profile(client: Client) -> ClientProfileResult:
    return ClientProfileResult(
        id=client.id,
        full_name=client.full_name,
        email=client.email,
        platform=client.platform,
        status=client.status.value,
        activation_status=client.activation_status.value,
        agreement_accepted=client.agreement_accepted,
        user_id=client.user_id,
    )


def proof_to_result(
    proof: PaymentProof, client_name: Optional[str] = None
) -> PaymentProofResult:
    return PaymentProofResult(
        id=proof.id,
        client_id=proof.client_id,
        screenshot_url=proof.screenshot_url,
        amount=proof.amount,
        status=proof.status.value,
        created_at=proof.created_at,
        confirmed_at=proof.confirmed_at,
        confirmed_by=proof.confirmed_by,
        client_name=client_name,
    )


def credential_to_result(
    credential: BrokerCredential,
    reveal: bool = False,
    client_name: Optional[str] = None,
) -> BrokerCredentialResult:
    """Map a credential, masking the password unless ``reveal`` is set."""
    return BrokerCredentialResult(
        id=credential.id,
        user_id=credential.user_id,
        broker_name=credential.broker_name,
        server_name=credential.server_name,
        login_number=credential.login_number,
        password=credential.password if reveal else MASKED_PASSWORD,
        platform=credential.platform,
        created_at=credential.created_at,
        client_name=client_name,
    )
