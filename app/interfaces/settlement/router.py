"""
FastAPI router for the client-facing side of the settlement context.

All routes delegate to use cases. No business logic here.
Input validation is handled by Pydantic schemas and the domain.
Error mapping is handled by centralized error handlers.
"""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile, status

from app.application.settlement.accept_agreement import AcceptAgreementUseCase
from app.application.settlement.delete_broker_credential import (
    DeleteBrokerCredentialUseCase,
)
from app.application.settlement.dtos import (
    AcceptAgreementCommand,
    DeleteBrokerCredentialCommand,
    GetSettlementDetailsQuery,
    ListBrokerCredentialsQuery,
    LoadDashboardQuery,
    SubmitApplicationCommand,
    SubmitBrokerCredentialCommand,
    SubmitPaymentProofCommand,
)
from app.application.settlement.get_settlement_details import GetSettlementDetailsUseCase
from app.application.settlement.list_broker_credentials import (
    ListBrokerCredentialsUseCase,
)
from app.application.settlement.load_dashboard import LoadDashboardUseCase
from app.application.settlement.submit_application import SubmitApplicationUseCase
from app.application.settlement.submit_broker_credential import (
    SubmitBrokerCredentialUseCase,
)
from app.application.settlement.submit_payment_proof import SubmitPaymentProofUseCase
from app.core.config import settings
from app.domain.identity.entities import Identity
from app.interfaces.identity.dependencies import get_current_identity
from app.interfaces.settlement.dependencies import (
    get_accept_agreement_use_case,
    get_delete_credential_use_case,
    get_list_credentials_use_case,
    get_load_dashboard_use_case,
    get_settlement_details_use_case,
    get_submit_application_use_case,
    get_submit_credential_use_case,
    get_submit_proof_use_case,
)
from app.interfaces.settlement.schemas import (
    AcceptAgreementResponse,
    ApplicationRequest,
    BrokerCredentialRequest,
    BrokerCredentialResponse,
    ClientProfileResponse,
    ClientResponse,
    DashboardResponse,
    ErrorResponse,
    PaymentProofResponse,
    SettlementDetailsResponse,
)
from app.shared.security.rate_limiting import limiter

router = APIRouter(tags=["client"])


# ------------------------------------------------------------------
# Public onboarding
# ------------------------------------------------------------------


@router.post(
    "/applications",
    response_model=ClientResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    summary="Submit an application",
    description="Public onboarding form. Every field error is reported at once.",
)
@limiter.limit(settings.rate_limit_heavy)
def submit_application(
    request: Request,
    body: ApplicationRequest,
    use_case: SubmitApplicationUseCase = Depends(get_submit_application_use_case),
) -> ClientResponse:
    result = use_case.execute(
        SubmitApplicationCommand(
            full_name=body.full_name,
            whatsapp=body.whatsapp,
            email=body.email,
            platform=body.platform,
            account_balance=body.account_balance,
            agreed_terms=body.agreed_terms,
        )
    )
    return ClientResponse.from_result(result)


# ------------------------------------------------------------------
# Dashboard & agreement
# ------------------------------------------------------------------


@router.get(
    "/client/dashboard",
    response_model=DashboardResponse,
    summary="Load the client dashboard",
    description="Returns the dashboard gate and, once unlocked, the financials.",
)
def load_dashboard(
    identity: Identity = Depends(get_current_identity),
    use_case: LoadDashboardUseCase = Depends(get_load_dashboard_use_case),
) -> DashboardResponse:
    """Return what the caller may see on their dashboard."""
    result = use_case.execute(LoadDashboardQuery(user_id=identity.user_id, email=identity.email))
    return DashboardResponse(
        gate=result.gate,
        show_financials=result.show_financials,
        settlement_due=result.settlement_due,
        profile=ClientProfileResponse.from_result(result.profile) if result.profile else None,
        client=ClientResponse.from_result(result.client) if result.client else None,
    )


@router.post(
    "/client/agreement",
    response_model=AcceptAgreementResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Accept the profit-share agreement",
)
def accept_agreement(
    identity: Identity = Depends(get_current_identity),
    use_case: AcceptAgreementUseCase = Depends(get_accept_agreement_use_case),
) -> AcceptAgreementResponse:
    result = use_case.execute(
        AcceptAgreementCommand(user_id=identity.user_id, email=identity.email)
    )
    return AcceptAgreementResponse(
        changed=result.changed, client=ClientResponse.from_result(result.client)
    )


# ------------------------------------------------------------------
# Settlement
# ------------------------------------------------------------------


@router.get(
    "/client/settlement",
    response_model=SettlementDetailsResponse,
    summary="Settlement details",
    description="Amount due, payment destinations and proof history.",
)
def get_settlement(
    identity: Identity = Depends(get_current_identity),
    use_case: GetSettlementDetailsUseCase = Depends(get_settlement_details_use_case),
) -> SettlementDetailsResponse:
    result = use_case.execute(
        GetSettlementDetailsQuery(user_id=identity.user_id, email=identity.email)
    )
    return SettlementDetailsResponse(
        available=result.available,
        amount_due=result.amount_due,
        destinations=result.destinations,
        proofs=[PaymentProofResponse.from_result(p) for p in result.proofs],
    )


@router.post(
    "/client/payment-proofs",
    response_model=PaymentProofResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    summary="Upload a payment proof",
    description="Multipart upload of a payment screenshot for the current share.",
)
@limiter.limit(settings.rate_limit_heavy)
def submit_payment_proof(
    request: Request,
    screenshot: UploadFile = File(...),
    amount: Optional[Decimal] = Form(default=None),
    identity: Identity = Depends(get_current_identity),
    use_case: SubmitPaymentProofUseCase = Depends(get_submit_proof_use_case),
) -> PaymentProofResponse:
    """Upload evidence of payment and record a pending proof."""
    # Read one byte past the limit so oversize uploads are still detected.
    data = screenshot.file.read(settings.max_upload_bytes + 1)
    result = use_case.execute(
        SubmitPaymentProofCommand(
            user_id=identity.user_id,
            email=identity.email,
            filename=screenshot.filename or "",
            content_type=screenshot.content_type or "",
            data=data,
            amount=amount,
        )
    )
    return PaymentProofResponse.from_result(result)


# ------------------------------------------------------------------
# Broker credentials
# ------------------------------------------------------------------


@router.get(
    "/client/broker-credentials",
    response_model=list[BrokerCredentialResponse],
    summary="List my broker logins",
)
def list_my_credentials(
    reveal: bool = Query(default=False, description="Return passwords in clear"),
    identity: Identity = Depends(get_current_identity),
    use_case: ListBrokerCredentialsUseCase = Depends(get_list_credentials_use_case),
) -> list[BrokerCredentialResponse]:
    results = use_case.execute(
        ListBrokerCredentialsQuery(user_id=identity.user_id, reveal=reveal)
    )
    return [BrokerCredentialResponse.from_result(r) for r in results]


@router.post(
    "/client/broker-credentials",
    response_model=BrokerCredentialResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
    summary="Submit a broker login",
)
def submit_credential(
    body: BrokerCredentialRequest,
    identity: Identity = Depends(get_current_identity),
    use_case: SubmitBrokerCredentialUseCase = Depends(get_submit_credential_use_case),
) -> BrokerCredentialResponse:
    result = use_case.execute(
        SubmitBrokerCredentialCommand(
            user_id=identity.user_id,
            broker_name=body.broker_name,
            server_name=body.server_name,
            login_number=body.login_number,
            password=body.password,
            platform=body.platform,
        )
    )
    return BrokerCredentialResponse.from_result(result)


@router.delete(
    "/client/broker-credentials/{credential_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Remove a broker login",
)
def delete_credential(
    credential_id: UUID,
    confirm: bool = Query(default=False, description="Must be true to delete"),
    identity: Identity = Depends(get_current_identity),
    use_case: DeleteBrokerCredentialUseCase = Depends(get_delete_credential_use_case),
) -> None:
    use_case.execute(
        DeleteBrokerCredentialCommand(
            credential_id=credential_id, user_id=identity.user_id, confirmed=confirm
        )
    )
