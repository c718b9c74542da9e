"""
FastAPI router for the operator console.

Every route requires the operator role. All routes delegate to use
cases. No business logic here.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.application.settlement.activate_sunday_batch import ActivateSundayBatchUseCase
from app.application.settlement.confirm_payment_proof import ConfirmPaymentProofUseCase
from app.application.settlement.delete_client import DeleteClientUseCase
from app.application.settlement.dtos import (
    ConfirmPaymentProofCommand,
    DeleteClientCommand,
    ListBrokerCredentialsQuery,
    ListClientsQuery,
    PaymentSettingsResult,
    SavePaymentSettingsCommand,
    UpdateClientCommand,
)
from app.application.settlement.get_admin_overview import GetAdminOverviewUseCase
from app.application.settlement.get_payment_settings import GetPaymentSettingsUseCase
from app.application.settlement.list_broker_credentials import (
    ListBrokerCredentialsUseCase,
)
from app.application.settlement.list_clients import ListClientsUseCase
from app.application.settlement.list_payment_proofs import ListPaymentProofsUseCase
from app.application.settlement.save_payment_settings import SavePaymentSettingsUseCase
from app.application.settlement.update_client import UpdateClientUseCase
from app.domain.identity.entities import Identity
from app.interfaces.identity.dependencies import require_operator
from app.interfaces.settlement.dependencies import (
    get_activate_sunday_batch_use_case,
    get_admin_overview_use_case,
    get_confirm_proof_use_case,
    get_delete_client_use_case,
    get_list_clients_use_case,
    get_list_credentials_use_case,
    get_list_proofs_use_case,
    get_payment_settings_use_case,
    get_save_payment_settings_use_case,
    get_update_client_use_case,
)
from app.interfaces.settlement.schemas import (
    AdminOverviewResponse,
    BrokerCredentialResponse,
    ClientResponse,
    ConfirmPaymentProofResponse,
    ErrorResponse,
    PaymentProofListResponse,
    PaymentProofResponse,
    PaymentSettingsResponse,
    SavePaymentSettingsRequest,
    SavePaymentSettingsResponse,
    SundayActivationResponse,
    UpdateClientRequest,
)

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_operator)],
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)


def _settings_response(result: PaymentSettingsResult) -> PaymentSettingsResponse:
    return PaymentSettingsResponse(values=result.values, display=result.display)


@router.get(
    "/overview",
    response_model=AdminOverviewResponse,
    summary="Operator statistics",
)
def get_overview(
    use_case: GetAdminOverviewUseCase = Depends(get_admin_overview_use_case),
) -> AdminOverviewResponse:
    result = use_case.execute()
    return AdminOverviewResponse(
        total_clients=result.total_clients,
        active_count=result.active_count,
        pending_sunday_count=result.pending_sunday_count,
        total_net_profit=result.total_net_profit,
        share_pending=result.share_pending,
        share_confirmed=result.share_confirmed,
        pending_proof_count=result.pending_proof_count,
        credential_count=result.credential_count,
    )


# ------------------------------------------------------------------
# Clients
# ------------------------------------------------------------------


@router.get(
    "/clients",
    response_model=list[ClientResponse],
    summary="List clients",
    description="Newest first, optionally filtered by activation status.",
)
def list_clients(
    activation_status: Optional[str] = Query(default=None),
    use_case: ListClientsUseCase = Depends(get_list_clients_use_case),
) -> list[ClientResponse]:
    results = use_case.execute(ListClientsQuery(activation_status=activation_status))
    return [ClientResponse.from_result(r) for r in results]


@router.patch(
    "/clients/{client_id}",
    response_model=ClientResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
    summary="Edit a client",
    description="Edit balances and lifecycle fields. Omitted fields are unchanged.",
)
def update_client(
    client_id: UUID,
    body: UpdateClientRequest,
    use_case: UpdateClientUseCase = Depends(get_update_client_use_case),
) -> ClientResponse:
    result = use_case.execute(
        UpdateClientCommand(
            client_id=client_id,
            account_balance=body.account_balance,
            starting_balance=body.starting_balance,
            status=body.status,
            activation_status=body.activation_status,
        )
    )
    return ClientResponse.from_result(result)


@router.delete(
    "/clients/{client_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Delete a client",
    description="Deletes the client with its payment proofs and broker logins.",
)
def delete_client(
    client_id: UUID,
    confirm: bool = Query(default=False, description="Must be true to delete"),
    use_case: DeleteClientUseCase = Depends(get_delete_client_use_case),
) -> None:
    use_case.execute(DeleteClientCommand(client_id=client_id, confirmed=confirm))


@router.post(
    "/sunday-activation",
    response_model=SundayActivationResponse,
    summary="Run Sunday Activation",
    description="Activate every approved/active client pending Sunday activation.",
)
def run_sunday_activation(
    use_case: ActivateSundayBatchUseCase = Depends(get_activate_sunday_batch_use_case),
) -> SundayActivationResponse:
    result = use_case.execute()
    return SundayActivationResponse(
        activated_count=result.activated_count, client_ids=result.client_ids
    )


# ------------------------------------------------------------------
# Payment proofs
# ------------------------------------------------------------------


@router.get(
    "/payment-proofs",
    response_model=PaymentProofListResponse,
    summary="List payment proofs",
)
def list_payment_proofs(
    use_case: ListPaymentProofsUseCase = Depends(get_list_proofs_use_case),
) -> PaymentProofListResponse:
    result = use_case.execute()
    return PaymentProofListResponse(
        proofs=[PaymentProofResponse.from_result(p) for p in result.proofs],
        pending_total=result.pending_total,
        confirmed_total=result.confirmed_total,
        pending_count=result.pending_count,
    )


@router.post(
    "/payment-proofs/{proof_id}/confirm",
    response_model=ConfirmPaymentProofResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Confirm a payment proof",
    description="Idempotent: confirming twice reports changed=false.",
)
def confirm_payment_proof(
    proof_id: UUID,
    operator: Identity = Depends(require_operator),
    use_case: ConfirmPaymentProofUseCase = Depends(get_confirm_proof_use_case),
) -> ConfirmPaymentProofResponse:
    result = use_case.execute(
        ConfirmPaymentProofCommand(proof_id=proof_id, operator_id=operator.user_id)
    )
    return ConfirmPaymentProofResponse(
        changed=result.changed, proof=PaymentProofResponse.from_result(result.proof)
    )


# ------------------------------------------------------------------
# Broker credentials
# ------------------------------------------------------------------


@router.get(
    "/broker-credentials",
    response_model=list[BrokerCredentialResponse],
    summary="List all broker logins",
)
def list_all_credentials(
    reveal: bool = Query(default=False, description="Return passwords in clear"),
    use_case: ListBrokerCredentialsUseCase = Depends(get_list_credentials_use_case),
) -> list[BrokerCredentialResponse]:
    results = use_case.execute(ListBrokerCredentialsQuery(user_id=None, reveal=reveal))
    return [BrokerCredentialResponse.from_result(r) for r in results]


# ------------------------------------------------------------------
# Payment settings
# ------------------------------------------------------------------


@router.get(
    "/settings",
    response_model=PaymentSettingsResponse,
    summary="Read payment settings",
)
def get_payment_settings(
    use_case: GetPaymentSettingsUseCase = Depends(get_payment_settings_use_case),
) -> PaymentSettingsResponse:
    return _settings_response(use_case.execute())


@router.put(
    "/settings",
    response_model=SavePaymentSettingsResponse,
    responses={422: {"model": ErrorResponse}},
    summary="Save payment settings",
    description="Writes only the settings whose value changed.",
)
def save_payment_settings(
    body: SavePaymentSettingsRequest,
    use_case: SavePaymentSettingsUseCase = Depends(get_save_payment_settings_use_case),
) -> SavePaymentSettingsResponse:
    values = body.model_dump(exclude_none=True)
    result = use_case.execute(SavePaymentSettingsCommand(values=values))
    return SavePaymentSettingsResponse(
        changed_keys=result.changed_keys, settings=_settings_response(result.settings)
    )
