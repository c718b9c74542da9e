"""
Dependency injection for the settlement bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection.
These are the composition root for the settlement context.
"""

from decimal import Decimal
from typing import Optional

from fastapi import Depends
from sqlalchemy.engine import Engine

from app.application.settlement.accept_agreement import AcceptAgreementUseCase
from app.application.settlement.activate_sunday_batch import ActivateSundayBatchUseCase
from app.application.settlement.confirm_payment_proof import ConfirmPaymentProofUseCase
from app.application.settlement.delete_broker_credential import (
    DeleteBrokerCredentialUseCase,
)
from app.application.settlement.delete_client import DeleteClientUseCase
from app.application.settlement.get_admin_overview import GetAdminOverviewUseCase
from app.application.settlement.get_payment_settings import GetPaymentSettingsUseCase
from app.application.settlement.get_settlement_details import GetSettlementDetailsUseCase
from app.application.settlement.list_broker_credentials import (
    ListBrokerCredentialsUseCase,
)
from app.application.settlement.list_clients import ListClientsUseCase
from app.application.settlement.list_payment_proofs import ListPaymentProofsUseCase
from app.application.settlement.load_dashboard import LoadDashboardUseCase
from app.application.settlement.save_payment_settings import SavePaymentSettingsUseCase
from app.application.settlement.submit_application import SubmitApplicationUseCase
from app.application.settlement.submit_broker_credential import (
    SubmitBrokerCredentialUseCase,
)
from app.application.settlement.submit_payment_proof import SubmitPaymentProofUseCase
from app.application.settlement.update_client import UpdateClientUseCase
from app.core.config import settings
from app.domain.settlement.ports import (
    AdminSettingRepository,
    BlobStorePort,
    BrokerCredentialRepository,
    ChangeFeedPort,
    ClientRepository,
    NotifierPort,
    PaymentProofRepository,
)
from app.infrastructure.settlement.admin_setting_repository import (
    AdminSettingRepositoryAdapter,
)
from app.infrastructure.settlement.broker_credential_repository import (
    BrokerCredentialRepositoryAdapter,
)
from app.infrastructure.settlement.client_repository import ClientRepositoryAdapter
from app.infrastructure.settlement.payment_proof_repository import (
    PaymentProofRepositoryAdapter,
)
from app.interfaces.dependencies import (
    get_blob_store,
    get_change_feed,
    get_engine,
    get_notifier,
)


# ------------------------------------------------------------------
# Repositories
# ------------------------------------------------------------------


def get_client_repository(engine: Engine = Depends(get_engine)) -> ClientRepository:
    return ClientRepositoryAdapter(engine=engine)


def get_credential_repository(
    engine: Engine = Depends(get_engine),
) -> BrokerCredentialRepository:
    return BrokerCredentialRepositoryAdapter(engine=engine)


def get_proof_repository(engine: Engine = Depends(get_engine)) -> PaymentProofRepository:
    return PaymentProofRepositoryAdapter(engine=engine)


def get_setting_repository(engine: Engine = Depends(get_engine)) -> AdminSettingRepository:
    return AdminSettingRepositoryAdapter(engine=engine)


def get_auto_approve_min_balance() -> Optional[Decimal]:
    return settings.auto_approve_min_balance


# ------------------------------------------------------------------
# Client-facing use cases
# ------------------------------------------------------------------


def get_submit_application_use_case(
    client_repo: ClientRepository = Depends(get_client_repository),
    notifier: NotifierPort = Depends(get_notifier),
    change_feed: ChangeFeedPort = Depends(get_change_feed),
    auto_approve_min_balance: Optional[Decimal] = Depends(get_auto_approve_min_balance),
) -> SubmitApplicationUseCase:
    """Build SubmitApplicationUseCase with its infrastructure dependencies."""
    return SubmitApplicationUseCase(
        client_repo=client_repo,
        notifier=notifier,
        change_feed=change_feed,
        auto_approve_min_balance=auto_approve_min_balance,
    )


def get_load_dashboard_use_case(
    client_repo: ClientRepository = Depends(get_client_repository),
    change_feed: ChangeFeedPort = Depends(get_change_feed),
) -> LoadDashboardUseCase:
    return LoadDashboardUseCase(client_repo=client_repo, change_feed=change_feed)


def get_accept_agreement_use_case(
    client_repo: ClientRepository = Depends(get_client_repository),
    change_feed: ChangeFeedPort = Depends(get_change_feed),
) -> AcceptAgreementUseCase:
    return AcceptAgreementUseCase(client_repo=client_repo, change_feed=change_feed)


def get_submit_credential_use_case(
    credential_repo: BrokerCredentialRepository = Depends(get_credential_repository),
    change_feed: ChangeFeedPort = Depends(get_change_feed),
) -> SubmitBrokerCredentialUseCase:
    return SubmitBrokerCredentialUseCase(credential_repo=credential_repo, change_feed=change_feed)


def get_list_credentials_use_case(
    credential_repo: BrokerCredentialRepository = Depends(get_credential_repository),
    client_repo: ClientRepository = Depends(get_client_repository),
) -> ListBrokerCredentialsUseCase:
    return ListBrokerCredentialsUseCase(credential_repo=credential_repo, client_repo=client_repo)


def get_delete_credential_use_case(
    credential_repo: BrokerCredentialRepository = Depends(get_credential_repository),
    change_feed: ChangeFeedPort = Depends(get_change_feed),
) -> DeleteBrokerCredentialUseCase:
    return DeleteBrokerCredentialUseCase(credential_repo=credential_repo, change_feed=change_feed)


def get_submit_proof_use_case(
    client_repo: ClientRepository = Depends(get_client_repository),
    proof_repo: PaymentProofRepository = Depends(get_proof_repository),
    blob_store: BlobStorePort = Depends(get_blob_store),
    change_feed: ChangeFeedPort = Depends(get_change_feed),
) -> SubmitPaymentProofUseCase:
    """Build SubmitPaymentProofUseCase with its infrastructure dependencies."""
    return SubmitPaymentProofUseCase(
        client_repo=client_repo,
        proof_repo=proof_repo,
        blob_store=blob_store,
        change_feed=change_feed,
        max_upload_bytes=settings.max_upload_bytes,
    )


def get_settlement_details_use_case(
    client_repo: ClientRepository = Depends(get_client_repository),
    proof_repo: PaymentProofRepository = Depends(get_proof_repository),
    setting_repo: AdminSettingRepository = Depends(get_setting_repository),
    change_feed: ChangeFeedPort = Depends(get_change_feed),
) -> GetSettlementDetailsUseCase:
    return GetSettlementDetailsUseCase(
        client_repo=client_repo,
        proof_repo=proof_repo,
        setting_repo=setting_repo,
        change_feed=change_feed,
    )


# ------------------------------------------------------------------
# Operator use cases
# ------------------------------------------------------------------


def get_list_clients_use_case(
    client_repo: ClientRepository = Depends(get_client_repository),
) -> ListClientsUseCase:
    return ListClientsUseCase(client_repo=client_repo)


def get_update_client_use_case(
    client_repo: ClientRepository = Depends(get_client_repository),
    change_feed: ChangeFeedPort = Depends(get_change_feed),
) -> UpdateClientUseCase:
    return UpdateClientUseCase(client_repo=client_repo, change_feed=change_feed)


def get_delete_client_use_case(
    client_repo: ClientRepository = Depends(get_client_repository),
    change_feed: ChangeFeedPort = Depends(get_change_feed),
) -> DeleteClientUseCase:
    return DeleteClientUseCase(client_repo=client_repo, change_feed=change_feed)


def get_activate_sunday_batch_use_case(
    client_repo: ClientRepository = Depends(get_client_repository),
    change_feed: ChangeFeedPort = Depends(get_change_feed),
) -> ActivateSundayBatchUseCase:
    return ActivateSundayBatchUseCase(client_repo=client_repo, change_feed=change_feed)


def get_admin_overview_use_case(
    client_repo: ClientRepository = Depends(get_client_repository),
    proof_repo: PaymentProofRepository = Depends(get_proof_repository),
    credential_repo: BrokerCredentialRepository = Depends(get_credential_repository),
) -> GetAdminOverviewUseCase:
    return GetAdminOverviewUseCase(
        client_repo=client_repo, proof_repo=proof_repo, credential_repo=credential_repo
    )


def get_list_proofs_use_case(
    proof_repo: PaymentProofRepository = Depends(get_proof_repository),
    client_repo: ClientRepository = Depends(get_client_repository),
) -> ListPaymentProofsUseCase:
    return ListPaymentProofsUseCase(proof_repo=proof_repo, client_repo=client_repo)


def get_confirm_proof_use_case(
    proof_repo: PaymentProofRepository = Depends(get_proof_repository),
    change_feed: ChangeFeedPort = Depends(get_change_feed),
) -> ConfirmPaymentProofUseCase:
    return ConfirmPaymentProofUseCase(proof_repo=proof_repo, change_feed=change_feed)


def get_payment_settings_use_case(
    setting_repo: AdminSettingRepository = Depends(get_setting_repository),
) -> GetPaymentSettingsUseCase:
    return GetPaymentSettingsUseCase(setting_repo=setting_repo)


def get_save_payment_settings_use_case(
    setting_repo: AdminSettingRepository = Depends(get_setting_repository),
    change_feed: ChangeFeedPort = Depends(get_change_feed),
) -> SavePaymentSettingsUseCase:
    return SavePaymentSettingsUseCase(setting_repo=setting_repo, change_feed=change_feed)
