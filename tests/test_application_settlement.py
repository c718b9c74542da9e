"""
Tests for the settlement application layer.

Use cases run against the SQL adapters on in-memory SQLite, with
the change feed, notifier and blob store replaced by recording fakes.
"""

from decimal import Decimal
from uuid import uuid4

import pytest

from app.application.settlement.accept_agreement import AcceptAgreementUseCase
from app.application.settlement.activate_sunday_batch import ActivateSundayBatchUseCase
from app.application.settlement.confirm_payment_proof import ConfirmPaymentProofUseCase
from app.application.settlement.delete_broker_credential import (
    DeleteBrokerCredentialUseCase,
)
from app.application.settlement.delete_client import DeleteClientUseCase
from app.application.settlement.dtos import (
    AcceptAgreementCommand,
    ConfirmPaymentProofCommand,
    DeleteBrokerCredentialCommand,
    DeleteClientCommand,
    GetSettlementDetailsQuery,
    ListBrokerCredentialsQuery,
    ListClientsQuery,
    LoadDashboardQuery,
    SavePaymentSettingsCommand,
    SubmitApplicationCommand,
    SubmitBrokerCredentialCommand,
    SubmitPaymentProofCommand,
    UpdateClientCommand,
)
from app.application.settlement.get_admin_overview import GetAdminOverviewUseCase
from app.application.settlement.get_payment_settings import GetPaymentSettingsUseCase
from app.application.settlement.get_settlement_details import (
    GetSettlementDetailsUseCase,
)
from app.application.settlement.list_broker_credentials import (
    ListBrokerCredentialsUseCase,
)
from app.application.settlement.list_clients import ListClientsUseCase
from app.application.settlement.list_payment_proofs import ListPaymentProofsUseCase
from app.application.settlement.load_dashboard import LoadDashboardUseCase
from app.application.settlement.mappers import MASKED_PASSWORD
from app.application.settlement.save_payment_settings import SavePaymentSettingsUseCase
from app.application.settlement.submit_application import SubmitApplicationUseCase
from app.application.settlement.submit_broker_credential import (
    SubmitBrokerCredentialUseCase,
)
from app.application.settlement.submit_payment_proof import SubmitPaymentProofUseCase
from app.application.settlement.update_client import UpdateClientUseCase
from app.domain.settlement.entities import ActivationStatus, ClientStatus
from app.domain.settlement.errors import (
    AgreementNotAvailableError,
    BrokerCredentialNotFoundError,
    ClientNotFoundError,
    ConfirmationRequiredError,
    ConstraintViolationError,
    InvalidTransitionError,
    PaymentProofNotFoundError,
    ServiceUnavailableError,
    SettlementNotAvailableError,
    ValidationError,
)
from app.domain.settlement.events import ChangeOp, Collection, NotificationKind
from app.domain.settlement.payment_workflow import open_proof
from app.domain.settlement.settings_store import NOT_CONFIGURED
from factories import InMemoryBlobStore, make_client, make_ready_client

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def _application(**overrides) -> SubmitApplicationCommand:
    values = {
        "full_name": "Amina Otieno",
        "whatsapp": "+254700000001",
        "email": "amina@example.com",
        "platform": "MetaTrader 5 (MT5)",
        "account_balance": "100",
        "agreed_terms": True,
    }
    values.update(overrides)
    return SubmitApplicationCommand(**values)


# =====================================================================
# Onboarding
# =====================================================================


class TestSubmitApplication:
    """Tests for SubmitApplicationUseCase."""

    def test_creates_new_applicant_and_notifies(
        self, client_repo, notifier, change_feed, clock
    ) -> None:
        use_case = SubmitApplicationUseCase(client_repo, notifier, change_feed, clock=clock)
        result = use_case.execute(_application())

        assert result.status == "new_applicant"
        assert result.activation_status == "pending_sunday_activation"
        assert result.starting_balance is None
        assert client_repo.get_by_id(result.id) is not None

        assert [n.kind for n in notifier.notifications] == [NotificationKind.NEW_SIGNUP]
        assert notifier.notifications[0].client_email == "amina@example.com"
        assert change_feed.events[0].collection is Collection.CLIENTS
        assert change_feed.events[0].op is ChangeOp.INSERT

    def test_balance_below_minimum_writes_nothing(
        self, client_repo, notifier, change_feed, clock
    ) -> None:
        """Balance 15 → 'Minimum capital is $20', nothing inserted."""
        use_case = SubmitApplicationUseCase(client_repo, notifier, change_feed, clock=clock)
        with pytest.raises(ValidationError) as exc:
            use_case.execute(_application(account_balance="15"))

        assert exc.value.fields["account_balance"] == "Minimum capital is $20"
        assert client_repo.list_clients() == []
        assert notifier.notifications == []
        assert change_feed.events == []

    def test_duplicate_email_rejected(self, client_repo, notifier, change_feed, clock) -> None:
        use_case = SubmitApplicationUseCase(client_repo, notifier, change_feed, clock=clock)
        use_case.execute(_application())
        with pytest.raises(ConstraintViolationError):
            use_case.execute(_application(email="AMINA@example.com"))

    def test_auto_approval_above_threshold(
        self, client_repo, notifier, change_feed, clock
    ) -> None:
        use_case = SubmitApplicationUseCase(
            client_repo,
            notifier,
            change_feed,
            auto_approve_min_balance=Decimal("50"),
            clock=clock,
        )
        result = use_case.execute(_application(account_balance="75"))

        assert result.status == "approved"
        assert result.starting_balance == Decimal("75")
        assert notifier.notifications[0].kind is NotificationKind.AUTO_APPROVED


class TestDashboardAndAgreement:
    """Tests for LoadDashboardUseCase and AcceptAgreementUseCase."""

    def test_unknown_user_has_no_record(self, client_repo, change_feed, clock) -> None:
        use_case = LoadDashboardUseCase(client_repo, change_feed, clock=clock)
        result = use_case.execute(LoadDashboardQuery(user_id=uuid4(), email="x@example.com"))
        assert result.gate == "no_record"
        assert result.client is None
        assert result.show_financials is False

    def test_first_load_links_client_by_email(self, client_repo, change_feed, clock) -> None:
        client = make_client()
        client_repo.add(client)
        user_id = uuid4()

        use_case = LoadDashboardUseCase(client_repo, change_feed, clock=clock)
        result = use_case.execute(LoadDashboardQuery(user_id=user_id, email="Amina@Example.com"))

        assert result.gate == "pending_review"
        assert result.client is None
        assert result.profile.user_id == user_id
        assert client_repo.get_by_user_id(user_id).id == client.id
        assert change_feed.events[-1].op is ChangeOp.UPDATE

    def test_client_linked_to_other_identity_is_not_relinked(
        self, client_repo, change_feed, clock
    ) -> None:
        client_repo.add(make_client(user_id=uuid4()))
        use_case = LoadDashboardUseCase(client_repo, change_feed, clock=clock)
        result = use_case.execute(LoadDashboardQuery(user_id=uuid4(), email="amina@example.com"))
        assert result.gate == "no_record"

    def test_locked_dashboard_omits_financials(self, client_repo, change_feed, clock) -> None:
        user_id = uuid4()
        client_repo.add(
            make_client(
                status=ClientStatus.APPROVED,
                starting_balance=Decimal("100"),
                account_balance=Decimal("130"),
                user_id=user_id,
            )
        )

        use_case = LoadDashboardUseCase(client_repo, change_feed, clock=clock)
        result = use_case.execute(LoadDashboardQuery(user_id=user_id, email="amina@example.com"))

        assert result.gate == "agreement_required"
        assert result.client is None
        assert result.settlement_due is False
        assert result.profile.status == "approved"
        assert not hasattr(result.profile, "share")

    def test_ready_dashboard_shows_financials(self, client_repo, change_feed, clock) -> None:
        user_id = uuid4()
        client_repo.add(make_ready_client("20", "35", user_id=user_id))

        use_case = LoadDashboardUseCase(client_repo, change_feed, clock=clock)
        result = use_case.execute(LoadDashboardQuery(user_id=user_id, email="amina@example.com"))

        assert result.gate == "ready"
        assert result.show_financials is True
        assert result.settlement_due is True
        assert result.client.share == Decimal("7.50")

    def test_accept_agreement_once(self, client_repo, change_feed, clock) -> None:
        user_id = uuid4()
        client_repo.add(
            make_client(
                status=ClientStatus.APPROVED,
                starting_balance=Decimal("100"),
                user_id=user_id,
            )
        )
        use_case = AcceptAgreementUseCase(client_repo, change_feed, clock=clock)
        command = AcceptAgreementCommand(user_id=user_id, email="amina@example.com")

        first = use_case.execute(command)
        assert first.changed is True
        assert first.client.agreement_accepted is True
        events_after_first = len(change_feed.events)

        second = use_case.execute(command)
        assert second.changed is False
        assert second.client.agreement_accepted_at == first.client.agreement_accepted_at
        assert len(change_feed.events) == events_after_first

    def test_agreement_before_approval_rejected(self, client_repo, change_feed, clock) -> None:
        user_id = uuid4()
        client_repo.add(make_client(user_id=user_id))
        use_case = AcceptAgreementUseCase(client_repo, change_feed, clock=clock)
        with pytest.raises(AgreementNotAvailableError):
            use_case.execute(AcceptAgreementCommand(user_id=user_id, email="amina@example.com"))

    def test_agreement_without_application(self, client_repo, change_feed, clock) -> None:
        use_case = AcceptAgreementUseCase(client_repo, change_feed, clock=clock)
        with pytest.raises(ClientNotFoundError):
            use_case.execute(AcceptAgreementCommand(user_id=uuid4(), email="x@example.com"))


# =====================================================================
# Operator console
# =====================================================================


class TestUpdateClient:
    """Tests for UpdateClientUseCase."""

    def test_approve_and_set_balance(self, client_repo, change_feed, clock) -> None:
        client = make_client()
        client_repo.add(client)
        use_case = UpdateClientUseCase(client_repo, change_feed, clock=clock)

        result = use_case.execute(
            UpdateClientCommand(
                client_id=client.id, status="approved", account_balance=Decimal("130")
            )
        )

        assert result.status == "approved"
        assert result.starting_balance == Decimal("130")
        stored = client_repo.get_by_id(client.id)
        assert stored.status is ClientStatus.APPROVED
        assert change_feed.events[-1].client_id == client.id

    def test_unknown_enum_value(self, client_repo, change_feed, clock) -> None:
        client = make_client()
        client_repo.add(client)
        use_case = UpdateClientUseCase(client_repo, change_feed, clock=clock)
        with pytest.raises(ValidationError) as exc:
            use_case.execute(UpdateClientCommand(client_id=client.id, status="vip"))
        assert "status" in exc.value.fields

    def test_invalid_transition_writes_nothing(self, client_repo, change_feed, clock) -> None:
        client = make_client()
        client_repo.add(client)
        use_case = UpdateClientUseCase(client_repo, change_feed, clock=clock)
        with pytest.raises(InvalidTransitionError):
            use_case.execute(UpdateClientCommand(client_id=client.id, status="paused"))
        assert client_repo.get_by_id(client.id).status is ClientStatus.NEW_APPLICANT
        assert change_feed.events == []

    def test_missing_client(self, client_repo, change_feed, clock) -> None:
        use_case = UpdateClientUseCase(client_repo, change_feed, clock=clock)
        with pytest.raises(ClientNotFoundError):
            use_case.execute(UpdateClientCommand(client_id=uuid4(), status="approved"))


class TestDeleteClient:
    """Tests for DeleteClientUseCase."""

    def test_requires_confirmation(self, client_repo, change_feed) -> None:
        client = make_client()
        client_repo.add(client)
        with pytest.raises(ConfirmationRequiredError):
            DeleteClientUseCase(client_repo, change_feed).execute(
                DeleteClientCommand(client_id=client.id)
            )
        assert client_repo.get_by_id(client.id) is not None

    def test_deletes_and_publishes(self, client_repo, change_feed) -> None:
        client = make_client()
        client_repo.add(client)
        DeleteClientUseCase(client_repo, change_feed).execute(
            DeleteClientCommand(client_id=client.id, confirmed=True)
        )
        assert client_repo.get_by_id(client.id) is None
        assert change_feed.events[-1].op is ChangeOp.DELETE

    def test_missing_client(self, client_repo, change_feed) -> None:
        with pytest.raises(ClientNotFoundError):
            DeleteClientUseCase(client_repo, change_feed).execute(
                DeleteClientCommand(client_id=uuid4(), confirmed=True)
            )


class TestSundayActivation:
    """Tests for ActivateSundayBatchUseCase."""

    def test_flips_every_pending_approved_client(self, client_repo, change_feed, clock) -> None:
        """Three pending clients plus one active → all active."""
        pending = [
            make_client(
                email=f"pending{i}@example.com",
                status=ClientStatus.APPROVED,
                starting_balance=Decimal("100"),
            )
            for i in range(3)
        ]
        already_active = make_ready_client(email="active@example.com")
        for client in [*pending, already_active]:
            client_repo.add(client)

        result = ActivateSundayBatchUseCase(client_repo, change_feed, clock=clock).execute()

        assert result.activated_count == 3
        assert set(result.client_ids) == {c.id for c in pending}
        assert all(
            c.activation_status is ActivationStatus.ACTIVE for c in client_repo.list_clients()
        )
        assert len(change_feed.events) == 3

    def test_second_run_is_a_no_op(self, client_repo, change_feed, clock) -> None:
        client_repo.add(make_client(status=ClientStatus.APPROVED, starting_balance=Decimal("100")))
        use_case = ActivateSundayBatchUseCase(client_repo, change_feed, clock=clock)
        assert use_case.execute().activated_count == 1
        assert use_case.execute().activated_count == 0

    def test_fresh_applications_are_activated(self, client_repo, change_feed, clock) -> None:
        """Freshly submitted clients are pending too, whatever their status."""
        applicants = [make_client(email=f"new{i}@example.com") for i in range(3)]
        for client in [*applicants, make_ready_client(email="active@example.com")]:
            client_repo.add(client)

        result = ActivateSundayBatchUseCase(client_repo, change_feed, clock=clock).execute()

        assert result.activated_count == 3
        assert all(
            c.activation_status is ActivationStatus.ACTIVE for c in client_repo.list_clients()
        )

    def test_rejected_clients_are_left_alone(self, client_repo, change_feed, clock) -> None:
        client = make_client(status=ClientStatus.REJECTED)
        client_repo.add(client)
        result = ActivateSundayBatchUseCase(client_repo, change_feed, clock=clock).execute()
        assert result.activated_count == 0
        assert (
            client_repo.get_by_id(client.id).activation_status
            is ActivationStatus.PENDING_SUNDAY_ACTIVATION
        )


class TestListingAndOverview:
    """Tests for ListClientsUseCase and GetAdminOverviewUseCase."""

    def test_filter_by_activation_status(self, client_repo) -> None:
        client_repo.add(make_client(email="a@example.com"))
        client_repo.add(make_ready_client(email="b@example.com"))

        use_case = ListClientsUseCase(client_repo)
        assert len(use_case.execute(ListClientsQuery())) == 2
        active = use_case.execute(ListClientsQuery(activation_status="active"))
        assert [c.email for c in active] == ["b@example.com"]

    def test_unknown_filter_rejected(self, client_repo) -> None:
        with pytest.raises(ValidationError):
            ListClientsUseCase(client_repo).execute(ListClientsQuery(activation_status="done"))

    def test_overview_rollups(self, client_repo, proof_repo, credential_repo, clock) -> None:
        user_id = uuid4()
        ready = make_ready_client("20", "35", user_id=user_id, email="r@example.com")
        losing = make_ready_client("100", "80", email="l@example.com")
        client_repo.add(ready)
        client_repo.add(losing)
        client_repo.add(make_client(email="n@example.com"))

        proof_repo.add(open_proof(ready, "https://x/p.png", clock()))

        overview = GetAdminOverviewUseCase(client_repo, proof_repo, credential_repo).execute()
        assert overview.total_clients == 3
        assert overview.active_count == 2
        assert overview.pending_sunday_count == 1
        assert overview.total_net_profit == Decimal("-5.00")
        assert overview.share_pending == Decimal("7.50")
        assert overview.share_confirmed == Decimal("0.00")
        assert overview.pending_proof_count == 1
        assert overview.credential_count == 0


# =====================================================================
# Broker credentials
# =====================================================================


def _credential(user_id, **overrides) -> SubmitBrokerCredentialCommand:
    values = {
        "user_id": user_id,
        "broker_name": "Exness",
        "server_name": "Exness-MT5Real8",
        "login_number": "81234567",
        "password": "s3cret!",
        "platform": "MT5",
    }
    values.update(overrides)
    return SubmitBrokerCredentialCommand(**values)


class TestBrokerCredentials:
    """Tests for the broker credential use cases."""

    def test_submit_and_list_masked(
        self, credential_repo, client_repo, change_feed, clock
    ) -> None:
        user_id = uuid4()
        SubmitBrokerCredentialUseCase(credential_repo, change_feed, clock=clock).execute(
            _credential(user_id)
        )

        listed = ListBrokerCredentialsUseCase(credential_repo, client_repo).execute(
            ListBrokerCredentialsQuery(user_id=user_id)
        )
        assert len(listed) == 1
        assert listed[0].password == MASKED_PASSWORD
        assert change_feed.events[-1].user_id == user_id

    def test_operator_view_reveals_and_names_client(
        self, credential_repo, client_repo, change_feed, clock
    ) -> None:
        user_id = uuid4()
        client_repo.add(make_client(user_id=user_id))
        SubmitBrokerCredentialUseCase(credential_repo, change_feed, clock=clock).execute(
            _credential(user_id)
        )

        listed = ListBrokerCredentialsUseCase(credential_repo, client_repo).execute(
            ListBrokerCredentialsQuery(reveal=True)
        )
        assert listed[0].password == "s3cret!"
        assert listed[0].client_name == "Amina Otieno"

    def test_invalid_platform_rejected(self, credential_repo, change_feed, clock) -> None:
        with pytest.raises(ValidationError):
            SubmitBrokerCredentialUseCase(credential_repo, change_feed, clock=clock).execute(
                _credential(uuid4(), platform="Binance")
            )

    def test_delete_needs_confirmation_and_ownership(
        self, credential_repo, change_feed, clock
    ) -> None:
        owner = uuid4()
        created = SubmitBrokerCredentialUseCase(
            credential_repo, change_feed, clock=clock
        ).execute(_credential(owner))
        use_case = DeleteBrokerCredentialUseCase(credential_repo, change_feed)

        with pytest.raises(ConfirmationRequiredError):
            use_case.execute(DeleteBrokerCredentialCommand(created.id, owner))
        with pytest.raises(BrokerCredentialNotFoundError):
            use_case.execute(DeleteBrokerCredentialCommand(created.id, uuid4(), confirmed=True))

        use_case.execute(DeleteBrokerCredentialCommand(created.id, owner, confirmed=True))
        assert credential_repo.get(created.id) is None


# =====================================================================
# Payment proofs
# =====================================================================


def _proof_command(user_id, **overrides) -> SubmitPaymentProofCommand:
    values = {
        "user_id": user_id,
        "email": "amina@example.com",
        "filename": "M-Pesa receipt.png",
        "content_type": "image/png",
        "data": PNG,
    }
    values.update(overrides)
    return SubmitPaymentProofCommand(**values)


class TestPaymentProofs:
    """Tests for submitting, listing and confirming payment proofs."""

    @pytest.fixture
    def ready_user(self, client_repo):
        user_id = uuid4()
        client_repo.add(make_ready_client("20", "35", user_id=user_id))
        return user_id

    def _submit(self, client_repo, proof_repo, blob_store, change_feed, clock):
        return SubmitPaymentProofUseCase(
            client_repo, proof_repo, blob_store, change_feed, max_upload_bytes=1024, clock=clock
        )

    def test_submit_uploads_and_records_pending_proof(
        self, ready_user, client_repo, proof_repo, blob_store, change_feed, clock
    ) -> None:
        use_case = self._submit(client_repo, proof_repo, blob_store, change_feed, clock)
        result = use_case.execute(_proof_command(ready_user))

        assert result.status == "pending"
        assert result.amount == Decimal("7.50")
        assert len(blob_store.blobs) == 1
        (path,) = blob_store.blobs
        assert path.startswith(f"{ready_user}/")
        assert " " not in path
        assert result.screenshot_url.endswith(path)
        assert change_feed.events[-1].collection is Collection.PAYMENT_PROOFS

    def test_rejects_non_image(
        self, ready_user, client_repo, proof_repo, blob_store, change_feed, clock
    ) -> None:
        use_case = self._submit(client_repo, proof_repo, blob_store, change_feed, clock)
        with pytest.raises(ValidationError) as exc:
            use_case.execute(_proof_command(ready_user, content_type="application/pdf"))
        assert exc.value.fields == {"screenshot": "Screenshot must be an image"}
        assert blob_store.blobs == {}

    def test_rejects_oversized_upload(
        self, ready_user, client_repo, proof_repo, blob_store, change_feed, clock
    ) -> None:
        use_case = self._submit(client_repo, proof_repo, blob_store, change_feed, clock)
        with pytest.raises(ValidationError) as exc:
            use_case.execute(_proof_command(ready_user, data=b"x" * 2048))
        assert exc.value.fields == {"screenshot": "Screenshot is too large"}

    def test_sub_cent_amount_rejected_before_upload(
        self, ready_user, client_repo, proof_repo, blob_store, change_feed, clock
    ) -> None:
        use_case = self._submit(client_repo, proof_repo, blob_store, change_feed, clock)
        with pytest.raises(ValidationError) as exc:
            use_case.execute(_proof_command(ready_user, amount=Decimal("0.004")))
        assert exc.value.fields == {"amount": "Amount must be greater than zero"}
        assert blob_store.blobs == {}
        assert proof_repo.list_all() == []

    def test_claimed_amount_is_rounded_to_cents(
        self, ready_user, client_repo, proof_repo, blob_store, change_feed, clock
    ) -> None:
        use_case = self._submit(client_repo, proof_repo, blob_store, change_feed, clock)
        result = use_case.execute(_proof_command(ready_user, amount=Decimal("3.005")))
        assert result.amount == Decimal("3.01")

    def test_no_profit_no_upload(
        self, client_repo, proof_repo, blob_store, change_feed, clock
    ) -> None:
        user_id = uuid4()
        client_repo.add(make_ready_client("100", "80", user_id=user_id))
        use_case = self._submit(client_repo, proof_repo, blob_store, change_feed, clock)
        with pytest.raises(SettlementNotAvailableError):
            use_case.execute(_proof_command(user_id))
        assert blob_store.blobs == {}

    def test_without_application(
        self, client_repo, proof_repo, blob_store, change_feed, clock
    ) -> None:
        use_case = self._submit(client_repo, proof_repo, blob_store, change_feed, clock)
        with pytest.raises(SettlementNotAvailableError):
            use_case.execute(_proof_command(uuid4(), email="nobody@example.com"))

    def test_blob_store_failure_records_nothing(
        self, ready_user, client_repo, proof_repo, change_feed, clock
    ) -> None:
        use_case = self._submit(
            client_repo, proof_repo, InMemoryBlobStore(fail=True), change_feed, clock
        )
        with pytest.raises(ServiceUnavailableError):
            use_case.execute(_proof_command(ready_user))
        assert proof_repo.list_all() == []

    def test_confirm_moves_totals(
        self, ready_user, client_repo, proof_repo, blob_store, change_feed, clock
    ) -> None:
        """Confirming a 7.50 proof moves 7.50 from pending to confirmed."""
        submitted = self._submit(
            client_repo, proof_repo, blob_store, change_feed, clock
        ).execute(_proof_command(ready_user))
        listing = ListPaymentProofsUseCase(proof_repo, client_repo)

        before = listing.execute()
        assert before.pending_total == Decimal("7.50")
        assert before.confirmed_total == Decimal("0.00")
        assert before.proofs[0].client_name == "Amina Otieno"

        operator = uuid4()
        confirm = ConfirmPaymentProofUseCase(proof_repo, change_feed, clock=clock)
        first = confirm.execute(ConfirmPaymentProofCommand(submitted.id, operator))
        assert first.changed is True
        assert first.proof.confirmed_by == operator

        after = listing.execute()
        assert after.pending_total == Decimal("0.00")
        assert after.confirmed_total == Decimal("7.50")

    def test_second_confirmation_is_a_no_op(
        self, ready_user, client_repo, proof_repo, blob_store, change_feed, clock
    ) -> None:
        submitted = self._submit(
            client_repo, proof_repo, blob_store, change_feed, clock
        ).execute(_proof_command(ready_user))
        confirm = ConfirmPaymentProofUseCase(proof_repo, change_feed, clock=clock)
        first_operator = uuid4()
        confirm.execute(ConfirmPaymentProofCommand(submitted.id, first_operator))
        events = len(change_feed.events)

        second = confirm.execute(ConfirmPaymentProofCommand(submitted.id, uuid4()))
        assert second.changed is False
        assert second.proof.confirmed_by == first_operator
        assert len(change_feed.events) == events

    def test_confirm_missing_proof(self, proof_repo, change_feed, clock) -> None:
        with pytest.raises(PaymentProofNotFoundError):
            ConfirmPaymentProofUseCase(proof_repo, change_feed, clock=clock).execute(
                ConfirmPaymentProofCommand(uuid4(), uuid4())
            )


# =====================================================================
# Settlement details and payment settings
# =====================================================================


class TestSettlementDetails:
    """Tests for GetSettlementDetailsUseCase."""

    def test_locked_dashboard_hides_amount(
        self, client_repo, proof_repo, setting_repo, change_feed, clock
    ) -> None:
        user_id = uuid4()
        client_repo.add(make_client(user_id=user_id))
        result = GetSettlementDetailsUseCase(
            client_repo, proof_repo, setting_repo, change_feed, clock=clock
        ).execute(GetSettlementDetailsQuery(user_id=user_id, email="amina@example.com"))

        assert result.available is False
        assert result.amount_due == Decimal("0.00")
        assert result.destinations["mpesa_name"] == NOT_CONFIGURED

    def test_ready_client_sees_amount_and_destinations(
        self, client_repo, proof_repo, setting_repo, change_feed, clock
    ) -> None:
        user_id = uuid4()
        client_repo.add(make_ready_client("20", "35", user_id=user_id))
        setting_repo.upsert("mpesa_number", "0712345678", clock())

        result = GetSettlementDetailsUseCase(
            client_repo, proof_repo, setting_repo, change_feed, clock=clock
        ).execute(GetSettlementDetailsQuery(user_id=user_id, email="amina@example.com"))

        assert result.available is True
        assert result.amount_due == Decimal("7.50")
        assert result.destinations["mpesa_number"] == "0712345678"
        assert result.destinations["crypto_wallet_address"] == NOT_CONFIGURED


class TestPaymentSettings:
    """Tests for the payment settings use cases."""

    def test_only_changed_keys_are_written(self, setting_repo, change_feed, clock) -> None:
        save = SavePaymentSettingsUseCase(setting_repo, change_feed, clock=clock)
        first = save.execute(
            SavePaymentSettingsCommand(values={"mpesa_name": "Jane", "crypto_network": "TRC20"})
        )
        assert first.changed_keys == ["crypto_network", "mpesa_name"]
        assert len(change_feed.events) == 2
        assert all(e.collection is Collection.ADMIN_SETTINGS for e in change_feed.events)

        second = save.execute(
            SavePaymentSettingsCommand(values={"mpesa_name": "Jane", "crypto_network": "ERC20"})
        )
        assert second.changed_keys == ["crypto_network"]
        assert len(change_feed.events) == 3

        settings = GetPaymentSettingsUseCase(setting_repo).execute()
        assert settings.values["crypto_network"] == "ERC20"
        assert settings.values["mpesa_number"] == ""
        assert settings.display["mpesa_number"] == NOT_CONFIGURED

    def test_unknown_key_writes_nothing(self, setting_repo, change_feed, clock) -> None:
        save = SavePaymentSettingsUseCase(setting_repo, change_feed, clock=clock)
        with pytest.raises(ValidationError):
            save.execute(SavePaymentSettingsCommand(values={"mpesa_name": "J", "iban": "X"}))
        assert setting_repo.get_all() == {}
