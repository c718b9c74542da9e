"""
Tests for the settlement domain layer.

Covers money handling, the share calculator, lifecycle rules, the
dashboard and agreement gates, the payment proof workflow, payment
settings and form validation. No IO is involved.
"""

from decimal import Decimal
from uuid import uuid4

import pytest

from app.domain.settlement.entities import (
    ActivationStatus,
    ClientStatus,
    DashboardGate,
    PaymentProof,
    ProofStatus,
)
from app.domain.settlement.errors import (
    AgreementNotAvailableError,
    InvalidStatusCombinationError,
    InvalidTransitionError,
    SettlementNotAvailableError,
    ValidationError,
)
from app.domain.settlement.lifecycle import (
    accept_agreement,
    apply_operator_edit,
    dashboard_gate,
    is_sunday_eligible,
    is_valid_combination,
)
from app.domain.settlement.money import format_money, quantize, to_money
from app.domain.settlement.payment_workflow import (
    confirm_proof,
    open_proof,
    require_settlement,
    settlement_totals,
)
from app.domain.settlement.settings_store import (
    KNOWN_KEYS,
    NOT_CONFIGURED,
    diff_settings,
    resolve,
    resolve_all,
)
from app.domain.settlement.share_calculator import compute_share
from app.domain.settlement.validation import validate_application, validate_credential
from factories import START, make_client, make_ready_client


# =====================================================================
# Money
# =====================================================================


class TestMoney:
    """Tests for Decimal conversion and display."""

    def test_float_input_has_no_binary_noise(self) -> None:
        assert to_money(0.1) + to_money(0.2) == Decimal("0.3")

    def test_string_input_is_trimmed(self) -> None:
        assert to_money(" 20.50 ") == Decimal("20.50")

    def test_non_numeric_rejected(self) -> None:
        with pytest.raises(ValueError):
            to_money("twenty")

    def test_infinity_rejected(self) -> None:
        with pytest.raises(ValueError):
            to_money("Infinity")

    def test_quantize_rounds_half_up(self) -> None:
        assert quantize(Decimal("0.005")) == Decimal("0.01")
        assert quantize(Decimal("7.494")) == Decimal("7.49")

    def test_format_money(self) -> None:
        assert format_money(Decimal("1234.5")) == "$1,234.50"
        assert format_money(Decimal("-20")) == "-$20.00"


# =====================================================================
# Share calculator
# =====================================================================


class TestShareCalculator:
    """Tests for compute_share."""

    def test_profit_is_split_in_half(self) -> None:
        """Starting 20, current 35 → net 15, share 7.50."""
        result = compute_share(Decimal("20"), Decimal("35"))
        assert result.net_profit == Decimal("15.00")
        assert result.share == Decimal("7.50")
        assert result.settlement_due is True

    def test_loss_is_not_shared(self) -> None:
        """Starting 100, current 80 → net -20, share 0.00."""
        result = compute_share(Decimal("100"), Decimal("80"))
        assert result.net_profit == Decimal("-20.00")
        assert result.share == Decimal("0.00")
        assert result.settlement_due is False

    def test_break_even_owes_nothing(self) -> None:
        result = compute_share(Decimal("50"), Decimal("50"))
        assert result.share == Decimal("0.00")
        assert result.settlement_due is False

    def test_share_rounds_to_cents(self) -> None:
        result = compute_share(Decimal("20.00"), Decimal("20.03"))
        assert result.share == Decimal("0.02")

    @pytest.mark.parametrize(
        "starting,current,share",
        [("250.10", "431.37", "90.64"), ("1000", "999.99", "0.00"), ("20", "20.01", "0.01")],
    )
    def test_share_is_half_of_positive_profit(
        self, starting: str, current: str, share: str
    ) -> None:
        result = compute_share(Decimal(starting), Decimal(current))
        assert result.share == Decimal(share)

    def test_client_without_starting_balance_has_zero_breakdown(self) -> None:
        client = make_client(account_balance=Decimal("500"))
        assert client.breakdown.net_profit == Decimal("0.00")
        assert client.breakdown.share == Decimal("0.00")


# =====================================================================
# Lifecycle
# =====================================================================


class TestOperatorEdit:
    """Tests for apply_operator_edit."""

    def test_approval_fixes_starting_balance(self) -> None:
        client = make_client(account_balance=Decimal("100"))
        apply_operator_edit(client, START, status=ClientStatus.APPROVED)
        assert client.status is ClientStatus.APPROVED
        assert client.starting_balance == Decimal("100")
        assert client.last_updated == START

    def test_explicit_starting_balance_is_kept(self) -> None:
        client = make_client(account_balance=Decimal("100"))
        apply_operator_edit(
            client, START, status=ClientStatus.APPROVED, starting_balance=Decimal("80")
        )
        assert client.starting_balance == Decimal("80")

    def test_starting_balance_below_minimum_rejected(self) -> None:
        client = make_client()
        with pytest.raises(ValidationError) as exc:
            apply_operator_edit(client, START, starting_balance=Decimal("19.99"))
        assert exc.value.fields["starting_balance"] == "Minimum capital is $20"

    def test_negative_balance_rejected(self) -> None:
        client = make_client()
        with pytest.raises(ValidationError) as exc:
            apply_operator_edit(client, START, account_balance=Decimal("-1"))
        assert "account_balance" in exc.value.fields

    def test_rejected_edit_leaves_client_unchanged(self) -> None:
        client = make_client()
        with pytest.raises(InvalidTransitionError):
            apply_operator_edit(
                client,
                START,
                status=ClientStatus.PAUSED,
                account_balance=Decimal("999"),
            )
        assert client.status is ClientStatus.NEW_APPLICANT
        assert client.account_balance == Decimal("100.00")

    def test_rejected_is_terminal(self) -> None:
        client = make_client(status=ClientStatus.REJECTED)
        with pytest.raises(InvalidTransitionError):
            apply_operator_edit(client, START, status=ClientStatus.APPROVED)

    def test_activation_cannot_skip_steps(self) -> None:
        client = make_client(status=ClientStatus.APPROVED, starting_balance=Decimal("100"))
        with pytest.raises(InvalidTransitionError) as exc:
            apply_operator_edit(client, START, activation_status=ActivationStatus.SETTLED)
        assert exc.value.axis == "activation_status"

    def test_full_cycle_to_new_cycle(self) -> None:
        client = make_client(status=ClientStatus.APPROVED, starting_balance=Decimal("100"))
        for target in (
            ActivationStatus.ACTIVE,
            ActivationStatus.PENDING_SETTLEMENT,
            ActivationStatus.SETTLED,
            ActivationStatus.PENDING_SUNDAY_ACTIVATION,
        ):
            apply_operator_edit(client, START, activation_status=target)
            assert client.activation_status is target

    def test_rejected_and_trading_is_forbidden(self) -> None:
        client = make_client(
            status=ClientStatus.ACTIVE,
            activation_status=ActivationStatus.ACTIVE,
            starting_balance=Decimal("100"),
        )
        with pytest.raises(InvalidStatusCombinationError):
            apply_operator_edit(client, START, status=ClientStatus.REJECTED)

    def test_only_rejected_is_barred_from_trading(self) -> None:
        assert is_valid_combination(ClientStatus.NEW_APPLICANT, ActivationStatus.ACTIVE)
        assert is_valid_combination(ClientStatus.PAUSED, ActivationStatus.ACTIVE)
        assert not is_valid_combination(ClientStatus.REJECTED, ActivationStatus.ACTIVE)
        assert is_valid_combination(
            ClientStatus.REJECTED, ActivationStatus.PENDING_SUNDAY_ACTIVATION
        )

    def test_approval_below_minimum_balance_rejected(self) -> None:
        client = make_client(account_balance=Decimal("10"))
        with pytest.raises(ValidationError):
            apply_operator_edit(client, START, status=ClientStatus.APPROVED)


class TestDashboardGate:
    """Tests for dashboard_gate."""

    def test_no_record(self) -> None:
        assert dashboard_gate(None) is DashboardGate.NO_RECORD

    @pytest.mark.parametrize(
        "status", [ClientStatus.NEW_APPLICANT, ClientStatus.PAUSED, ClientStatus.REJECTED]
    )
    def test_not_engaged_is_pending_review(self, status: ClientStatus) -> None:
        client = make_client(status=status, agreement_accepted=True)
        assert dashboard_gate(client) is DashboardGate.PENDING_REVIEW

    def test_approved_without_agreement(self) -> None:
        client = make_client(status=ClientStatus.APPROVED)
        assert dashboard_gate(client) is DashboardGate.AGREEMENT_REQUIRED

    def test_ready(self) -> None:
        assert dashboard_gate(make_ready_client()) is DashboardGate.READY


class TestAgreement:
    """Tests for accept_agreement."""

    def test_accepting_sets_timestamp_once(self) -> None:
        client = make_client(status=ClientStatus.APPROVED, starting_balance=Decimal("100"))
        assert accept_agreement(client, START) is True
        assert client.agreement_accepted_at == START

        later = START.replace(hour=18)
        assert accept_agreement(client, later) is False
        assert client.agreement_accepted_at == START

    def test_new_applicant_cannot_accept(self) -> None:
        with pytest.raises(AgreementNotAvailableError):
            accept_agreement(make_client(), START)


class TestSundayEligibility:
    """Tests for is_sunday_eligible."""

    def test_approved_pending_client_is_eligible(self) -> None:
        client = make_client(status=ClientStatus.APPROVED, starting_balance=Decimal("100"))
        assert is_sunday_eligible(client)

    def test_new_applicant_is_eligible(self) -> None:
        assert is_sunday_eligible(make_client())

    def test_rejected_is_not_eligible(self) -> None:
        assert not is_sunday_eligible(make_client(status=ClientStatus.REJECTED))

    def test_already_active_is_not_eligible(self) -> None:
        assert not is_sunday_eligible(make_ready_client())


# =====================================================================
# Payment workflow
# =====================================================================


class TestPaymentWorkflow:
    """Tests for opening, confirming and totalling payment proofs."""

    def test_open_proof_defaults_to_current_share(self) -> None:
        client = make_ready_client("20", "35", user_id=uuid4())
        proof = open_proof(client, "https://blobs.example.com/p.png", START)
        assert proof.amount == Decimal("7.50")
        assert proof.status is ProofStatus.PENDING
        assert proof.client_id == client.id
        assert proof.user_id == client.user_id

    def test_open_proof_with_claimed_amount(self) -> None:
        client = make_ready_client("20", "35", user_id=uuid4())
        proof = open_proof(client, "https://x", START, amount=Decimal("5"))
        assert proof.amount == Decimal("5.00")

    def test_no_profit_means_nothing_to_settle(self) -> None:
        client = make_ready_client("100", "80", user_id=uuid4())
        with pytest.raises(SettlementNotAvailableError) as exc:
            open_proof(client, "https://x", START)
        assert exc.value.reason == "no positive net profit"

    def test_unlinked_client_cannot_settle(self) -> None:
        with pytest.raises(SettlementNotAvailableError):
            require_settlement(make_ready_client("20", "35"))

    def test_locked_dashboard_cannot_settle(self) -> None:
        client = make_ready_client("20", "35", user_id=uuid4(), agreement_accepted=False)
        with pytest.raises(SettlementNotAvailableError):
            require_settlement(client)

    def test_missing_screenshot_and_bad_amount(self) -> None:
        client = make_ready_client("20", "35", user_id=uuid4())
        with pytest.raises(ValidationError) as exc:
            open_proof(client, "", START, amount=Decimal("0"))
        assert set(exc.value.fields) == {"amount", "screenshot"}

    def test_confirm_is_idempotent(self) -> None:
        operator = uuid4()
        proof = PaymentProof(
            client_id=uuid4(), user_id=uuid4(), screenshot_url="u", amount=Decimal("7.50")
        )
        assert confirm_proof(proof, operator, START) is True
        assert proof.confirmed_by == operator

        assert confirm_proof(proof, uuid4(), START.replace(hour=20)) is False
        assert proof.confirmed_by == operator
        assert proof.confirmed_at == START

    def test_confirmation_moves_amount_between_totals(self) -> None:
        proof = PaymentProof(
            client_id=uuid4(), user_id=uuid4(), screenshot_url="u", amount=Decimal("7.50")
        )
        before = settlement_totals([proof])
        assert before.pending == Decimal("7.50")
        assert before.confirmed == Decimal("0.00")

        confirm_proof(proof, uuid4(), START)
        after = settlement_totals([proof])
        assert after.pending == Decimal("0.00")
        assert after.confirmed == Decimal("7.50")
        assert after.confirmed_count == 1

    def test_totals_count_each_proof_once(self) -> None:
        proof = PaymentProof(
            client_id=uuid4(), user_id=uuid4(), screenshot_url="u", amount=Decimal("10")
        )
        totals = settlement_totals([proof, proof])
        assert totals.pending == Decimal("10.00")
        assert totals.pending_count == 1


# =====================================================================
# Settings
# =====================================================================


class TestSettingsStore:
    """Tests for payment destination settings."""

    def test_missing_and_blank_are_not_configured(self) -> None:
        assert resolve({}, "mpesa_name") == NOT_CONFIGURED
        assert resolve({"mpesa_name": "  "}, "mpesa_name") == NOT_CONFIGURED
        assert resolve({"mpesa_name": "Jane"}, "mpesa_name") == "Jane"

    def test_resolve_all_covers_every_key(self) -> None:
        resolved = resolve_all({"crypto_network": "TRC20"})
        assert set(resolved) == set(KNOWN_KEYS)
        assert resolved["crypto_network"] == "TRC20"
        assert resolved["mpesa_number"] == NOT_CONFIGURED

    def test_diff_returns_only_changes(self) -> None:
        current = {"mpesa_name": "Jane", "mpesa_number": "0700"}
        proposed = {"mpesa_name": " Jane ", "mpesa_number": "0711"}
        assert diff_settings(current, proposed) == {"mpesa_number": "0711"}

    def test_diff_treats_missing_as_empty(self) -> None:
        assert diff_settings({}, {"crypto_network": ""}) == {}
        assert diff_settings({}, {"crypto_network": "ERC20"}) == {"crypto_network": "ERC20"}

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc:
            diff_settings({}, {"bank_iban": "X"})
        assert exc.value.fields == {"bank_iban": "Unknown setting"}


# =====================================================================
# Validation
# =====================================================================


def _application(**overrides) -> dict:
    values = {
        "full_name": "  Amina Otieno ",
        "whatsapp": "+254700000001",
        "email": "Amina@Example.com",
        "platform": "MetaTrader 5 (MT5)",
        "account_balance": "100",
        "agreed_terms": True,
    }
    values.update(overrides)
    return values


class TestApplicationValidation:
    """Tests for validate_application."""

    def test_valid_form_is_normalized(self) -> None:
        form = validate_application(**_application())
        assert form.full_name == "Amina Otieno"
        assert form.email == "amina@example.com"
        assert form.account_balance == Decimal("100")

    def test_balance_below_minimum(self) -> None:
        with pytest.raises(ValidationError) as exc:
            validate_application(**_application(account_balance="15"))
        assert exc.value.fields == {"account_balance": "Minimum capital is $20"}

    def test_every_failing_field_is_reported(self) -> None:
        with pytest.raises(ValidationError) as exc:
            validate_application(
                full_name="A",
                whatsapp="12",
                email="not-an-email",
                platform="Binance",
                account_balance="abc",
                agreed_terms=False,
            )
        assert exc.value.fields == {
            "full_name": "Name must be at least 2 characters",
            "whatsapp": "Enter a valid WhatsApp number",
            "email": "Enter a valid email",
            "platform": "Select a platform",
            "account_balance": "Minimum capital is $20",
            "agreed_terms": "You must agree to the terms",
        }


class TestCredentialValidation:
    """Tests for validate_credential."""

    def test_valid_credential(self) -> None:
        form = validate_credential(" Exness ", "Exness-MT5Real", "123456", "pw", "MT5")
        assert form.broker_name == "Exness"
        assert form.platform == "MT5"

    def test_required_fields(self) -> None:
        with pytest.raises(ValidationError) as exc:
            validate_credential("", " ", "", "", "Binance")
        assert set(exc.value.fields) == {
            "broker_name",
            "server_name",
            "login_number",
            "password",
            "platform",
        }
