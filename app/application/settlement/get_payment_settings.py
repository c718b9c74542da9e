"""
Use case: Read payment destination settings.

Input: None
Output: PaymentSettingsResult
Side effects: None (read-only query).
Failure cases: None. Missing keys render as not configured.
"""

from app.application.settlement.dtos import PaymentSettingsResult
from app.domain.settlement.ports import AdminSettingRepository
from app.domain.settlement.settings_store import KNOWN_KEYS, resolve_all


def build_settings_result(stored: dict[str, str]) -> PaymentSettingsResult:
    return PaymentSettingsResult(
        values={key: stored.get(key, "") for key in KNOWN_KEYS},
        display=resolve_all(stored),
    )


class GetPaymentSettingsUseCase:
    """Returns the known payment settings."""

    def __init__(self, setting_repo: AdminSettingRepository) -> None:
        self._setting_repo = setting_repo

    def execute(self) -> PaymentSettingsResult:
        """Run the get payment settings query."""
        return build_settings_result(self._setting_repo.get_all())
