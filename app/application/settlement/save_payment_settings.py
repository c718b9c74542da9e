"""
Use case: Operator saves payment destination settings.

Input: SavePaymentSettingsCommand (key → value)
Output: SavePaymentSettingsResult
Side effects: Writes only the keys whose value changed.
Failure cases: ValidationError for unknown keys or oversized values.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from app.application.settlement.dtos import (
    SavePaymentSettingsCommand,
    SavePaymentSettingsResult,
)
from app.application.settlement.get_payment_settings import build_settings_result
from app.domain.settlement.events import ChangeEvent, ChangeOp, Collection
from app.domain.settlement.ports import AdminSettingRepository, ChangeFeedPort
from app.domain.settlement.settings_store import diff_settings
from app.shared.clock import utcnow

logger = logging.getLogger(__name__)


class SavePaymentSettingsUseCase:
    """Compares proposed settings to storage and writes the differences."""

    def __init__(
        self,
        setting_repo: AdminSettingRepository,
        change_feed: ChangeFeedPort,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._setting_repo = setting_repo
        self._change_feed = change_feed
        self._clock = clock

    def execute(self, command: SavePaymentSettingsCommand) -> SavePaymentSettingsResult:
        """Run the save payment settings use case."""
        stored = self._setting_repo.get_all()
        changed = diff_settings(stored, command.values)

        now = self._clock()
        for key, value in changed.items():
            self._setting_repo.upsert(key, value, now)
            stored[key] = value
            self._change_feed.publish(
                ChangeEvent(
                    collection=Collection.ADMIN_SETTINGS,
                    op=ChangeOp.UPDATE,
                    record_id=key,
                )
            )
        logger.info("Payment settings saved: changed=%s", sorted(changed))
        return SavePaymentSettingsResult(
            changed_keys=sorted(changed),
            settings=build_settings_result(stored),
        )
