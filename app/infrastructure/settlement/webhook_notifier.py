"""
Adapter: Operator webhook notifier.

Implements NotifierPort by POSTing a JSON payload to the configured
messaging webhook. Delivery runs on a background worker thread so the
caller never waits on it, and every delivery failure is logged and
dropped.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlparse

import httpx

from app.domain.settlement.events import Notification
from app.domain.settlement.ports import NotifierPort

logger = logging.getLogger(__name__)


class WebhookNotifierAdapter(NotifierPort):
    """Fire-and-forget webhook dispatcher.

    Args:
        webhook_url: Target URL (http/https). None disables delivery.
        timeout: HTTP timeout in seconds for one webhook call.
        transport: Optional httpx transport, used by tests.
    """

    def __init__(
        self,
        webhook_url: Optional[str],
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        if webhook_url:
            parsed = urlparse(webhook_url)
            if parsed.scheme not in ("http", "https"):
                msg = f"Invalid webhook URL scheme: {parsed.scheme}"
                raise ValueError(msg)
        self._webhook_url = webhook_url
        self._timeout = timeout
        self._transport = transport
        self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="notifier")
        self._stats = {"sent": 0, "errors": 0}

    @property
    def stats(self) -> dict:
        return dict(self._stats)

    def notify(self, notification: Notification) -> None:
        """Queue a notification for delivery and return immediately."""
        if not self._webhook_url:
            logger.debug("Notifier disabled; dropping %s", notification.kind.value)
            return
        try:
            self._executor.submit(self._send, notification)
        except RuntimeError as exc:
            # Executor already shut down.
            logger.warning("Notification dropped: %s", exc)

    def close(self, wait: bool = True) -> None:
        """Stop accepting notifications, optionally draining queued ones."""
        self._executor.shutdown(wait=wait)

    def _send(self, notification: Notification) -> None:
        payload = {
            **notification.to_payload(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                resp = client.post(
                    self._webhook_url,  # type: ignore[arg-type]
                    json=payload,
                    headers={"X-Profitshare-Event": notification.kind.value},
                )
                resp.raise_for_status()
            self._stats["sent"] += 1
            logger.info("Notification sent: %s", notification.kind.value)
        except httpx.HTTPError as exc:
            self._stats["errors"] += 1
            logger.warning("Notification %s failed: %s", notification.kind.value, exc)
