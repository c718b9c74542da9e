"""
In-process change stream.

Implements ChangeFeedPort and fans events out to WebSocket and SSE
subscribers.

Architecture:
    use case ──publish()──▶ ChangeStreamManager
                                  │ call_soon_threadsafe
                            ┌─────┴───────┐
                            │ Subscriber  │  one bounded asyncio.Queue
                            │ queues      │  per connection
                            └─────┬───────┘
                                  ▼
                       WebSocket / SSE endpoint

Use cases run in FastAPI's worker threads, so publishing hands each
event to the subscriber's own event loop. A full queue drops its oldest
event to make room; subscribers re-fetch records anyway.
"""

import asyncio
import json
import logging
import threading
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from typing import Optional
from uuid import UUID, uuid4

from app.domain.settlement.events import ChangeEvent, Collection
from app.domain.settlement.ports import ChangeFeedPort

logger = logging.getLogger(__name__)

# Collections every signed-in subscriber may watch.
_SHARED_COLLECTIONS = {Collection.ADMIN_SETTINGS}


@dataclass
class Subscription:
    """One connected listener.

    Attributes:
        is_operator: Operators receive every event.
        user_id: The listener's identity.
        client_id: The listener's client record, if linked.
    """

    is_operator: bool
    user_id: Optional[UUID]
    client_id: Optional[UUID]
    queue: asyncio.Queue
    loop: asyncio.AbstractEventLoop
    id: UUID = field(default_factory=uuid4)
    dropped: int = 0

    def wants(self, event: ChangeEvent) -> bool:
        if self.is_operator or event.collection in _SHARED_COLLECTIONS:
            return True
        if self.client_id is not None and event.client_id == self.client_id:
            return True
        return self.user_id is not None and event.user_id == self.user_id

    def offer(self, event: ChangeEvent) -> None:
        """Enqueue on the subscriber's loop, dropping the oldest when full."""
        if self.queue.full():
            self.queue.get_nowait()
            self.dropped += 1
        self.queue.put_nowait(event)


def to_message(event: ChangeEvent) -> str:
    return json.dumps({"event": "change", **event.to_dict()})


def to_sse(event: ChangeEvent) -> str:
    return f"event: change\ndata: {json.dumps(event.to_dict())}\n\n"


class ChangeStreamManager(ChangeFeedPort):
    """Fans change events out to realtime subscribers.

    Args:
        max_queue_size: Events buffered per subscriber before the oldest
            is dropped.
        keepalive_seconds: Idle interval after which SSE streams send a
            comment line.
    """

    def __init__(self, max_queue_size: int = 100, keepalive_seconds: float = 15.0) -> None:
        self._subscribers: dict[UUID, Subscription] = {}
        self._lock = threading.Lock()
        self._max_queue_size = max_queue_size
        self._keepalive_seconds = keepalive_seconds
        self._stats = {"total_subscriptions": 0, "total_events_published": 0}

    @property
    def active_subscribers(self) -> int:
        return len(self._subscribers)

    @property
    def stats(self) -> dict:
        return {**self._stats, "active_subscribers": self.active_subscribers}

    # ------------------------------------------------------------------
    # Subscription lifecycle
    # ------------------------------------------------------------------

    def subscribe(
        self,
        is_operator: bool,
        user_id: Optional[UUID] = None,
        client_id: Optional[UUID] = None,
    ) -> Subscription:
        """Register a listener on the running event loop."""
        sub = Subscription(
            is_operator=is_operator,
            user_id=user_id,
            client_id=client_id,
            queue=asyncio.Queue(maxsize=self._max_queue_size),
            loop=asyncio.get_running_loop(),
        )
        with self._lock:
            self._subscribers[sub.id] = sub
        self._stats["total_subscriptions"] += 1
        logger.info("Realtime subscriber connected. Active: %d", self.active_subscribers)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            removed = self._subscribers.pop(sub.id, None)
        if removed is not None:
            logger.info(
                "Realtime subscriber disconnected (dropped %d). Active: %d",
                removed.dropped,
                self.active_subscribers,
            )

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------

    def publish(self, event: ChangeEvent) -> None:
        """Deliver an event to every interested subscriber. Never raises."""
        self._stats["total_events_published"] += 1
        with self._lock:
            targets = [s for s in self._subscribers.values() if s.wants(event)]
        for sub in targets:
            try:
                sub.loop.call_soon_threadsafe(sub.offer, event)
            except RuntimeError:
                # The subscriber's loop is closed.
                self.unsubscribe(sub)
        logger.debug(
            "Published %s %s to %d subscribers",
            event.collection.value,
            event.op.value,
            len(targets),
        )

    # ------------------------------------------------------------------
    # SSE Generator
    # ------------------------------------------------------------------

    async def sse_generator(self, sub: Subscription) -> AsyncGenerator[str, None]:
        """Yield Server-Sent Events for a subscription until cancelled."""
        try:
            yield ": connected\n\n"
            while True:
                try:
                    event = await asyncio.wait_for(
                        sub.queue.get(), timeout=self._keepalive_seconds
                    )
                except asyncio.TimeoutError:
                    yield ": keepalive\n\n"
                    continue
                yield to_sse(event)
        finally:
            self.unsubscribe(sub)
