"""
FastAPI router for realtime change notifications.

Provides:
- WebSocket endpoint (token in the query string, since browsers cannot
  set headers on WebSocket upgrades)
- SSE (Server-Sent Events) endpoint for HTTP-only clients

Events carry no record body; subscribers re-fetch what changed.
Operators receive every event, clients only their own.
"""

import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from fastapi.responses import StreamingResponse
from starlette.concurrency import run_in_threadpool

from app.application.settlement.client_lookup import resolve_client
from app.domain.identity.entities import Identity
from app.domain.identity.ports import IdentityPort
from app.domain.settlement.ports import ChangeFeedPort, ClientRepository
from app.infrastructure.realtime.change_stream import (
    ChangeStreamManager,
    Subscription,
    to_message,
)
from app.interfaces.dependencies import (
    get_change_feed,
    get_change_stream,
    get_identity_service,
)
from app.interfaces.identity.dependencies import get_current_identity
from app.interfaces.settlement.dependencies import get_client_repository
from app.shared.clock import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/realtime", tags=["realtime"])


def _client_id_for(
    client_repo: ClientRepository, change_feed: ChangeFeedPort, identity: Identity
) -> Optional[UUID]:
    if identity.is_operator:
        return None
    client = resolve_client(
        client_repo, change_feed, user_id=identity.user_id, email=identity.email, now=utcnow()
    )
    return client.id if client is not None else None


async def _subscribe(
    stream: ChangeStreamManager,
    client_repo: ClientRepository,
    change_feed: ChangeFeedPort,
    identity: Identity,
) -> Subscription:
    client_id = await run_in_threadpool(_client_id_for, client_repo, change_feed, identity)
    return stream.subscribe(
        is_operator=identity.is_operator, user_id=identity.user_id, client_id=client_id
    )


async def _stop_sender(sender: asyncio.Task) -> None:
    """Cancel the outbound pump and reap it, whatever it ended with."""
    sender.cancel()
    try:
        await sender
    except asyncio.CancelledError:
        pass
    except Exception:
        logger.debug("WebSocket sender stopped with an error", exc_info=True)


# ------------------------------------------------------------------
# WebSocket endpoint
# ------------------------------------------------------------------


@router.websocket("/ws")
async def ws_changes(
    websocket: WebSocket,
    token: str = Query(default=""),
    stream: ChangeStreamManager = Depends(get_change_stream),
    identity_service: IdentityPort = Depends(get_identity_service),
    client_repo: ClientRepository = Depends(get_client_repository),
    change_feed: ChangeFeedPort = Depends(get_change_feed),
) -> None:
    """WebSocket endpoint for change notifications.

    Protocol (JSON):
        ← {"event": "connected"}
        ← {"event": "change", "collection": "clients", "op": "update", ...}

        → {"action": "ping"}
        ← {"event": "pong", "timestamp": "..."}
    """
    identity = await run_in_threadpool(identity_service.resolve_session, token) if token else None
    if identity is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    sub = await _subscribe(stream, client_repo, change_feed, identity)
    await websocket.send_text(json.dumps({"event": "connected"}))

    async def pump() -> None:
        while True:
            event = await sub.queue.get()
            await websocket.send_text(to_message(event))

    sender = asyncio.create_task(pump())
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                action = json.loads(raw).get("action", "")
            except (json.JSONDecodeError, AttributeError):
                action = ""
            if action == "ping":
                await websocket.send_text(
                    json.dumps({
                        "event": "pong",
                        "timestamp": datetime.now(timezone.utc).isoformat(),
                    })
                )
            else:
                await websocket.send_text(
                    json.dumps({"error": "Unknown action", "supported": ["ping"]})
                )
    except WebSocketDisconnect:
        pass
    finally:
        await _stop_sender(sender)
        stream.unsubscribe(sub)


# ------------------------------------------------------------------
# SSE endpoint
# ------------------------------------------------------------------


@router.get(
    "/stream",
    summary="Server-Sent Events change stream",
    description="HTTP streaming endpoint for clients that can't use WebSocket.",
)
async def sse_changes(
    identity: Identity = Depends(get_current_identity),
    stream: ChangeStreamManager = Depends(get_change_stream),
    client_repo: ClientRepository = Depends(get_client_repository),
    change_feed: ChangeFeedPort = Depends(get_change_feed),
) -> StreamingResponse:
    """SSE endpoint: streams change events as text/event-stream."""
    sub = await _subscribe(stream, client_repo, change_feed, identity)
    return StreamingResponse(
        stream.sse_generator(sub),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
