"""
FastAPI router for the support assistant.

The browser keeps the conversation and posts it whole; the reply is
re-streamed as Server-Sent Events:

    event: delta   data: {"content": "..."}     (zero or more)
    event: error   data: {"message": "..."}     (at most one)
    event: done    data: {}                     (always last)
"""

import json
import logging
from collections.abc import Iterator

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from app.application.assistant.stream_reply import StreamChunk, StreamReplyUseCase
from app.core.config import settings
from app.domain.assistant.entities import GREETING, ChatMessage, ChatRole
from app.interfaces.assistant.dependencies import get_stream_reply_use_case
from app.interfaces.assistant.schemas import ChatRequest, GreetingResponse
from app.interfaces.settlement.schemas import ErrorResponse
from app.shared.security.rate_limiting import limiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assistant", tags=["assistant"])


def _sse(event: str, payload: dict) -> str:
    return f"event: {event}\ndata: {json.dumps(payload)}\n\n"


def _event_stream(chunks: Iterator[StreamChunk]) -> Iterator[str]:
    for chunk in chunks:
        if chunk.kind == "error":
            yield _sse("error", {"message": chunk.content})
        else:
            yield _sse("delta", {"content": chunk.content})
    yield _sse("done", {})


@router.get(
    "",
    response_model=GreetingResponse,
    summary="Assistant greeting",
)
def greeting() -> GreetingResponse:
    return GreetingResponse(content=GREETING)


@router.post(
    "/chat",
    responses={422: {"model": ErrorResponse}},
    summary="Stream an assistant reply",
    description="Relays the conversation and streams the reply as text/event-stream.",
)
@limiter.limit(settings.rate_limit_heavy)
def chat(
    request: Request,
    body: ChatRequest,
    use_case: StreamReplyUseCase = Depends(get_stream_reply_use_case),
) -> StreamingResponse:
    """Validate the conversation, then stream the reply."""
    messages = [ChatMessage(role=ChatRole(m.role), content=m.content) for m in body.messages]
    chunks = use_case.execute(messages)
    return StreamingResponse(
        _event_stream(chunks),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
        },
    )
