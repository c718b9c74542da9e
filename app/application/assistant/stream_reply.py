"""
Use case: Relay a support conversation to the chat completion endpoint.

Input: The browser's ordered message history.
Output: An iterator of StreamChunk (content deltas, then possibly one error).
Side effects: One outbound streaming request.
Failure cases: InvalidConversationError before streaming starts. Endpoint
    failures end the stream with an error chunk instead of raising.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass

import httpx

from app.domain.assistant.entities import (
    CONNECTION_FAILURE_REPLY,
    ChatMessage,
    ChatRole,
)
from app.domain.assistant.errors import AssistantUnavailableError, InvalidConversationError
from app.domain.assistant.ports import AssistantPort

logger = logging.getLogger(__name__)

MAX_MESSAGES = 50
MAX_CONTENT_LENGTH = 4000
_CLIENT_ROLES = {ChatRole.USER, ChatRole.ASSISTANT}


@dataclass(frozen=True)
class StreamChunk:
    """One piece of the relayed reply.

    Attributes:
        kind: "delta" for reply content, "error" for the failure notice.
        content: The text to append.
    """

    kind: str
    content: str


def validate_conversation(messages: list[ChatMessage]) -> None:
    """Reject histories the endpoint should never see."""
    if not messages:
        raise InvalidConversationError("at least one message is required")
    if len(messages) > MAX_MESSAGES:
        raise InvalidConversationError(f"at most {MAX_MESSAGES} messages are allowed")
    for message in messages:
        if message.role not in _CLIENT_ROLES:
            raise InvalidConversationError(f"role {message.role.value!r} is not allowed")
        if not message.content.strip():
            raise InvalidConversationError("messages must not be empty")
        if len(message.content) > MAX_CONTENT_LENGTH:
            raise InvalidConversationError(
                f"messages must be at most {MAX_CONTENT_LENGTH} characters"
            )


class StreamReplyUseCase:
    """Prepends the system prompt and re-streams the endpoint's reply.

    There is no automatic retry: a failure ends the stream with a single
    error chunk carrying the apology message.
    """

    def __init__(self, assistant: AssistantPort, system_prompt: str) -> None:
        self._assistant = assistant
        self._system_prompt = system_prompt

    def prepare(self, messages: list[ChatMessage]) -> list[ChatMessage]:
        """Validate the history and return the outbound message list."""
        validate_conversation(messages)
        return [ChatMessage(role=ChatRole.SYSTEM, content=self._system_prompt), *messages]

    def execute(self, messages: list[ChatMessage]) -> Iterator[StreamChunk]:
        """Validate eagerly, then return the chunk stream."""
        outbound = self.prepare(messages)
        return self._relay(outbound)

    def _relay(self, outbound: list[ChatMessage]) -> Iterator[StreamChunk]:
        try:
            for delta in self._assistant.stream_reply(outbound):
                if delta:
                    yield StreamChunk(kind="delta", content=delta)
        except (AssistantUnavailableError, httpx.HTTPError) as exc:
            logger.warning("Assistant stream failed: %s", exc)
            yield StreamChunk(kind="error", content=CONNECTION_FAILURE_REPLY)
