"""
Adapter: OpenAI-compatible streaming chat completions.

Implements AssistantPort over httpx. The endpoint answers with
server-sent events; each ``data:`` line carries a JSON chunk whose
``choices[0].delta.content`` is the next piece of the reply, and the
literal ``[DONE]`` ends the stream.
"""

import json
import logging
from collections.abc import Iterator
from typing import Optional

import httpx

from app.domain.assistant.entities import ChatMessage
from app.domain.assistant.errors import AssistantUnavailableError
from app.domain.assistant.ports import AssistantPort

logger = logging.getLogger(__name__)

DONE = object()


def parse_event_line(line: str) -> object:
    """Return the content delta of one SSE line.

    Returns:
        The delta string, ``DONE`` at the end marker, or None for
        comments, blank lines, other fields and unparseable chunks.
    """
    line = line.strip()
    if not line or line.startswith(":") or not line.startswith("data:"):
        return None
    data = line[len("data:"):].strip()
    if data == "[DONE]":
        return DONE
    try:
        chunk = json.loads(data)
        return chunk["choices"][0]["delta"].get("content")
    except (json.JSONDecodeError, KeyError, IndexError, TypeError, AttributeError):
        logger.debug("Skipping unparseable stream chunk")
        return None


class ChatCompletionAdapter(AssistantPort):
    """Streams replies from a chat completion endpoint.

    Args:
        url: Full URL of the chat completions endpoint.
        api_key: Bearer key for the endpoint, if it needs one.
        model: Model identifier sent with every request.
        timeout: HTTP timeout in seconds.
        transport: Optional httpx transport, used by tests.
    """

    def __init__(
        self,
        url: Optional[str],
        api_key: Optional[str] = None,
        model: str = "",
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._url = url
        self._api_key = api_key
        self._model = model
        self._timeout = timeout
        self._transport = transport

    def stream_reply(self, messages: list[ChatMessage]) -> Iterator[str]:
        if not self._url:
            raise AssistantUnavailableError("endpoint not configured")

        payload = {
            "model": self._model,
            "messages": [m.to_dict() for m in messages],
            "stream": True,
        }
        headers = {"Accept": "text/event-stream"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                with client.stream("POST", self._url, json=payload, headers=headers) as resp:
                    if not resp.is_success:
                        raise AssistantUnavailableError(f"endpoint returned {resp.status_code}")
                    for line in resp.iter_lines():
                        delta = parse_event_line(line)
                        if delta is DONE:
                            return
                        if delta:
                            yield delta  # type: ignore[misc]
        except httpx.HTTPError as exc:
            raise AssistantUnavailableError(str(exc) or type(exc).__name__) from exc
