"""
Port interfaces (ABCs) for the assistant bounded context.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator

from app.domain.assistant.entities import ChatMessage


class AssistantPort(ABC):
    """Port for a streaming chat completion endpoint."""

    @abstractmethod
    def stream_reply(self, messages: list[ChatMessage]) -> Iterator[str]:
        """Yield content chunks of the assistant's reply as they arrive.

        The iterator ends at the endpoint's end-of-stream marker.

        Raises:
            AssistantUnavailableError: On connection failure or a non-2xx
                response, possibly after some chunks were already yielded.
        """
        raise NotImplementedError
