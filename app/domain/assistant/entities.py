"""
Domain entities for the support assistant.
"""

from dataclasses import dataclass
from enum import Enum


class ChatRole(Enum):
    """Author of a chat message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ChatMessage:
    """One message in a conversation history."""

    role: ChatRole
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}


GREETING = (
    "Welcome! I'm the support assistant. How can I help you today? "
    "Whether you're new or an existing client, I'm here to guide you."
)

CONNECTION_FAILURE_REPLY = (
    "Sorry, I'm having trouble connecting right now. Please try again shortly."
)
