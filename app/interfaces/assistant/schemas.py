"""
Pydantic schemas for the support assistant API.
"""

from typing import Literal

from pydantic import BaseModel, Field


class ChatMessageSchema(BaseModel):
    """One message of the browser-held conversation."""

    role: Literal["user", "assistant"]
    content: str = Field(..., min_length=1, max_length=4000)


class ChatRequest(BaseModel):
    """Request schema for the chat relay.

    Attributes:
        messages: The whole conversation so far, oldest first.
    """

    messages: list[ChatMessageSchema] = Field(..., min_length=1, max_length=50)


class GreetingResponse(BaseModel):
    """The assistant's opening message."""

    role: str = "assistant"
    content: str
