"""
Dependency injection for the support assistant.
"""

from app.application.assistant.stream_reply import StreamReplyUseCase
from app.core.config import settings
from app.infrastructure.assistant.chat_completion_adapter import ChatCompletionAdapter


def get_stream_reply_use_case() -> StreamReplyUseCase:
    """Build StreamReplyUseCase with the configured completion endpoint."""
    return StreamReplyUseCase(
        assistant=ChatCompletionAdapter(
            url=settings.assistant_url,
            api_key=settings.assistant_api_key,
            model=settings.assistant_model,
            timeout=settings.assistant_timeout_seconds,
        ),
        system_prompt=settings.assistant_system_prompt,
    )
