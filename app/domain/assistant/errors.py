"""
Domain-specific errors for the assistant bounded context.
"""


class AssistantDomainError(Exception):
    """Base error for all assistant domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class InvalidConversationError(AssistantDomainError):
    """Raised when a message history is empty, too long or malformed."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid conversation: {reason}")
        self.reason = reason


class AssistantUnavailableError(AssistantDomainError):
    """Raised when the completion endpoint cannot be reached or fails."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Assistant unavailable: {reason}")
        self.reason = reason
