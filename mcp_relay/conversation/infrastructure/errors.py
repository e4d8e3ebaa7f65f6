"""Error types raised by the conversation context."""

from mcp_relay.core.errors import RelayError


class CompletionError(RelayError):
    """Raised when the completion service cannot be invoked or misbehaves."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to complete conversation: {reason}", retriable=True)


class ConversationStateError(RelayError):
    """Raised when a turn would break the ordering of a conversation."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid conversation state: {reason}")
