"""Base exception class for all mcp-relay-specific errors."""


class RelayError(Exception):
    """Base class for all mcp-relay errors."""

    def __init__(self, message: str, retriable: bool = False) -> None:
        super().__init__(message)
        self.retriable = retriable
