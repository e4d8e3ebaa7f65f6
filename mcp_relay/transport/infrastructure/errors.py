"""Error types raised by transport infrastructure."""

from mcp_relay.core.errors import RelayError


class ConnectError(RelayError):
    """Raised when the event stream cannot be opened or its endpoint is rejected."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to connect to event stream: {reason}", retriable=True)


class TransportError(RelayError):
    """Raised when an outbound message is answered with a non-success HTTP status."""

    def __init__(self, status: int | None, body: str) -> None:
        self.status = status
        self.body = body
        status_text = f"HTTP {status}" if status is not None else "no response"
        super().__init__(f"Failed to send message ({status_text}): {body}")


class NotConnectedError(RelayError):
    """Raised when sending before the transport has started or after it closed."""

    def __init__(self, reason: str = "transport is not connected") -> None:
        super().__init__(f"Failed to send message: {reason}")


class MalformedFrameError(RelayError):
    """Raised when a message frame does not carry a JSON object."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to decode message frame: {reason}")
