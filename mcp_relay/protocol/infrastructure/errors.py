"""Error types raised by the protocol client."""

from typing import Any

from mcp_relay.core.errors import RelayError
from mcp_relay.transport.infrastructure.errors import (
    ConnectError,
    NotConnectedError,
    TransportError,
)


class UnsupportedVersionError(RelayError):
    """Raised when the server negotiates a protocol version we do not speak."""

    def __init__(self, version: str) -> None:
        self.version = version
        super().__init__(
            "Failed to initialize: server's protocol version is not supported:"
            f" {version}"
        )


class ClosedConnectionError(RelayError):
    """Raised for operations on a closed client and for requests cut off by close."""

    def __init__(self, reason: str = "connection closed") -> None:
        super().__init__(f"Failed to complete request: {reason}")


class ClientNotReadyError(RelayError):
    """Raised when a request other than initialize is sent before the handshake."""

    def __init__(self, method: str, state: str) -> None:
        super().__init__(
            f"Failed to send request '{method}': client is {state}, not ready"
        )


class ProtocolViolationError(RelayError):
    """Raised for messages that break the protocol contract."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Protocol error: {reason}")


class RemoteError(RelayError):
    """The server answered a request with a JSON-RPC error object."""

    def __init__(self, message: str, code: int = 0, data: Any = None) -> None:
        self.code = code
        self.data = data
        super().__init__(message)


# Errors that mean the connection itself is unusable, as opposed to one
# request having failed on the remote side.
CONNECTION_ERRORS: tuple[type[RelayError], ...] = (
    ConnectError,
    TransportError,
    NotConnectedError,
    ClosedConnectionError,
    ProtocolViolationError,
)
