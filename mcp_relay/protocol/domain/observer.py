"""ProtocolObserver port — domain events emitted by the protocol client."""

from typing import Protocol


class ProtocolObserver(Protocol):
    """Observer port for protocol client events."""

    def handshake_started(self, client_name: str) -> None: ...

    def handshake_completed(self, protocol_version: str, server_name: str) -> None: ...

    def handshake_failed(self, reason: str) -> None: ...

    def request_sent(self, method: str, request_id: int) -> None: ...

    def request_settled(
        self, method: str, request_id: int, succeeded: bool
    ) -> None: ...

    def notification_received(self, method: str) -> None: ...

    def uncaught_error(self, reason: str) -> None: ...

    def client_closed(self, pending_rejected: int) -> None: ...
