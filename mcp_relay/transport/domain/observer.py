"""TransportObserver port — domain events emitted by the wire transport."""

from typing import Protocol


class TransportObserver(Protocol):
    """Observer port for transport domain events.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def transport_connecting(self, url: str) -> None: ...

    def transport_connected(self, url: str, callback_url: str) -> None: ...

    def transport_send_failed(self, callback_url: str, reason: str) -> None: ...

    def transport_frame_rejected(self, event: str, reason: str) -> None: ...

    def transport_closed(self, url: str) -> None: ...
