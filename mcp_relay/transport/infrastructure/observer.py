"""Structlog implementation of the TransportObserver port."""

import structlog


class StructlogTransportObserver:
    """Delegates transport domain events to structlog.

    Satisfies the TransportObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def transport_connecting(self, url: str) -> None:
        self._log.debug("transport.connecting", url=url)

    def transport_connected(self, url: str, callback_url: str) -> None:
        self._log.info("transport.connected", url=url, callback_url=callback_url)

    def transport_send_failed(self, callback_url: str, reason: str) -> None:
        self._log.error(
            "transport.send_failed", callback_url=callback_url, reason=reason
        )

    def transport_frame_rejected(self, event: str, reason: str) -> None:
        self._log.warning("transport.frame_rejected", sse_event=event, reason=reason)

    def transport_closed(self, url: str) -> None:
        self._log.info("transport.closed", url=url)
