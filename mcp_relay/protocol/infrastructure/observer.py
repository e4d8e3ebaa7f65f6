"""Structlog implementation of the ProtocolObserver port."""

import structlog


class StructlogProtocolObserver:
    """Delegates protocol client events to structlog.

    Satisfies the ProtocolObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def handshake_started(self, client_name: str) -> None:
        self._log.debug("protocol.handshake_started", client_name=client_name)

    def handshake_completed(self, protocol_version: str, server_name: str) -> None:
        self._log.info(
            "protocol.handshake_completed",
            protocol_version=protocol_version,
            server_name=server_name,
        )

    def handshake_failed(self, reason: str) -> None:
        self._log.error("protocol.handshake_failed", reason=reason)

    def request_sent(self, method: str, request_id: int) -> None:
        self._log.debug("protocol.request_sent", method=method, request_id=request_id)

    def request_settled(self, method: str, request_id: int, succeeded: bool) -> None:
        self._log.debug(
            "protocol.request_settled",
            method=method,
            request_id=request_id,
            succeeded=succeeded,
        )

    def notification_received(self, method: str) -> None:
        self._log.debug("protocol.notification_received", method=method)

    def uncaught_error(self, reason: str) -> None:
        self._log.error("protocol.uncaught_error", reason=reason)

    def client_closed(self, pending_rejected: int) -> None:
        self._log.info("protocol.client_closed", pending_rejected=pending_rejected)
