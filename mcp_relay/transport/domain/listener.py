"""TransportListener port — receives inbound traffic from a Transport."""

from typing import Protocol

from mcp_relay.core.errors import RelayError
from mcp_relay.transport.domain.transport import JsonObject


class TransportListener(Protocol):
    """Registered with a Transport when it is constructed.

    All callbacks run on the transport's own read path; implementations must
    not block.
    """

    def message_received(self, message: JsonObject) -> None: ...

    def transport_failed(self, error: RelayError) -> None: ...

    def transport_closed(self) -> None: ...
