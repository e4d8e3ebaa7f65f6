"""SseToolConnector — opens scoped Connections to an event-stream tool server."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

from mcp_relay.config.domain.tool_server import ToolServerConfig
from mcp_relay.connection.application.connection import Connection
from mcp_relay.protocol.application.client import McpClient
from mcp_relay.protocol.domain.messages import LATEST_PROTOCOL_VERSION, ClientInfo
from mcp_relay.protocol.domain.observer import ProtocolObserver
from mcp_relay.transport.domain.listener import TransportListener
from mcp_relay.transport.domain.observer import TransportObserver
from mcp_relay.transport.infrastructure.sse import SseTransport


class SseToolConnector:
    """Builds a fresh transport + client pair for every connect() call.

    Nothing is cached between calls: each conversation gets its own
    Connection, torn down when its ``async with`` block exits.
    """

    def __init__(
        self,
        config: ToolServerConfig,
        transport_observer: TransportObserver,
        protocol_observer: ProtocolObserver,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport_observer = transport_observer
        self._protocol_observer = protocol_observer
        self._http_transport = http_transport

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[Connection]:
        """Open, handshake, yield, and always close one Connection.

        Raises:
            ConnectError, UnsupportedVersionError, ProtocolViolationError,
            TransportError: if the handshake fails. The connection is already
                closed when these propagate.
        """
        client = McpClient(
            transport_factory=self._build_transport,
            observer=self._protocol_observer,
            client_info=ClientInfo(
                name=self._config.client_name, version=self._config.client_version
            ),
        )
        connection = Connection(
            client=client,
            server_url=self._config.url,
            name_prefix=self._config.tool_name_prefix,
        )
        try:
            await connection.open()
            yield connection
        finally:
            await connection.close()

    def _build_transport(self, listener: TransportListener) -> SseTransport:
        return SseTransport(
            url=self._config.url,
            headers=self._config.headers,
            protocol_version=LATEST_PROTOCOL_VERSION,
            listener=listener,
            observer=self._transport_observer,
            http_transport=self._http_transport,
        )
