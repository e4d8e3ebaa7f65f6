"""McpClient — handshake, request/response correlation, and typed tool operations."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, assert_never

from pydantic import ValidationError

from mcp_relay.core.errors import RelayError
from mcp_relay.protocol.domain.messages import (
    LATEST_PROTOCOL_VERSION,
    SUPPORTED_PROTOCOL_VERSIONS,
    CallToolResult,
    ClientInfo,
    ClientState,
    InitializeResult,
    ListToolsResult,
    Notification,
    Response,
    ServerRequest,
    ToolDescriptor,
)
from mcp_relay.protocol.domain.observer import ProtocolObserver
from mcp_relay.protocol.infrastructure.codec import (
    decode_message,
    encode_notification,
    encode_request,
)
from mcp_relay.protocol.infrastructure.errors import (
    ClientNotReadyError,
    ClosedConnectionError,
    ProtocolViolationError,
    RemoteError,
    UnsupportedVersionError,
)
from mcp_relay.transport.domain.listener import TransportListener
from mcp_relay.transport.domain.transport import JsonObject, Transport

type TransportFactory = Callable[[TransportListener], Transport]
type UncaughtErrorHandler = Callable[[RelayError], None]


@dataclass(frozen=True)
class _PendingRequest:
    """Correlates a sent request id with the future its caller awaits."""

    method: str
    future: asyncio.Future[dict[str, Any]]


class McpClient:
    """Protocol client bound to exactly one transport.

    The transport is built by the injected factory with this client as its
    listener, so inbound traffic is wired before the transport can deliver
    anything. The pending-request map is private: entries are added by
    request() and removed on settlement, cancellation, or close.

    State machine: uninitialized -> handshaking -> ready -> closed.
    """

    def __init__(
        self,
        transport_factory: TransportFactory,
        observer: ProtocolObserver,
        client_info: ClientInfo,
        capabilities: dict[str, Any] | None = None,
        on_uncaught_error: UncaughtErrorHandler | None = None,
    ) -> None:
        self._observer = observer
        self._client_info = client_info
        self._capabilities = capabilities if capabilities is not None else {}
        self._on_uncaught_error = on_uncaught_error
        self._state = ClientState.UNINITIALIZED
        self._next_id = 0
        self._pending: dict[int, _PendingRequest] = {}
        self._server_capabilities: dict[str, Any] = {}
        self._protocol_version: str | None = None
        self._transport = transport_factory(self)

    @property
    def state(self) -> ClientState:
        return self._state

    @property
    def is_closed(self) -> bool:
        return self._state is ClientState.CLOSED

    @property
    def protocol_version(self) -> str | None:
        return self._protocol_version

    @property
    def server_capabilities(self) -> dict[str, Any]:
        return dict(self._server_capabilities)

    @property
    def callback_url(self) -> str | None:
        return self._transport.callback_url

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def initialize(self) -> InitializeResult:
        """Start the transport and run the initialize/initialized handshake.

        Any failure closes the client before the error propagates.

        Raises:
            ClosedConnectionError: if the client was already closed.
            ClientNotReadyError: if initialize() was already called.
            UnsupportedVersionError: if the server's protocol version is not
                in SUPPORTED_PROTOCOL_VERSIONS.
            ProtocolViolationError: if the initialize result is malformed.
            ConnectError, TransportError: from the transport.
        """
        if self._state is ClientState.CLOSED:
            raise ClosedConnectionError(reason="client is closed")
        if self._state is not ClientState.UNINITIALIZED:
            raise ClientNotReadyError(method="initialize", state=self._state.value)

        self._state = ClientState.HANDSHAKING
        self._observer.handshake_started(client_name=self._client_info.name)

        try:
            await self._transport.start()
            raw = await self.request(
                "initialize",
                {
                    "protocolVersion": LATEST_PROTOCOL_VERSION,
                    "capabilities": self._capabilities,
                    "clientInfo": self._client_info.model_dump(),
                },
            )
            result = _parse_initialize_result(raw)

            if result.protocol_version not in SUPPORTED_PROTOCOL_VERSIONS:
                raise UnsupportedVersionError(version=result.protocol_version)

            self._protocol_version = result.protocol_version
            self._server_capabilities = dict(result.capabilities)
            await self.notification("notifications/initialized")

            if self._state is not ClientState.HANDSHAKING:
                raise ClosedConnectionError(reason="closed during handshake")
        except BaseException as exc:
            self._observer.handshake_failed(reason=str(exc) or type(exc).__name__)
            await self.close()
            raise

        self._state = ClientState.READY
        self._observer.handshake_completed(
            protocol_version=result.protocol_version,
            server_name=result.server_info.name if result.server_info else "",
        )
        return result

    async def request(
        self, method: str, params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Send one request and wait for the correlated response's result.

        Raises:
            ClosedConnectionError: if the client is closed, or closes before a
                response arrives.
            ClientNotReadyError: if the handshake has not completed and method
                is not ``initialize``.
            RemoteError: if the server answers with an error object.
            TransportError, NotConnectedError: if the message cannot be sent.
        """
        if self._state is ClientState.CLOSED:
            raise ClosedConnectionError(
                reason="attempted to send a request from a closed client"
            )
        if self._state is ClientState.UNINITIALIZED or (
            self._state is ClientState.HANDSHAKING and method != "initialize"
        ):
            raise ClientNotReadyError(method=method, state=self._state.value)

        request_id = self._next_id
        self._next_id += 1
        future: asyncio.Future[dict[str, Any]] = (
            asyncio.get_running_loop().create_future()
        )
        self._pending[request_id] = _PendingRequest(method=method, future=future)
        self._observer.request_sent(method=method, request_id=request_id)

        try:
            await self._transport.send(encode_request(request_id, method, params))
        except BaseException as exc:
            self._pending.pop(request_id, None)
            settled = future.exception() if future.done() else None
            future.cancel()
            if settled is not None and isinstance(exc, Exception):
                # close() rejected the request while the send was in flight.
                raise settled from None
            raise

        try:
            return await future
        finally:
            self._pending.pop(request_id, None)

    async def notification(
        self, method: str, params: dict[str, Any] | None = None
    ) -> None:
        """Send a fire-and-forget message: no id, no pending entry, no reply."""
        if self._state is ClientState.CLOSED:
            raise ClosedConnectionError(
                reason="attempted to notify from a closed client"
            )
        await self._transport.send(encode_notification(method, params))

    async def list_tools(self) -> list[ToolDescriptor]:
        """Return every tool the server advertises, following pagination cursors."""
        tools: list[ToolDescriptor] = []
        cursor: str | None = None
        while True:
            params = {"cursor": cursor} if cursor is not None else None
            raw = await self.request("tools/list", params)
            try:
                page = ListToolsResult.model_validate(raw)
            except ValidationError as exc:
                raise ProtocolViolationError(
                    reason=f"invalid tools/list result: {exc}"
                ) from exc
            tools.extend(page.tools)
            if not page.next_cursor:
                return tools
            cursor = page.next_cursor

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> CallToolResult:
        raw = await self.request("tools/call", {"name": name, "arguments": arguments})
        try:
            return CallToolResult.model_validate(raw)
        except ValidationError as exc:
            raise ProtocolViolationError(
                reason=f"invalid tools/call result: {exc}"
            ) from exc

    async def close(self) -> None:
        """Reject every pending request, then close the transport. Idempotent."""
        self._handle_closed()
        await self._transport.close()

    # TransportListener

    def message_received(self, message: JsonObject) -> None:
        try:
            decoded = decode_message(message)
        except ProtocolViolationError as exc:
            self._reject_malformed(message=message, error=exc)
            return

        match decoded:
            case Response():
                self._settle(decoded)
            case Notification():
                self._observer.notification_received(method=decoded.method)
            case ServerRequest():
                self._report(
                    ProtocolViolationError(
                        reason=f"request messages not supported: {decoded.method}"
                    )
                )
            case _:
                assert_never(decoded)

    def transport_failed(self, error: RelayError) -> None:
        self._report(error)

    def transport_closed(self) -> None:
        self._handle_closed()

    # internals

    def _settle(self, response: Response) -> None:
        pending = self._pending.pop(response.id, None)
        if pending is None:
            self._report(
                ProtocolViolationError(
                    reason=(
                        "received a response for an unknown message ID: "
                        f"{response.model_dump(exclude_none=True)}"
                    )
                )
            )
            return
        if pending.future.done():
            return

        if response.error is not None:
            pending.future.set_exception(
                RemoteError(
                    message=response.error.message,
                    code=response.error.code,
                    data=response.error.data,
                )
            )
        else:
            assert response.result is not None  # guaranteed by decode_message
            pending.future.set_result(response.result)
        self._observer.request_settled(
            method=pending.method,
            request_id=response.id,
            succeeded=response.error is None,
        )

    def _reject_malformed(
        self, message: JsonObject, error: ProtocolViolationError
    ) -> None:
        """Fail the matching request, if any, so its caller does not hang."""
        message_id = message.get("id")
        pending = (
            self._pending.pop(message_id, None) if isinstance(message_id, int) else None
        )
        if pending is not None and not pending.future.done():
            pending.future.set_exception(error)
            self._observer.request_settled(
                method=pending.method, request_id=message_id, succeeded=False
            )
            return
        self._report(error)

    def _report(self, error: RelayError) -> None:
        self._observer.uncaught_error(reason=str(error))
        if self._on_uncaught_error is not None:
            self._on_uncaught_error(error)

    def _handle_closed(self) -> None:
        if self._state is ClientState.CLOSED:
            return
        self._state = ClientState.CLOSED

        pending = list(self._pending.values())
        self._pending.clear()
        for entry in pending:
            if not entry.future.done():
                entry.future.set_exception(ClosedConnectionError())
        self._observer.client_closed(pending_rejected=len(pending))


def _parse_initialize_result(raw: dict[str, Any]) -> InitializeResult:
    try:
        return InitializeResult.model_validate(raw)
    except ValidationError as exc:
        raise ProtocolViolationError(
            reason=f"server sent invalid initialize result: {exc}"
        ) from exc
