"""SseTransport — event-stream inbound channel and POST outbound channel."""

import asyncio
import json

import httpx

from mcp_relay.core.errors import RelayError
from mcp_relay.stream.domain.frame import Frame
from mcp_relay.stream.domain.parser import parse_frames
from mcp_relay.transport.domain.listener import TransportListener
from mcp_relay.transport.domain.observer import TransportObserver
from mcp_relay.transport.domain.transport import JsonObject
from mcp_relay.transport.infrastructure.errors import (
    ConnectError,
    MalformedFrameError,
    NotConnectedError,
    TransportError,
)

_DEFAULT_PORTS = {"http": 80, "https": 443}

type Origin = tuple[str, str, int | None]


def _origin(url: httpx.URL) -> Origin:
    port = url.port if url.port is not None else _DEFAULT_PORTS.get(url.scheme)
    return url.scheme, url.host, port


class SseTransport:
    """Transport that reads server frames from a GET event stream and POSTs replies.

    The callback URL for outbound messages is learned from the first
    ``endpoint`` event and must share the stream URL's origin. One instance
    serves exactly one connection; it is not restartable after close().
    """

    def __init__(
        self,
        url: str,
        headers: dict[str, str],
        protocol_version: str,
        listener: TransportListener,
        observer: TransportObserver,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = httpx.URL(url)
        self._headers = dict(headers)
        self._protocol_version = protocol_version
        self._listener = listener
        self._observer = observer
        # No timeouts at this layer: the stream is long-lived and callers
        # bound the whole conversation instead.
        self._client = httpx.AsyncClient(
            transport=http_transport, timeout=httpx.Timeout(None)
        )
        self._callback_url: httpx.URL | None = None
        self._endpoint: asyncio.Future[httpx.URL] | None = None
        self._reader: asyncio.Task[None] | None = None
        self._inflight: set[asyncio.Task[None]] = set()
        self._closed = False
        self._close_notified = False
        self._client_released = False

    @property
    def callback_url(self) -> str | None:
        return str(self._callback_url) if self._callback_url is not None else None

    async def start(self) -> None:
        """Open the event stream and wait for the server to announce its endpoint.

        Raises:
            ConnectError: if the stream responds with a non-success status, ends
                before an endpoint event, fails at the network level, or the
                announced endpoint has a different origin than the stream URL.
            NotConnectedError: if the transport was already closed.
        """
        if self._closed:
            raise NotConnectedError(reason="transport is closed")
        if self._callback_url is not None:
            return

        self._observer.transport_connecting(url=str(self._url))
        self._endpoint = asyncio.get_running_loop().create_future()
        self._reader = asyncio.create_task(self._read_stream(self._endpoint))

        try:
            self._callback_url = await self._endpoint
        except BaseException:
            await self.close()
            raise

        self._observer.transport_connected(
            url=str(self._url), callback_url=str(self._callback_url)
        )

    async def send(self, message: JsonObject) -> None:
        """POST one JSON-encoded message to the learned callback URL.

        Raises:
            NotConnectedError: before start() succeeded, or once closed.
            TransportError: on a non-success HTTP status or a network failure.
        """
        if self._closed or self._callback_url is None:
            raise NotConnectedError()

        task = asyncio.create_task(self._post(self._callback_url, message))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

        try:
            await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            raise NotConnectedError(reason="transport closed during send") from None

    async def close(self) -> None:
        """Cancel the stream read and in-flight POSTs; notify the listener once."""
        self._closed = True

        current = asyncio.current_task()
        pending = [task for task in self._inflight if not task.done()]
        if (
            self._reader is not None
            and self._reader is not current
            and not self._reader.done()
        ):
            pending.append(self._reader)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        if self._endpoint is not None and not self._endpoint.done():
            self._endpoint.set_exception(ConnectError(reason="transport closed"))

        await self._release_client()
        self._notify_closed()

    async def _post(self, callback_url: httpx.URL, message: JsonObject) -> None:
        headers = {
            **self._headers,
            "Content-Type": "application/json",
            "mcp-protocol-version": self._protocol_version,
        }
        try:
            response = await self._client.post(
                callback_url, content=json.dumps(message), headers=headers
            )
        except httpx.HTTPError as exc:
            self._observer.transport_send_failed(
                callback_url=str(callback_url), reason=str(exc)
            )
            raise TransportError(status=None, body=str(exc)) from exc

        if not response.is_success:
            self._observer.transport_send_failed(
                callback_url=str(callback_url),
                reason=f"HTTP {response.status_code}",
            )
            raise TransportError(status=response.status_code, body=response.text)

    async def _read_stream(self, endpoint: asyncio.Future[httpx.URL]) -> None:
        """Reader task: decode frames and route them until the stream ends."""
        headers = {
            **self._headers,
            "Accept": "text/event-stream",
            "mcp-protocol-version": self._protocol_version,
        }
        try:
            async with self._client.stream(
                "GET", self._url, headers=headers
            ) as response:
                if not response.is_success:
                    raise ConnectError(
                        reason=f"HTTP {response.status_code} from {self._url}"
                    )
                async for frame in parse_frames(response.aiter_text()):
                    self._route(frame=frame, endpoint=endpoint)

            if not endpoint.done():
                raise ConnectError(reason="stream ended before endpoint event")
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            error = (
                exc
                if isinstance(exc, RelayError)
                else ConnectError(reason=str(exc) or type(exc).__name__)
            )
            if not endpoint.done():
                endpoint.set_exception(error)
                return
            if not self._closed:
                try:
                    self._listener.transport_failed(error)
                finally:
                    await self._hang_up()
                return

        # Server hung up after the connection was established.
        await self._hang_up()

    def _route(self, frame: Frame, endpoint: asyncio.Future[httpx.URL]) -> None:
        if frame.event == "endpoint":
            if endpoint.done():
                self._observer.transport_frame_rejected(
                    event=frame.event, reason="duplicate endpoint event"
                )
                return
            try:
                callback_url = self._url.join(frame.data)
            except httpx.InvalidURL as exc:
                raise ConnectError(
                    reason=f"invalid endpoint URL {frame.data!r}: {exc}"
                ) from exc
            if _origin(callback_url) != _origin(self._url):
                raise ConnectError(
                    reason=(
                        "endpoint origin does not match connection origin: "
                        f"{callback_url}"
                    )
                )
            endpoint.set_result(callback_url)
        elif frame.event == "message":
            if not endpoint.done():
                self._observer.transport_frame_rejected(
                    event=frame.event, reason="message before endpoint event"
                )
                return
            try:
                message = self._decode(frame.data)
            except MalformedFrameError as exc:
                self._observer.transport_frame_rejected(
                    event=frame.event, reason=str(exc)
                )
                self._listener.transport_failed(exc)
                return
            self._listener.message_received(message)
        else:
            self._observer.transport_frame_rejected(
                event=frame.event, reason="unknown event type"
            )

    def _decode(self, data: str) -> JsonObject:
        try:
            decoded = json.loads(data)
        except json.JSONDecodeError as exc:
            raise MalformedFrameError(reason=str(exc)) from exc
        if not isinstance(decoded, dict):
            raise MalformedFrameError(reason="message is not a JSON object")
        return decoded

    async def _release_client(self) -> None:
        if not self._client_released:
            self._client_released = True
            await self._client.aclose()

    def _notify_closed(self) -> None:
        if self._close_notified:
            return
        self._close_notified = True
        self._observer.transport_closed(url=str(self._url))
        self._listener.transport_closed()

    async def _hang_up(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._release_client()
        self._notify_closed()
