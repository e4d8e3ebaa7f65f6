"""Transport Protocol — structural interface for the two-channel wire transport."""

from typing import Protocol

type JsonObject = dict[str, object]


class Transport(Protocol):
    """One inbound event stream plus a per-message outbound channel.

    Inbound messages are pushed to the TransportListener supplied at
    construction time, in the order the stream delivered them.
    """

    @property
    def callback_url(self) -> str | None: ...

    async def start(self) -> None: ...

    async def send(self, message: JsonObject) -> None: ...

    async def close(self) -> None: ...
