"""ToolCache — per-connection memo of the discovered ToolSet."""

import asyncio
from collections.abc import Awaitable, Callable

from mcp_relay.tools.application.adapter import ToolSet


class ToolCache:
    """Holds one connection's ToolSet for that connection's lifetime.

    Owned by a Connection and passed by reference; there is no process-wide
    instance.
    """

    def __init__(self) -> None:
        self._tool_set: ToolSet | None = None
        self._lock = asyncio.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._tool_set is not None

    async def get_or_load(self, loader: Callable[[], Awaitable[ToolSet]]) -> ToolSet:
        async with self._lock:
            if self._tool_set is None:
                self._tool_set = await loader()
            return self._tool_set

    def clear(self) -> None:
        self._tool_set = None
