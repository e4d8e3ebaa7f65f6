"""Connection — one protocol client, its transport, and its tool cache."""

from typing import Any

from mcp_relay.protocol.application.client import McpClient
from mcp_relay.tools.application.adapter import ToolSet, load_tool_set
from mcp_relay.tools.application.cache import ToolCache


class Connection:
    """Scoped to one conversation; never shared or reused after close().

    Tools are discovered at most once per connection and cached on it.
    """

    def __init__(
        self, client: McpClient, server_url: str, name_prefix: str = ""
    ) -> None:
        self._client = client
        self._server_url = server_url
        self._name_prefix = name_prefix
        self._tool_cache = ToolCache()

    @property
    def server_url(self) -> str:
        return self._server_url

    @property
    def callback_url(self) -> str | None:
        return self._client.callback_url

    @property
    def protocol_version(self) -> str | None:
        return self._client.protocol_version

    @property
    def server_capabilities(self) -> dict[str, Any]:
        return self._client.server_capabilities

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def open(self) -> None:
        await self._client.initialize()

    async def tools(self) -> ToolSet:
        return await self._tool_cache.get_or_load(self._discover)

    async def close(self) -> None:
        self._tool_cache.clear()
        await self._client.close()

    async def _discover(self) -> ToolSet:
        return await load_tool_set(self._client, name_prefix=self._name_prefix)
