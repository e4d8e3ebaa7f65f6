"""Ports through which the conversation loop reaches remote tools."""

from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol

from mcp_relay.tools.domain.tool import ToolSpec


class ToolBox(Protocol):
    """The tools available to one conversation. Satisfied by ToolSet."""

    def __len__(self) -> int: ...

    def specs(self) -> list[ToolSpec]: ...

    async def execute(self, name: str, arguments: dict[str, Any]) -> str: ...


class ToolSession(Protocol):
    """An open connection to a tool server. Satisfied by Connection."""

    async def tools(self) -> ToolBox: ...


class ToolConnector(Protocol):
    """Opens one scoped ToolSession per conversation."""

    def connect(self) -> AbstractAsyncContextManager[ToolSession]: ...
