"""ToolSpec value object and the ToolCaller port the adapter forwards to."""

from typing import Any, Protocol

from pydantic import BaseModel

from mcp_relay.protocol.domain.messages import CallToolResult, ToolDescriptor


class ToolSpec(BaseModel, frozen=True):
    """A tool as declared to the completion service.

    input_schema always has type "object" and additionalProperties false.
    """

    name: str
    description: str
    input_schema: dict[str, Any]


class ToolCaller(Protocol):
    """Anything that can list and invoke remote tools, in practice McpClient."""

    async def list_tools(self) -> list[ToolDescriptor]: ...

    async def call_tool(
        self, name: str, arguments: dict[str, Any]
    ) -> CallToolResult: ...
