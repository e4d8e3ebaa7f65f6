"""Tool adapter — turns remote tool descriptors into named, invocable tools."""

import json
from typing import Any

from mcp_relay.protocol.domain.messages import ToolDescriptor
from mcp_relay.protocol.infrastructure.errors import CONNECTION_ERRORS, RemoteError
from mcp_relay.tools.domain.tool import ToolCaller, ToolSpec
from mcp_relay.tools.infrastructure.errors import ToolExecutionError


def normalize_schema(schema: dict[str, Any]) -> dict[str, Any]:
    """Force an object schema that rejects unknown properties.

    Remote servers are inconsistent about type/properties/required; the
    completion service gets the same shape regardless.
    """
    return {
        **schema,
        "type": "object",
        "properties": schema.get("properties") or {},
        "required": schema.get("required") or [],
        "additionalProperties": False,
    }


def unwrap_content(content: Any) -> str:
    """Return the call result's content as text; non-strings are JSON-encoded."""
    if isinstance(content, str):
        return content
    return json.dumps(content, ensure_ascii=False)


class RemoteTool:
    """One remote tool, exposed under an optionally prefixed name."""

    def __init__(
        self, descriptor: ToolDescriptor, caller: ToolCaller, name_prefix: str = ""
    ) -> None:
        self._descriptor = descriptor
        self._caller = caller
        self._name = f"{name_prefix}{descriptor.name}"

    @property
    def name(self) -> str:
        return self._name

    @property
    def remote_name(self) -> str:
        return self._descriptor.name

    @property
    def spec(self) -> ToolSpec:
        return ToolSpec(
            name=self._name,
            description=self._descriptor.description,
            input_schema=normalize_schema(self._descriptor.input_schema),
        )

    async def execute(self, arguments: dict[str, Any]) -> str:
        """Forward to tools/call and return the unwrapped content.

        Raises:
            ToolExecutionError: if the server answers with an error object or
                flags the result with isError.
        """
        try:
            result = await self._caller.call_tool(self.remote_name, arguments)
        except RemoteError as exc:
            raise ToolExecutionError(tool_name=self._name, reason=str(exc)) from exc

        content = unwrap_content(result.content)
        if result.is_error:
            raise ToolExecutionError(tool_name=self._name, reason=content)
        return content


class ToolSet:
    """The tools discovered on one connection, keyed by exposed name."""

    def __init__(self, tools: list[RemoteTool]) -> None:
        self._tools = {tool.name: tool for tool in tools}

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    @property
    def names(self) -> list[str]:
        return list(self._tools)

    def specs(self) -> list[ToolSpec]:
        return [tool.spec for tool in self._tools.values()]

    async def execute(self, name: str, arguments: dict[str, Any]) -> str:
        """Run the named tool.

        Connection-level failures propagate unchanged; anything else the tool
        raises is reported as a ToolExecutionError.

        Raises:
            ToolExecutionError: if no tool has that name, or the tool fails.
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolExecutionError(tool_name=name, reason="tool not found")

        try:
            return await tool.execute(arguments)
        except ToolExecutionError:
            raise
        except CONNECTION_ERRORS:
            raise
        except Exception as exc:
            raise ToolExecutionError(tool_name=name, reason=str(exc)) from exc


async def load_tool_set(caller: ToolCaller, name_prefix: str = "") -> ToolSet:
    """Discover the caller's tools once and wrap each as a RemoteTool."""
    descriptors = await caller.list_tools()
    return ToolSet(
        [
            RemoteTool(descriptor=descriptor, caller=caller, name_prefix=name_prefix)
            for descriptor in descriptors
        ]
    )
