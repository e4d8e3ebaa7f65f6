"""FakeToolCaller — scripted list_tools / call_tool responses for adapter tests."""

from typing import Any

from mcp_relay.protocol.domain.messages import CallToolResult, ToolDescriptor


class FakeToolCaller:
    def __init__(
        self,
        descriptors: list[ToolDescriptor] | None = None,
        results: dict[str, CallToolResult | Exception] | None = None,
    ) -> None:
        self._descriptors = descriptors or []
        self._results = results or {}
        self.list_calls = 0
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def list_tools(self) -> list[ToolDescriptor]:
        self.list_calls += 1
        return list(self._descriptors)

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> CallToolResult:
        self.calls.append((name, arguments))
        outcome = self._results[name]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome
