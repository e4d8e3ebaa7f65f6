"""Error types raised by the tool adapter."""

from mcp_relay.core.errors import RelayError


class ToolExecutionError(RelayError):
    """Raised when a tool is missing, its adapter throws, or it reports an error."""

    def __init__(self, tool_name: str, reason: str) -> None:
        self.tool_name = tool_name
        self.reason = reason
        super().__init__(f"Failed to execute tool '{tool_name}': {reason}")
