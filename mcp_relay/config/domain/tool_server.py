"""Remote tool server configuration model."""

from pydantic import BaseModel, Field


class ToolServerConfig(BaseModel, frozen=True):
    """Tool server reachable over an event stream plus POST callback endpoint."""

    url: str = Field(min_length=1)
    headers: dict[str, str] = Field(default_factory=dict)
    tool_name_prefix: str = ""
    client_name: str = Field(default="mcp-relay", min_length=1)
    client_version: str = Field(default="1.0.0", min_length=1)
