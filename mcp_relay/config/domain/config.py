"""Top-level RelayConfig aggregate — the root configuration object."""

from pydantic import BaseModel, Field

from mcp_relay.config.domain.completion import CompletionConfig
from mcp_relay.config.domain.conversation import ConversationConfig
from mcp_relay.config.domain.logging import LoggingConfig
from mcp_relay.config.domain.tool_server import ToolServerConfig


class RelayConfig(BaseModel, frozen=True):
    """Root configuration aggregate for an mcp-relay assistant.

    tool_server is optional: without it the assistant answers without tools.
    """

    name: str = Field(min_length=1)
    completion: CompletionConfig
    conversation: ConversationConfig = Field(default_factory=ConversationConfig)
    tool_server: ToolServerConfig | None = None
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
