"""CompletionService port and its request/response value objects."""

from typing import Protocol

from pydantic import BaseModel

from mcp_relay.conversation.domain.content import ContentBlock
from mcp_relay.conversation.domain.turn import ChatTurn
from mcp_relay.tools.domain.tool import ToolSpec

TOOL_USE = "tool_use"


class CompletionRequest(BaseModel, frozen=True):
    system_prompt: str
    messages: list[ChatTurn]
    tools: list[ToolSpec]


class CompletionResponse(BaseModel, frozen=True):
    """What the model produced.

    content is None when the provider's reply was structurally invalid.
    """

    stop_reason: str | None
    content: list[ContentBlock] | None

    @property
    def requests_tool_use(self) -> bool:
        return self.stop_reason == TOOL_USE


class CompletionService(Protocol):
    """Structural interface for the language-model backend."""

    async def complete(self, request: CompletionRequest) -> CompletionResponse: ...
