"""ToolInvocationRecord — lifecycle of one requested tool call."""

import json
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from mcp_relay.conversation.domain.content import ToolResultBlock
from mcp_relay.conversation.infrastructure.errors import ConversationStateError


class InvocationStatus(StrEnum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class ToolInvocationRecord:
    """Created pending; moves to succeeded or failed exactly once."""

    call_id: str
    tool_name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    status: InvocationStatus = InvocationStatus.PENDING
    result: str | None = None
    error: str | None = None

    def succeed(self, result: str) -> None:
        self._ensure_pending()
        self.status = InvocationStatus.SUCCEEDED
        self.result = result

    def fail(self, error: str) -> None:
        self._ensure_pending()
        self.status = InvocationStatus.FAILED
        self.error = error

    def to_result_block(self) -> ToolResultBlock:
        if self.status is InvocationStatus.SUCCEEDED:
            assert self.result is not None
            return ToolResultBlock(tool_use_id=self.call_id, content=self.result)
        if self.status is InvocationStatus.FAILED:
            return ToolResultBlock(
                tool_use_id=self.call_id,
                content=json.dumps({"error": self.error}),
                is_error=True,
            )
        raise ConversationStateError(f"invocation {self.call_id} is still pending")

    def _ensure_pending(self) -> None:
        if self.status is not InvocationStatus.PENDING:
            raise ConversationStateError(
                f"invocation {self.call_id} already {self.status.value}"
            )
