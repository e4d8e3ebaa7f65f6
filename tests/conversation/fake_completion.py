"""FakeCompletionService — replays scripted responses and records requests."""

from typing import Any

from mcp_relay.conversation.domain.completion import (
    CompletionRequest,
    CompletionResponse,
)
from mcp_relay.conversation.domain.content import TextBlock, ToolUseBlock


def text_response(text: str) -> CompletionResponse:
    return CompletionResponse(stop_reason="end_turn", content=[TextBlock(text=text)])


def tool_use_response(*calls: tuple[str, str, dict[str, Any]]) -> CompletionResponse:
    """Build a tool_use response from (id, name, input) triples."""
    return CompletionResponse(
        stop_reason="tool_use",
        content=[
            TextBlock(text="Let me check."),
            *(ToolUseBlock(id=id_, name=name, input=args) for id_, name, args in calls),
        ],
    )


class FakeCompletionService:
    def __init__(self, responses: list[CompletionResponse | Exception]) -> None:
        self._responses = list(responses)
        self.requests: list[CompletionRequest] = []

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        self.requests.append(request)
        outcome = self._responses.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome
