"""Conversation turns, prior-history entries, and the ordered ConversationState."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from mcp_relay.conversation.domain.content import (
    ContentBlock,
    ToolResultBlock,
    ToolUseBlock,
)
from mcp_relay.conversation.infrastructure.errors import ConversationStateError


class UserTurn(BaseModel, frozen=True):
    role: Literal["user"] = "user"
    text: str


class AssistantTurn(BaseModel, frozen=True):
    role: Literal["assistant"] = "assistant"
    content: list[ContentBlock]

    @property
    def tool_uses(self) -> list[ToolUseBlock]:
        return [block for block in self.content if isinstance(block, ToolUseBlock)]


class ToolResultTurn(BaseModel, frozen=True):
    """One batched result per tool_use of the preceding assistant turn, in order."""

    role: Literal["tool_result"] = "tool_result"
    results: list[ToolResultBlock] = Field(min_length=1)


type ChatTurn = Annotated[
    UserTurn | AssistantTurn | ToolResultTurn, Field(discriminator="role")
]


class HistoryMessage(BaseModel, frozen=True):
    """A prior chat message as supplied by the document store."""

    role: Literal["user", "assistant"]
    text: str
    sender: str | None = None


class UserContext(BaseModel, frozen=True):
    """Who the assistant is talking to, for the system prompt."""

    id: str
    name: str
    email: str | None = None


class ConversationState:
    """Ordered turns of one conversation.

    A tool_result turn may only follow an assistant turn that requested tool
    use, and must answer each requested invocation exactly once, in order.
    """

    def __init__(self, turns: list[UserTurn | AssistantTurn] | None = None) -> None:
        self._turns: list[UserTurn | AssistantTurn | ToolResultTurn] = list(
            turns or []
        )

    @property
    def turns(self) -> list[UserTurn | AssistantTurn | ToolResultTurn]:
        return list(self._turns)

    def __len__(self) -> int:
        return len(self._turns)

    def add_user(self, text: str) -> None:
        self._turns.append(UserTurn(text=text))

    def add_assistant(self, content: list[ContentBlock]) -> AssistantTurn:
        turn = AssistantTurn(content=content)
        self._turns.append(turn)
        return turn

    def add_tool_results(self, results: list[ToolResultBlock]) -> None:
        """Append the batched results for the latest assistant turn.

        Raises:
            ConversationStateError: if the previous turn requested no tools, or
                the result ids do not match the requested ids in order.
        """
        previous = self._turns[-1] if self._turns else None
        if not isinstance(previous, AssistantTurn) or not previous.tool_uses:
            raise ConversationStateError(
                "tool results must follow an assistant turn that requested tools"
            )

        requested = [block.id for block in previous.tool_uses]
        answered = [result.tool_use_id for result in results]
        if requested != answered:
            raise ConversationStateError(
                f"tool results {answered} do not match requested invocations"
                f" {requested}"
            )
        self._turns.append(ToolResultTurn(results=results))
