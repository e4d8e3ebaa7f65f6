"""Content block value objects exchanged with the completion service."""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field


class TextBlock(BaseModel, frozen=True):
    type: Literal["text"] = "text"
    text: str


class ToolUseBlock(BaseModel, frozen=True):
    """The model asking for one tool invocation."""

    type: Literal["tool_use"] = "tool_use"
    id: str = Field(min_length=1)
    name: str
    input: dict[str, Any] = Field(default_factory=dict)


class ToolResultBlock(BaseModel, frozen=True):
    """The outcome of one invocation, fed back under the invocation's id."""

    type: Literal["tool_result"] = "tool_result"
    tool_use_id: str
    content: str
    is_error: bool = False


type ContentBlock = Annotated[TextBlock | ToolUseBlock, Field(discriminator="type")]
