"""Conversation loop configuration model."""

from pydantic import BaseModel, Field


class ConversationConfig(BaseModel, frozen=True):
    """Tunables for one conversation turn.

    Timeouts default to None: neither the handshake nor a tool call is
    bounded unless configured.
    """

    assistant_name: str = Field(default="Assistant", min_length=1)
    instructions: str = ""
    history_window: int = Field(default=10, ge=0)
    max_tool_result_chars: int = Field(default=100_000, ge=1)
    connect_timeout_seconds: float | None = Field(default=None, gt=0)
    tool_timeout_seconds: float | None = Field(default=None, gt=0)
