"""System prompt, history window, and tool-result sizing for the loop."""

from collections.abc import Sequence

from mcp_relay.config.domain.conversation import ConversationConfig
from mcp_relay.conversation.domain.turn import (
    AssistantTurn,
    HistoryMessage,
    UserContext,
    UserTurn,
)
from mcp_relay.conversation.domain.content import TextBlock

TRUNCATION_NOTICE = (
    "\n\n[Response truncated due to size. Query returned too many results"
    " - try filtering or limiting results.]"
)


def describe_user(user: UserContext | None) -> str:
    if user is None:
        return "You are chatting with an anonymous user."
    details = f"user_id: {user.id}"
    if user.email:
        details += f", email: {user.email}"
    return f"You are chatting with {user.name} ({details})."


def build_system_prompt(config: ConversationConfig, user: UserContext | None) -> str:
    sections = [
        f"You are {config.assistant_name}, a helpful assistant.",
        describe_user(user),
    ]
    if config.instructions.strip():
        sections.append(config.instructions.strip())
    return "\n\n".join(sections)


def build_history_turns(
    history: Sequence[HistoryMessage], window: int
) -> list[UserTurn | AssistantTurn]:
    """Convert the most recent ``window`` messages into conversation turns.

    Messages with blank text are skipped. A known sender is rendered as a
    ``sender: text`` prefix so multi-party chats keep attribution.
    """
    if window <= 0:
        return []

    turns: list[UserTurn | AssistantTurn] = []
    for message in history[-window:]:
        if not message.text.strip():
            continue
        text = f"{message.sender}: {message.text}" if message.sender else message.text
        if message.role == "assistant":
            turns.append(AssistantTurn(content=[TextBlock(text=text)]))
        else:
            turns.append(UserTurn(text=text))
    return turns


def truncate_tool_result(text: str, max_chars: int) -> tuple[str, bool]:
    """Cap text at max_chars, appending TRUNCATION_NOTICE when anything was cut."""
    if len(text) <= max_chars:
        return text, False
    return text[:max_chars] + TRUNCATION_NOTICE, True
