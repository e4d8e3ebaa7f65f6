"""Observer ports for the conversation domain — events in domain language."""

from typing import Protocol


class ConversationObserver(Protocol):
    def conversation_started(
        self, workflow_id: str, history_turns: int, tools_configured: bool
    ) -> None: ...

    def tools_loaded(self, workflow_id: str, tool_names: list[str]) -> None: ...

    def tools_unavailable(self, workflow_id: str, reason: str) -> None: ...

    def completion_requested(
        self, workflow_id: str, round_index: int, message_count: int, tool_count: int
    ) -> None: ...

    def tool_round_started(
        self, workflow_id: str, round_index: int, tool_names: list[str]
    ) -> None: ...

    def tool_invocation_completed(
        self,
        workflow_id: str,
        call_id: str,
        tool_name: str,
        succeeded: bool,
        duration_ms: int,
        truncated: bool,
    ) -> None: ...

    def conversation_completed(
        self, workflow_id: str, rounds: int, answered: bool
    ) -> None: ...

    def conversation_failed(self, workflow_id: str, reason: str) -> None: ...

    def progress_failed(self, workflow_id: str, status: str, reason: str) -> None: ...


class CompletionObserver(Protocol):
    def completion_started(self, model: str, message_count: int) -> None: ...

    def completion_completed(
        self, model: str, stop_reason: str | None, duration_ms: int
    ) -> None: ...

    def completion_failed(self, model: str, reason: str) -> None: ...
