"""Fake conversation and completion observers — record events for assertions."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToolInvocationEvent:
    workflow_id: str
    call_id: str
    tool_name: str
    succeeded: bool
    truncated: bool


@dataclass(frozen=True)
class CompletedEvent:
    workflow_id: str
    rounds: int
    answered: bool


class FakeConversationObserver:
    def __init__(self) -> None:
        self.started: list[str] = []
        self.loaded_tools: list[list[str]] = []
        self.unavailable_reasons: list[str] = []
        self.completions_requested: list[int] = []
        self.tool_rounds: list[list[str]] = []
        self.invocations: list[ToolInvocationEvent] = []
        self.completed: list[CompletedEvent] = []
        self.failures: list[str] = []
        self.progress_failures: list[str] = []

    def conversation_started(
        self, workflow_id: str, history_turns: int, tools_configured: bool
    ) -> None:
        self.started.append(workflow_id)

    def tools_loaded(self, workflow_id: str, tool_names: list[str]) -> None:
        self.loaded_tools.append(tool_names)

    def tools_unavailable(self, workflow_id: str, reason: str) -> None:
        self.unavailable_reasons.append(reason)

    def completion_requested(
        self, workflow_id: str, round_index: int, message_count: int, tool_count: int
    ) -> None:
        self.completions_requested.append(round_index)

    def tool_round_started(
        self, workflow_id: str, round_index: int, tool_names: list[str]
    ) -> None:
        self.tool_rounds.append(tool_names)

    def tool_invocation_completed(
        self,
        workflow_id: str,
        call_id: str,
        tool_name: str,
        succeeded: bool,
        duration_ms: int,
        truncated: bool,
    ) -> None:
        self.invocations.append(
            ToolInvocationEvent(
                workflow_id=workflow_id,
                call_id=call_id,
                tool_name=tool_name,
                succeeded=succeeded,
                truncated=truncated,
            )
        )

    def conversation_completed(
        self, workflow_id: str, rounds: int, answered: bool
    ) -> None:
        self.completed.append(
            CompletedEvent(workflow_id=workflow_id, rounds=rounds, answered=answered)
        )

    def conversation_failed(self, workflow_id: str, reason: str) -> None:
        self.failures.append(reason)

    def progress_failed(self, workflow_id: str, status: str, reason: str) -> None:
        self.progress_failures.append(status)


class FakeCompletionObserver:
    def __init__(self) -> None:
        self.started: list[int] = []
        self.completed: list[str | None] = []
        self.failed: list[str] = []

    def completion_started(self, model: str, message_count: int) -> None:
        self.started.append(message_count)

    def completion_completed(
        self, model: str, stop_reason: str | None, duration_ms: int
    ) -> None:
        self.completed.append(stop_reason)

    def completion_failed(self, model: str, reason: str) -> None:
        self.failed.append(reason)
