"""Structlog implementations of the conversation observer ports."""

import structlog


class StructlogConversationObserver:
    """Delegates conversation domain events to structlog.

    Satisfies the ConversationObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def conversation_started(
        self, workflow_id: str, history_turns: int, tools_configured: bool
    ) -> None:
        self._log.info(
            "conversation.started",
            workflow_id=workflow_id,
            history_turns=history_turns,
            tools_configured=tools_configured,
        )

    def tools_loaded(self, workflow_id: str, tool_names: list[str]) -> None:
        self._log.info(
            "conversation.tools_loaded",
            workflow_id=workflow_id,
            tool_count=len(tool_names),
            tool_names=tool_names,
        )

    def tools_unavailable(self, workflow_id: str, reason: str) -> None:
        self._log.warning(
            "conversation.tools_unavailable", workflow_id=workflow_id, reason=reason
        )

    def completion_requested(
        self, workflow_id: str, round_index: int, message_count: int, tool_count: int
    ) -> None:
        self._log.debug(
            "conversation.completion_requested",
            workflow_id=workflow_id,
            round_index=round_index,
            message_count=message_count,
            tool_count=tool_count,
        )

    def tool_round_started(
        self, workflow_id: str, round_index: int, tool_names: list[str]
    ) -> None:
        self._log.info(
            "conversation.tool_round_started",
            workflow_id=workflow_id,
            round_index=round_index,
            tool_names=tool_names,
        )

    def tool_invocation_completed(
        self,
        workflow_id: str,
        call_id: str,
        tool_name: str,
        succeeded: bool,
        duration_ms: int,
        truncated: bool,
    ) -> None:
        log = self._log.info if succeeded else self._log.warning
        log(
            "conversation.tool_invocation_completed",
            workflow_id=workflow_id,
            call_id=call_id,
            tool_name=tool_name,
            succeeded=succeeded,
            duration_ms=duration_ms,
            truncated=truncated,
        )

    def conversation_completed(
        self, workflow_id: str, rounds: int, answered: bool
    ) -> None:
        self._log.info(
            "conversation.completed",
            workflow_id=workflow_id,
            rounds=rounds,
            answered=answered,
        )

    def conversation_failed(self, workflow_id: str, reason: str) -> None:
        self._log.error(
            "conversation.failed", workflow_id=workflow_id, reason=reason
        )

    def progress_failed(self, workflow_id: str, status: str, reason: str) -> None:
        self._log.warning(
            "conversation.progress_failed",
            workflow_id=workflow_id,
            status=status,
            reason=reason,
        )


class StructlogCompletionObserver:
    """Delegates completion service events to structlog."""

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def completion_started(self, model: str, message_count: int) -> None:
        self._log.info(
            "completion.started", model=model, message_count=message_count
        )

    def completion_completed(
        self, model: str, stop_reason: str | None, duration_ms: int
    ) -> None:
        self._log.info(
            "completion.completed",
            model=model,
            stop_reason=stop_reason,
            duration_ms=duration_ms,
        )

    def completion_failed(self, model: str, reason: str) -> None:
        self._log.error("completion.failed", model=model, reason=reason)
