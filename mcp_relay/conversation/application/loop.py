"""ConversationLoop — multi-round tool use between a model and remote tools."""

import asyncio
import time
from collections.abc import Sequence
from contextlib import AsyncExitStack

from mcp_relay.config.domain.conversation import ConversationConfig
from mcp_relay.conversation.application.prompt import (
    build_history_turns,
    build_system_prompt,
    truncate_tool_result,
)
from mcp_relay.conversation.domain.completion import (
    CompletionRequest,
    CompletionResponse,
    CompletionService,
)
from mcp_relay.conversation.domain.content import TextBlock, ToolUseBlock
from mcp_relay.conversation.domain.invocation import ToolInvocationRecord
from mcp_relay.conversation.domain.observer import ConversationObserver
from mcp_relay.conversation.domain.progress import ProgressSink
from mcp_relay.conversation.domain.tools import ToolBox, ToolConnector
from mcp_relay.conversation.domain.turn import (
    ConversationState,
    HistoryMessage,
    UserContext,
)
from mcp_relay.conversation.domain.workflow import generate_workflow_id
from mcp_relay.core.errors import RelayError
from mcp_relay.tools.domain.tool import ToolSpec
from mcp_relay.tools.infrastructure.errors import ToolExecutionError

INVALID_RESPONSE_MESSAGE = "Sorry, I got a weird response. Try again!"
NO_TEXT_MESSAGE = "Hmm, I got confused there. Try asking again!"


class _Run:
    """Per-run identity and progress reporting."""

    def __init__(
        self,
        workflow_id: str,
        observer: ConversationObserver,
        progress: ProgressSink | None,
    ) -> None:
        self.workflow_id = workflow_id
        self._observer = observer
        self._progress = progress

    async def emit(self, status: str) -> None:
        if self._progress is None:
            return
        try:
            await self._progress(status)
        except Exception as exc:
            self._observer.progress_failed(
                workflow_id=self.workflow_id, status=status, reason=str(exc)
            )


class ConversationLoop:
    """Answers one user message, letting the model call remote tools.

    Each run() owns its ConversationState and, when a connector is
    configured, exactly one scoped tool connection. Nothing is shared between
    runs, so concurrent conversations are independent.
    """

    def __init__(
        self,
        config: ConversationConfig,
        completion: CompletionService,
        observer: ConversationObserver,
        connector: ToolConnector | None = None,
    ) -> None:
        self._config = config
        self._completion = completion
        self._observer = observer
        self._connector = connector

    async def run(
        self,
        message: str,
        history: Sequence[HistoryMessage] = (),
        user: UserContext | None = None,
        progress: ProgressSink | None = None,
    ) -> str:
        """Return the assistant's answer, or a short fallback string.

        Completion failures and connection failures during a round never
        propagate: they are logged and answered with INVALID_RESPONSE_MESSAGE.
        """
        run = _Run(
            workflow_id=generate_workflow_id(),
            observer=self._observer,
            progress=progress,
        )
        state = ConversationState(
            build_history_turns(history, self._config.history_window)
        )
        state.add_user(message)
        system_prompt = build_system_prompt(self._config, user)

        self._observer.conversation_started(
            workflow_id=run.workflow_id,
            history_turns=len(state) - 1,
            tools_configured=self._connector is not None,
        )
        await run.emit("Thinking...")

        try:
            async with AsyncExitStack() as stack:
                toolbox = await self._open_tools(stack, run)
                answer = await self._converse(run, state, system_prompt, toolbox)
        except RelayError as exc:
            self._observer.conversation_failed(
                workflow_id=run.workflow_id, reason=str(exc)
            )
            return INVALID_RESPONSE_MESSAGE

        await run.emit("Done!")
        return answer

    async def _open_tools(self, stack: AsyncExitStack, run: _Run) -> ToolBox | None:
        """Connect and discover tools; any failure degrades to no tools."""
        if self._connector is None:
            return None

        await run.emit("Loading tools...")
        try:
            async with asyncio.timeout(self._config.connect_timeout_seconds):
                session = await stack.enter_async_context(self._connector.connect())
                toolbox = await session.tools()
        except TimeoutError:
            self._observer.tools_unavailable(
                workflow_id=run.workflow_id,
                reason=(
                    "timed out after "
                    f"{self._config.connect_timeout_seconds} seconds"
                ),
            )
            return None
        except RelayError as exc:
            self._observer.tools_unavailable(
                workflow_id=run.workflow_id, reason=str(exc)
            )
            return None

        self._observer.tools_loaded(
            workflow_id=run.workflow_id, tool_names=[s.name for s in toolbox.specs()]
        )
        return toolbox

    async def _converse(
        self,
        run: _Run,
        state: ConversationState,
        system_prompt: str,
        toolbox: ToolBox | None,
    ) -> str:
        specs = toolbox.specs() if toolbox is not None else []
        rounds = 0

        await run.emit("Calling the model...")
        response = await self._complete(run, state, system_prompt, specs, rounds)

        while response.requests_tool_use and response.content:
            tool_uses = [b for b in response.content if isinstance(b, ToolUseBlock)]
            if not tool_uses:
                break

            rounds += 1
            self._observer.tool_round_started(
                workflow_id=run.workflow_id,
                round_index=rounds,
                tool_names=[block.name for block in tool_uses],
            )
            state.add_assistant(response.content)
            records = await self._run_tools(run, toolbox, tool_uses)
            state.add_tool_results([record.to_result_block() for record in records])

            await run.emit("Processing results...")
            response = await self._complete(run, state, system_prompt, specs, rounds)

        answer = _extract_answer(response)
        self._observer.conversation_completed(
            workflow_id=run.workflow_id,
            rounds=rounds,
            answered=answer not in (INVALID_RESPONSE_MESSAGE, NO_TEXT_MESSAGE),
        )
        return answer

    async def _complete(
        self,
        run: _Run,
        state: ConversationState,
        system_prompt: str,
        specs: list[ToolSpec],
        round_index: int,
    ) -> CompletionResponse:
        self._observer.completion_requested(
            workflow_id=run.workflow_id,
            round_index=round_index,
            message_count=len(state),
            tool_count=len(specs),
        )
        return await self._completion.complete(
            CompletionRequest(
                system_prompt=system_prompt, messages=state.turns, tools=specs
            )
        )

    async def _run_tools(
        self, run: _Run, toolbox: ToolBox | None, tool_uses: list[ToolUseBlock]
    ) -> list[ToolInvocationRecord]:
        """Dispatch every invocation concurrently; records keep request order."""
        records = [
            ToolInvocationRecord(
                call_id=block.id, tool_name=block.name, arguments=block.input
            )
            for block in tool_uses
        ]
        try:
            async with asyncio.TaskGroup() as tg:
                for record in records:
                    tg.create_task(self._invoke(run, toolbox, record))
        except* RelayError as eg:
            # A connection-level failure ends the round; siblings were cancelled.
            raise eg.exceptions[0]
        return records

    async def _invoke(
        self, run: _Run, toolbox: ToolBox | None, record: ToolInvocationRecord
    ) -> None:
        await run.emit(f"Using {record.tool_name}...")
        start = time.monotonic()
        truncated = False

        try:
            if toolbox is None:
                raise ToolExecutionError(
                    tool_name=record.tool_name, reason="no tools are available"
                )
            async with asyncio.timeout(self._config.tool_timeout_seconds):
                output = await toolbox.execute(record.tool_name, record.arguments)
        except ToolExecutionError as exc:
            record.fail(str(exc))
        except TimeoutError:
            record.fail(
                f"Failed to execute tool '{record.tool_name}': timed out after "
                f"{self._config.tool_timeout_seconds} seconds"
            )
        else:
            text, truncated = truncate_tool_result(
                output, self._config.max_tool_result_chars
            )
            record.succeed(text)

        self._observer.tool_invocation_completed(
            workflow_id=run.workflow_id,
            call_id=record.call_id,
            tool_name=record.tool_name,
            succeeded=record.error is None,
            duration_ms=int((time.monotonic() - start) * 1000),
            truncated=truncated,
        )


def _extract_answer(response: CompletionResponse) -> str:
    if response.content is None:
        return INVALID_RESPONSE_MESSAGE
    for block in response.content:
        if isinstance(block, TextBlock):
            return block.text
    return NO_TEXT_MESSAGE
