"""Tests for LiteLLMCompletionService request and response mapping."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from mcp_relay.config.domain.completion import CompletionConfig
from mcp_relay.conversation.domain.completion import CompletionRequest
from mcp_relay.conversation.domain.content import (
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
)
from mcp_relay.conversation.domain.turn import (
    AssistantTurn,
    ToolResultTurn,
    UserTurn,
)
from mcp_relay.conversation.infrastructure.errors import CompletionError
from mcp_relay.conversation.infrastructure.litellm import (
    LiteLLMCompletionService,
    to_openai_messages,
)
from mcp_relay.tools.domain.tool import ToolSpec
from tests.conversation.fake_observer import FakeCompletionObserver

_PATCH_TARGET = "mcp_relay.conversation.infrastructure.litellm.litellm.acompletion"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_service(
    config: CompletionConfig | None = None,
) -> tuple[LiteLLMCompletionService, FakeCompletionObserver]:
    observer = FakeCompletionObserver()
    service = LiteLLMCompletionService(
        config=config or CompletionConfig(model="gpt-4o", max_tokens=512),
        observer=observer,
    )
    return service, observer


def _make_tool_call(call_id: str, name: str, arguments: str) -> MagicMock:
    function = MagicMock()
    function.name = name
    function.arguments = arguments
    call = MagicMock()
    call.id = call_id
    call.function = function
    return call


def _make_acompletion_response(
    content: str | None,
    finish_reason: str = "stop",
    tool_calls: list[MagicMock] | None = None,
) -> MagicMock:
    """Build a mock litellm response object with one choice."""
    message = MagicMock()
    message.content = content
    message.tool_calls = tool_calls
    choice = MagicMock()
    choice.message = message
    choice.finish_reason = finish_reason
    response = MagicMock()
    response.choices = [choice]
    return response


def _request(tools: list[ToolSpec] | None = None) -> CompletionRequest:
    return CompletionRequest(
        system_prompt="You are Relay.",
        messages=[UserTurn(text="How many jobs?")],
        tools=tools or [],
    )


_SPEC = ToolSpec(
    name="list_jobs",
    description="List jobs",
    input_schema={
        "type": "object",
        "properties": {},
        "required": [],
        "additionalProperties": False,
    },
)


# ---------------------------------------------------------------------------
# Message conversion
# ---------------------------------------------------------------------------


class TestToOpenAIMessages:
    def test_full_tool_round(self) -> None:
        turns = [
            UserTurn(text="How many jobs?"),
            AssistantTurn(
                content=[
                    TextBlock(text="Checking."),
                    ToolUseBlock(id="call_1", name="list_jobs", input={"limit": 5}),
                ]
            ),
            ToolResultTurn(
                results=[
                    ToolResultBlock(tool_use_id="call_1", content="3 jobs"),
                ]
            ),
        ]

        messages = to_openai_messages("system text", turns)

        assert messages == [
            {"role": "system", "content": "system text"},
            {"role": "user", "content": "How many jobs?"},
            {
                "role": "assistant",
                "content": "Checking.",
                "tool_calls": [
                    {
                        "id": "call_1",
                        "type": "function",
                        "function": {
                            "name": "list_jobs",
                            "arguments": '{"limit": 5}',
                        },
                    }
                ],
            },
            {"role": "tool", "tool_call_id": "call_1", "content": "3 jobs"},
        ]

    def test_batched_results_become_one_message_each(self) -> None:
        turns = [
            AssistantTurn(
                content=[
                    ToolUseBlock(id="a", name="x", input={}),
                    ToolUseBlock(id="b", name="y", input={}),
                ]
            ),
            ToolResultTurn(
                results=[
                    ToolResultBlock(tool_use_id="a", content="1"),
                    ToolResultBlock(tool_use_id="b", content="2", is_error=True),
                ]
            ),
        ]

        messages = to_openai_messages("s", turns)

        assert messages[1]["content"] is None
        assert [m.get("tool_call_id") for m in messages[2:]] == ["a", "b"]

    def test_text_only_assistant_has_no_tool_calls(self) -> None:
        messages = to_openai_messages(
            "s", [AssistantTurn(content=[TextBlock(text="hi")])]
        )

        assert messages[1] == {"role": "assistant", "content": "hi"}


# ---------------------------------------------------------------------------
# complete()
# ---------------------------------------------------------------------------


class TestComplete:
    async def test_text_reply_mapped_to_text_block(self) -> None:
        service, observer = _make_service()
        mock = AsyncMock(return_value=_make_acompletion_response("Three jobs."))

        with patch(_PATCH_TARGET, new=mock):
            response = await service.complete(_request())

        assert response.stop_reason == "end_turn"
        assert response.content == [TextBlock(text="Three jobs.")]
        assert observer.completed == ["end_turn"]

    async def test_tool_calls_mapped_to_tool_use_blocks(self) -> None:
        service, _ = _make_service()
        raw = _make_acompletion_response(
            None,
            finish_reason="tool_calls",
            tool_calls=[_make_tool_call("call_9", "list_jobs", '{"limit": 2}')],
        )

        with patch(_PATCH_TARGET, new=AsyncMock(return_value=raw)):
            response = await service.complete(_request(tools=[_SPEC]))

        assert response.requests_tool_use
        assert response.content == [
            ToolUseBlock(id="call_9", name="list_jobs", input={"limit": 2})
        ]

    async def test_request_arguments(self) -> None:
        service, _ = _make_service(
            CompletionConfig(
                model="anthropic/claude-x",
                max_tokens=256,
                temperature=0.2,
                api_base="http://llm.test",
            )
        )
        mock = AsyncMock(return_value=_make_acompletion_response("ok"))

        with patch(_PATCH_TARGET, new=mock):
            await service.complete(_request(tools=[_SPEC]))

        kwargs = mock.call_args.kwargs
        assert kwargs["model"] == "anthropic/claude-x"
        assert kwargs["max_tokens"] == 256
        assert kwargs["temperature"] == pytest.approx(0.2)
        assert kwargs["api_base"] == "http://llm.test"
        assert "api_key" not in kwargs
        assert kwargs["tools"][0]["function"]["name"] == "list_jobs"
        assert kwargs["messages"][0] == {"role": "system", "content": "You are Relay."}

    async def test_tools_omitted_when_none_available(self) -> None:
        service, _ = _make_service()
        mock = AsyncMock(return_value=_make_acompletion_response("ok"))

        with patch(_PATCH_TARGET, new=mock):
            await service.complete(_request())

        assert "tools" not in mock.call_args.kwargs
        assert "temperature" not in mock.call_args.kwargs

    async def test_reply_without_choices_has_no_content(self) -> None:
        service, _ = _make_service()
        raw = MagicMock()
        raw.choices = []

        with patch(_PATCH_TARGET, new=AsyncMock(return_value=raw)):
            response = await service.complete(_request())

        assert response.content is None

    async def test_provider_failure_raises_completion_error(self) -> None:
        service, observer = _make_service()

        with patch(_PATCH_TARGET, new=AsyncMock(side_effect=RuntimeError("429"))):
            with pytest.raises(CompletionError, match="429"):
                await service.complete(_request())

        assert observer.failed == ["429"]

    async def test_invalid_tool_arguments_raise_completion_error(self) -> None:
        service, observer = _make_service()
        raw = _make_acompletion_response(
            None,
            finish_reason="tool_calls",
            tool_calls=[_make_tool_call("c", "list_jobs", "{not json")],
        )

        with patch(_PATCH_TARGET, new=AsyncMock(return_value=raw)):
            with pytest.raises(CompletionError, match="not valid JSON"):
                await service.complete(_request(tools=[_SPEC]))

        assert len(observer.failed) == 1

    async def test_arguments_round_trip_through_json(self) -> None:
        service, _ = _make_service()
        arguments = {"filter": {"state": "running"}, "limit": 10}
        raw = _make_acompletion_response(
            "Let me look.",
            finish_reason="tool_calls",
            tool_calls=[_make_tool_call("c1", "list_jobs", json.dumps(arguments))],
        )

        with patch(_PATCH_TARGET, new=AsyncMock(return_value=raw)):
            response = await service.complete(_request(tools=[_SPEC]))

        assert response.content is not None
        assert isinstance(response.content[0], TextBlock)
        assert isinstance(response.content[1], ToolUseBlock)
        assert response.content[1].input == arguments

    async def test_tool_call_without_id_raises_completion_error(self) -> None:
        service, observer = _make_service()
        raw = _make_acompletion_response(
            None,
            finish_reason="tool_calls",
            tool_calls=[_make_tool_call("", "list_jobs", "{}")],
        )

        with patch(_PATCH_TARGET, new=AsyncMock(return_value=raw)):
            with pytest.raises(CompletionError, match="malformed completion"):
                await service.complete(_request(tools=[_SPEC]))

        assert len(observer.failed) == 1
        assert observer.completed == []

    async def test_choice_without_message_raises_completion_error(self) -> None:
        service, _ = _make_service()
        raw = _make_acompletion_response("ignored")
        raw.choices[0].message = None

        with patch(_PATCH_TARGET, new=AsyncMock(return_value=raw)):
            with pytest.raises(CompletionError, match="malformed completion"):
                await service.complete(_request())
