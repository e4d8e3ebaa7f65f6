"""LiteLLMCompletionService — CompletionService backed by litellm.acompletion."""

import json
import time
from typing import Any

import litellm
from pydantic import ValidationError

from mcp_relay.config.domain.completion import CompletionConfig
from mcp_relay.conversation.domain.completion import (
    TOOL_USE,
    CompletionRequest,
    CompletionResponse,
)
from mcp_relay.conversation.domain.content import (
    ContentBlock,
    TextBlock,
    ToolUseBlock,
)
from mcp_relay.conversation.domain.observer import CompletionObserver
from mcp_relay.conversation.domain.turn import (
    AssistantTurn,
    ChatTurn,
    ToolResultTurn,
    UserTurn,
)
from mcp_relay.conversation.infrastructure.errors import CompletionError
from mcp_relay.tools.domain.tool import ToolSpec

_STOP_REASONS = {
    "tool_calls": TOOL_USE,
    "function_call": TOOL_USE,
    "stop": "end_turn",
    "length": "max_tokens",
}


def to_openai_messages(
    system_prompt: str, turns: list[ChatTurn]
) -> list[dict[str, Any]]:
    """Flatten turns into OpenAI chat messages; one ``tool`` message per result."""
    messages: list[dict[str, Any]] = [{"role": "system", "content": system_prompt}]
    for turn in turns:
        match turn:
            case UserTurn():
                messages.append({"role": "user", "content": turn.text})
            case AssistantTurn():
                messages.append(_assistant_message(turn))
            case ToolResultTurn():
                messages.extend(
                    {
                        "role": "tool",
                        "tool_call_id": result.tool_use_id,
                        "content": result.content,
                    }
                    for result in turn.results
                )
    return messages


def to_openai_tools(specs: list[ToolSpec]) -> list[dict[str, Any]]:
    return [
        {
            "type": "function",
            "function": {
                "name": spec.name,
                "description": spec.description,
                "parameters": spec.input_schema,
            },
        }
        for spec in specs
    ]


def _assistant_message(turn: AssistantTurn) -> dict[str, Any]:
    text = "".join(b.text for b in turn.content if isinstance(b, TextBlock))
    message: dict[str, Any] = {"role": "assistant", "content": text or None}
    if turn.tool_uses:
        message["tool_calls"] = [
            {
                "id": block.id,
                "type": "function",
                "function": {"name": block.name, "arguments": json.dumps(block.input)},
            }
            for block in turn.tool_uses
        ]
    return message


class LiteLLMCompletionService:
    """Completion service that delegates to any provider LiteLLM supports.

    The request is sent in OpenAI chat format and the reply is mapped back
    into content blocks: message text becomes one TextBlock, each tool call a
    ToolUseBlock with its JSON arguments decoded.
    """

    def __init__(self, config: CompletionConfig, observer: CompletionObserver) -> None:
        self._config = config
        self._observer = observer

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Invoke the model once.

        A reply without choices is returned with ``content=None`` so the
        caller can answer with its fallback.

        Raises:
            CompletionError: if the provider call fails, the reply is
                structurally malformed, or a tool call's arguments are not a
                JSON object.
        """
        messages = to_openai_messages(request.system_prompt, request.messages)
        kwargs: dict[str, Any] = {
            "model": self._config.model,
            "messages": messages,
            "max_tokens": self._config.max_tokens,
        }
        if request.tools:
            kwargs["tools"] = to_openai_tools(request.tools)
        if self._config.temperature is not None:
            kwargs["temperature"] = self._config.temperature
        if self._config.api_base is not None:
            kwargs["api_base"] = self._config.api_base
        if self._config.api_key is not None:
            kwargs["api_key"] = self._config.api_key

        self._observer.completion_started(
            model=self._config.model, message_count=len(messages)
        )
        start = time.monotonic()
        try:
            raw = await litellm.acompletion(**kwargs)
        except Exception as exc:
            reason = str(exc)
            self._observer.completion_failed(model=self._config.model, reason=reason)
            raise CompletionError(reason=reason) from exc

        try:
            response = self._to_response(raw)
        except CompletionError as exc:
            self._observer.completion_failed(model=self._config.model, reason=str(exc))
            raise
        except (ValidationError, AttributeError, TypeError) as exc:
            reason = f"malformed completion response: {exc}"
            self._observer.completion_failed(model=self._config.model, reason=reason)
            raise CompletionError(reason=reason) from exc

        self._observer.completion_completed(
            model=self._config.model,
            stop_reason=response.stop_reason,
            duration_ms=int((time.monotonic() - start) * 1000),
        )
        return response

    def _to_response(self, raw: Any) -> CompletionResponse:
        choices = getattr(raw, "choices", None)
        if not choices:
            return CompletionResponse(stop_reason=None, content=None)

        choice = choices[0]
        message = choice.message
        content: list[ContentBlock] = []
        if message.content:
            content.append(TextBlock(text=message.content))
        for call in message.tool_calls or []:
            content.append(
                ToolUseBlock(
                    id=call.id,
                    name=call.function.name,
                    input=_decode_arguments(call.function.arguments),
                )
            )

        stop_reason = _STOP_REASONS.get(choice.finish_reason, choice.finish_reason)
        if any(isinstance(block, ToolUseBlock) for block in content):
            stop_reason = TOOL_USE
        return CompletionResponse(stop_reason=stop_reason, content=content)


def _decode_arguments(arguments: str | None) -> dict[str, Any]:
    if not arguments:
        return {}
    try:
        decoded = json.loads(arguments)
    except json.JSONDecodeError as exc:
        raise CompletionError(
            reason=f"tool call arguments are not valid JSON: {arguments!r}"
        ) from exc
    if not isinstance(decoded, dict):
        raise CompletionError(
            reason=f"tool call arguments are not an object: {arguments!r}"
        )
    return decoded
