"""Tests for ToolInvocationRecord lifecycle."""

import json

import pytest

from mcp_relay.conversation.domain.invocation import (
    InvocationStatus,
    ToolInvocationRecord,
)
from mcp_relay.conversation.infrastructure.errors import ConversationStateError


def _record() -> ToolInvocationRecord:
    return ToolInvocationRecord(call_id="t1", tool_name="query", arguments={"q": 1})


class TestToolInvocationRecord:
    def test_starts_pending(self) -> None:
        assert _record().status is InvocationStatus.PENDING

    def test_success_becomes_plain_result(self) -> None:
        record = _record()

        record.succeed("rows")

        block = record.to_result_block()
        assert block.tool_use_id == "t1"
        assert block.content == "rows"
        assert block.is_error is False

    def test_failure_becomes_json_error_result(self) -> None:
        record = _record()

        record.fail("boom")

        block = record.to_result_block()
        assert block.is_error is True
        assert json.loads(block.content) == {"error": "boom"}

    def test_terminal_state_cannot_change(self) -> None:
        record = _record()
        record.succeed("rows")

        with pytest.raises(ConversationStateError, match="already succeeded"):
            record.fail("late")

    def test_pending_record_has_no_result_block(self) -> None:
        with pytest.raises(ConversationStateError, match="still pending"):
            _record().to_result_block()
