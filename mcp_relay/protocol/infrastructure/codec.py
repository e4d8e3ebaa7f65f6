"""Encode outbound JSON-RPC messages and classify inbound ones."""

from typing import Any

from pydantic import ValidationError

from mcp_relay.protocol.domain.messages import (
    JSONRPC_VERSION,
    InboundMessage,
    Notification,
    Response,
    ServerRequest,
)
from mcp_relay.protocol.infrastructure.errors import ProtocolViolationError
from mcp_relay.transport.domain.transport import JsonObject


def encode_request(
    request_id: int, method: str, params: dict[str, Any] | None = None
) -> JsonObject:
    message: JsonObject = {
        "jsonrpc": JSONRPC_VERSION,
        "id": request_id,
        "method": method,
    }
    if params is not None:
        message["params"] = params
    return message


def encode_notification(
    method: str, params: dict[str, Any] | None = None
) -> JsonObject:
    message: JsonObject = {"jsonrpc": JSONRPC_VERSION, "method": method}
    if params is not None:
        message["params"] = params
    return message


def decode_message(raw: JsonObject) -> InboundMessage:
    """Classify a decoded JSON object exactly once.

    A ``method`` member makes it a server request (with ``id``) or a
    notification (without). Anything else must be a response carrying a
    numeric ``id`` and either ``result`` or ``error``.

    Raises:
        ProtocolViolationError: if the object fits none of the three shapes.
    """
    try:
        if "method" in raw:
            if "id" in raw:
                return ServerRequest.model_validate(raw)
            return Notification.model_validate(raw)
        response = Response.model_validate(raw)
    except ValidationError as exc:
        raise ProtocolViolationError(reason=f"malformed message: {raw!r}") from exc

    if response.result is None and response.error is None:
        raise ProtocolViolationError(
            reason=f"response {response.id} has neither result nor error"
        )
    return response
