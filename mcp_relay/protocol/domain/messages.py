"""JSON-RPC message and result value objects for the tool protocol."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

LATEST_PROTOCOL_VERSION = "2024-11-05"
SUPPORTED_PROTOCOL_VERSIONS: tuple[str, ...] = (LATEST_PROTOCOL_VERSION,)
JSONRPC_VERSION = "2.0"


class ClientState(StrEnum):
    UNINITIALIZED = "uninitialized"
    HANDSHAKING = "handshaking"
    READY = "ready"
    CLOSED = "closed"


class ErrorPayload(BaseModel, frozen=True):
    """The ``error`` member of a failed response."""

    code: int = 0
    message: str
    data: Any = None


class Response(BaseModel, frozen=True):
    """A reply to one of our requests, correlated by numeric id.

    Exactly one of result / error is set.
    """

    id: int
    result: dict[str, Any] | None = None
    error: ErrorPayload | None = None


class Notification(BaseModel, frozen=True):
    """A server-initiated message that expects no reply."""

    method: str
    params: dict[str, Any] | None = None


class ServerRequest(BaseModel, frozen=True):
    """A server-initiated message that expects a reply. None are supported."""

    id: int | str
    method: str
    params: dict[str, Any] | None = None


type InboundMessage = Response | Notification | ServerRequest


class ClientInfo(BaseModel, frozen=True):
    name: str
    version: str


class ServerInfo(BaseModel, frozen=True):
    model_config = ConfigDict(extra="allow")

    name: str = ""
    version: str = ""


class InitializeResult(BaseModel, frozen=True):
    """Server reply to the ``initialize`` handshake request."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    protocol_version: str = Field(alias="protocolVersion")
    capabilities: dict[str, Any] = Field(default_factory=dict)
    server_info: ServerInfo | None = Field(default=None, alias="serverInfo")


class ToolDescriptor(BaseModel, frozen=True):
    """One tool advertised by the remote server."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str = Field(min_length=1)
    description: str = ""
    input_schema: dict[str, Any] = Field(default_factory=dict, alias="inputSchema")


class ListToolsResult(BaseModel, frozen=True):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    tools: list[ToolDescriptor]
    next_cursor: str | None = Field(default=None, alias="nextCursor")


class CallToolResult(BaseModel, frozen=True):
    """Result of ``tools/call``. ``content`` is whatever the server returned."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    content: Any = None
    is_error: bool = Field(default=False, alias="isError")
