"""Composition root: wires config, observers, connector, and completion service."""

from collections.abc import Sequence
from pathlib import Path

import httpx

from mcp_relay.config.domain.config import RelayConfig
from mcp_relay.config.infrastructure.observer import StructlogConfigObserver
from mcp_relay.config.infrastructure.yaml_loader import YamlConfigLoader
from mcp_relay.connection.infrastructure.sse_connector import SseToolConnector
from mcp_relay.conversation.application.loop import ConversationLoop
from mcp_relay.conversation.domain.completion import CompletionService
from mcp_relay.conversation.domain.progress import ProgressSink
from mcp_relay.conversation.domain.turn import HistoryMessage, UserContext
from mcp_relay.conversation.infrastructure.litellm import LiteLLMCompletionService
from mcp_relay.conversation.infrastructure.observer import (
    StructlogCompletionObserver,
    StructlogConversationObserver,
)
from mcp_relay.core.logging import configure_structlog
from mcp_relay.protocol.infrastructure.observer import StructlogProtocolObserver
from mcp_relay.transport.infrastructure.observer import StructlogTransportObserver


class ChatAssistant:
    """Entry point for a request handler: one answer() call per user message."""

    def __init__(self, name: str, loop: ConversationLoop) -> None:
        self._name = name
        self._loop = loop

    @property
    def name(self) -> str:
        return self._name

    async def answer(
        self,
        message: str,
        history: Sequence[HistoryMessage] = (),
        user: UserContext | None = None,
        progress: ProgressSink | None = None,
    ) -> str:
        return await self._loop.run(
            message=message, history=history, user=user, progress=progress
        )


def build_assistant(
    config: RelayConfig,
    completion: CompletionService | None = None,
    http_transport: httpx.AsyncBaseTransport | None = None,
) -> ChatAssistant:
    """Build a ChatAssistant from a validated RelayConfig.

    completion and http_transport replace the LiteLLM service and the real
    network respectively; both default to production wiring.
    """
    configure_structlog(config.logging.format, config.logging.level)

    connector = None
    if config.tool_server is not None:
        connector = SseToolConnector(
            config=config.tool_server,
            transport_observer=StructlogTransportObserver(),
            protocol_observer=StructlogProtocolObserver(),
            http_transport=http_transport,
        )

    if completion is None:
        completion = LiteLLMCompletionService(
            config=config.completion, observer=StructlogCompletionObserver()
        )

    loop = ConversationLoop(
        config=config.conversation,
        completion=completion,
        observer=StructlogConversationObserver(),
        connector=connector,
    )
    return ChatAssistant(name=config.name, loop=loop)


def load_assistant(path: Path) -> ChatAssistant:
    """Load a RelayConfig from YAML and build its ChatAssistant.

    Raises:
        ConfigLoadError, MissingEnvVarsError, ConfigValidationError: from the
            YAML loader.
    """
    config = YamlConfigLoader(observer=StructlogConfigObserver()).load(path)
    return build_assistant(config)
