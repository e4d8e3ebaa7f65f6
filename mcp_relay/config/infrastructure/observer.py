"""Structlog implementation of the ConfigObserver port."""

import structlog


class StructlogConfigObserver:
    """Delegates config domain events to structlog.

    Satisfies the ConfigObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def config_loaded(self, name: str, model: str) -> None:
        self._log.info("config.loaded", name=name, model=model)

    def config_tools_disabled(self, name: str) -> None:
        self._log.warning(
            "config.tools_disabled",
            name=name,
            message="No tool_server configured; answers will be produced without tools",
        )
