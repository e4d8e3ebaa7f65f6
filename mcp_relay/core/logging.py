"""structlog setup for any process that embeds mcp-relay."""

import logging

import structlog

from mcp_relay.config.infrastructure.errors import ConfigValidationError

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def configure_structlog(log_format: str, level: str = "info") -> None:
    """Route relay events to stdout as console lines or JSON objects.

    Events below ``level`` are dropped at the bound logger, so per-message
    protocol events only appear when ``level`` is ``"debug"``.

    Raises:
        ConfigValidationError: if log_format or level is not recognised.
    """
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        raise ConfigValidationError(
            f"invalid log format {log_format!r}, must be 'console' or 'json'"
        )
    if level not in _LEVELS:
        raise ConfigValidationError(
            f"invalid log level {level!r}, must be one of {sorted(_LEVELS)}"
        )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_LEVELS[level]),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
