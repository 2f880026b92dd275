"""Opinionated JSON logging configuration for MCP servers."""

import logging
import sys
from typing import Any, Optional

import structlog

_configured = False


def configure_logging(
    level: str = "INFO",
    service_name: Optional[str] = None,
    structured: bool = True,
) -> None:
    """Configure logging for MCP servers.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        service_name: Name of the service, bound to every event
        structured: Render JSON when true, key=value console output otherwise
    """
    global _configured
    log_level = getattr(logging, level.upper(), logging.INFO)

    renderer = (
        structlog.processors.JSONRenderer()
        if structured
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    if not _configured:
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.handlers[:] = [handler]
        _configured = True
    root.setLevel(log_level)

    if service_name:
        structlog.contextvars.bind_contextvars(service=service_name)


def get_logger(name: str, **context: Any) -> Any:
    """Get a structlog logger, optionally bound to context.

    The returned logger is what callers thread through the call chain as
    their ``log`` argument.
    """
    logger = structlog.get_logger(name)
    if context:
        logger = logger.bind(**context)
    return logger
