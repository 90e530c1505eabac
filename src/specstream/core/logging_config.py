"""
Structured Logging Configuration
Compiler events (pushes, fatal errors, dropped references) through structlog.

Only the ``specstream`` logger tree is configured, so an application that
embeds the compiler keeps its own root logging setup.
"""

import logging
import sys
from typing import Any

import structlog
from pythonjsonlogger import jsonlogger

from .config import get_settings

LOGGER_NAMESPACE = "specstream"

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """
    Route compiler events to stdout.

    Args:
        level: Log level, defaults to ``SPECSTREAM_LOG_LEVEL``
        json_logs: One JSON object per event, defaults to ``SPECSTREAM_JSON_LOGS``
    """
    settings = get_settings()
    level = level or settings.log_level
    if json_logs is None:
        json_logs = settings.json_logs
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    if json_logs:
        handler.setFormatter(jsonlogger.JsonFormatter(JSON_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    compiler_logger = logging.getLogger(LOGGER_NAMESPACE)
    compiler_logger.handlers = [handler]
    compiler_logger.setLevel(log_level)
    compiler_logger.propagate = False

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Structured logger; pass ``__name__`` so events land under ``specstream``."""
    return structlog.get_logger(name)


class LogContext:
    """Bind fields such as a stream id to every compiler event in scope."""

    def __init__(self, **kwargs: Any):
        self.context = kwargs
        self.token: Any = None

    def __enter__(self) -> "LogContext":
        self.token = structlog.contextvars.bind_contextvars(**self.context)
        return self

    def __exit__(self, *args: Any) -> None:
        structlog.contextvars.reset_contextvars(**self.token)
