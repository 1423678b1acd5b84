"""Structured logging configuration.

contentsearch runs inside a host application. The host calls
``setup_logging()`` once at startup; library modules only use ``get_logger()``.
Output goes to a handler on the ``contentsearch`` logger, so the host's root
logging setup is left alone.
"""

import logging
import sys
from typing import Any, TextIO, cast

import structlog

from contentsearch.config import Settings, get_settings

LIBRARY_LOGGER = "contentsearch"

# SQL echo is controlled by the engine, the driver loggers stay at WARNING
QUIET_LOGGERS = ("sqlalchemy.engine", "asyncpg", "aiosqlite")


def _add_component(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("component", "search_index")
    return event_dict


def build_processors(settings: Settings) -> list[Any]:
    """Processor chain: console rendering in development, JSON lines otherwise."""
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_component,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if settings.is_development:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return processors


def setup_logging(settings: Settings | None = None, *, stream: TextIO | None = None) -> logging.Logger:
    """Configure structured logging for the search index.

    Args:
        settings: Settings to read the environment and debug flag from
        stream: Output stream, stdout by default

    Returns:
        The configured ``contentsearch`` stdlib logger
    """
    if settings is None:
        settings = get_settings()

    structlog.configure(
        processors=build_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))

    library_logger = logging.getLogger(LIBRARY_LOGGER)
    # Calling setup twice replaces the handler instead of duplicating output
    for existing in list(library_logger.handlers):
        library_logger.removeHandler(existing)
    library_logger.addHandler(handler)
    library_logger.setLevel(logging.DEBUG if settings.app_debug else logging.INFO)
    library_logger.propagate = False

    for logger_name in QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    return library_logger


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance."""
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
