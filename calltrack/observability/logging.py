"""Structured logging configuration using structlog.

Provides JSON logging for CI and console logging for local runs. Logged
payload values can be arbitrarily large, so string fields are truncated
before rendering.

Loggers write through the standard library logger of the same name. The
``calltrack`` logger carries a ``NullHandler``, so nothing is printed until
``setup_logging`` runs or the application configures ``logging`` itself.
"""

import logging
import sys
from collections.abc import MutableMapping
from typing import Any, cast

import structlog
from structlog.types import EventDict, WrappedLogger

LEVELS: dict[str, int] = {
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
    "ERROR": 40,
    "CRITICAL": 50,
}

LOGGER_NAME = "calltrack"

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())

_handler: logging.Handler | None = None


def truncate(text: str, limit: int) -> str:
    """Shorten ``text`` to at most ``limit`` characters, marking the cut."""
    if len(text) <= limit:
        return text
    if limit <= 3:
        return text[:limit]
    return text[: limit - 3] + "..."


class ReprTruncator:
    """Processor that truncates long string values in log events."""

    def __init__(self, max_length: int = 200) -> None:
        self.max_length = max_length

    def __call__(
        self,
        _logger: WrappedLogger,
        _method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        """Truncate string values in the event dictionary."""
        return cast(EventDict, self._truncate_dict(event_dict))

    def _truncate_dict(self, data: MutableMapping[str, Any]) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key, value in data.items():
            if isinstance(value, str) and key != "event":
                result[key] = truncate(value, self.max_length)
            elif isinstance(value, dict):
                result[key] = self._truncate_dict(value)
            else:
                result[key] = value
        return result


def setup_logging(
    level: str = "INFO",
    format: str = "console",
    max_repr_length: int = 200,
) -> None:
    """Configure structured logging.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR)
        format: Output format - "json" or "console"
        max_repr_length: Longest string value kept in an event
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        ReprTruncator(max_repr_length),
    ]

    if format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    log_level = LEVELS.get(level.upper(), 20)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    global _handler
    library_logger = logging.getLogger(LOGGER_NAME)
    if _handler is not None:
        library_logger.removeHandler(_handler)
    _handler = logging.StreamHandler(sys.stderr)
    # Events arrive already rendered by the processor chain.
    _handler.setFormatter(logging.Formatter("%(message)s"))
    library_logger.addHandler(_handler)
    library_logger.setLevel(log_level)
    library_logger.propagate = False


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance bound to the given name.

    Args:
        name: Logger name (typically __name__ of the module)

    Returns:
        A bound structlog logger writing to the stdlib logger ``name``
    """
    return cast(structlog.stdlib.BoundLogger, structlog.wrap_logger(logging.getLogger(name)))
