"""
Structured logging for the confidence engine, built on structlog.

Engine modules log decisions at DEBUG with key/value fields (mode choice,
Type-2b fallback, tier distribution) and unexpected but recoverable states
at WARNING. Log lines emitted while a scan is evaluated carry its
``scan_session_id`` through contextvars.

Usage:
    from core.logging import configure_logging, get_logger, scan_context

    configure_logging(json_logs=True, log_level="DEBUG")
    logger = get_logger(__name__)

    with scan_context("ce_1700000000000_ab12cd3"):
        logger.debug("Suggestions mode decided", mode="B", trigger="has_cap_reasons")
"""

import logging
import sys
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Iterator, List, Optional

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from config.settings import Settings


SCAN_SESSION_KEY = "scan_session_id"


def _resolve_level(log_level: str) -> int:
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level!r}")
    return level


def _build_processors(json_logs: bool, include_timestamp: bool) -> List[Processor]:
    processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if include_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_logs:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(colors=True, exception_formatter=structlog.dev.plain_traceback)
        )
    return processors


def configure_logging(
    json_logs: bool = False,
    log_level: str = "INFO",
    include_timestamp: bool = True,
) -> None:
    """
    Configure structlog over stdlib logging, writing to stdout.

    Args:
        json_logs: JSON lines when True, colored console output otherwise.
        log_level: Minimum level name, case-insensitive.
        include_timestamp: Prefix each entry with an ISO timestamp.

    Raises:
        ValueError: If log_level is not a known level name.
    """
    level = _resolve_level(log_level)

    structlog.configure(
        processors=_build_processors(json_logs, include_timestamp),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)


def configure_logging_from_settings(settings: "Settings") -> None:
    """Apply ``json_logs`` and ``log_level`` from a Settings instance."""
    configure_logging(json_logs=settings.json_logs, log_level=settings.log_level)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind fields to every subsequent log line in the current context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


@contextmanager
def scan_context(scan_session_id: str, **extra: Any) -> Iterator[None]:
    """
    Bind ``scan_session_id`` (plus any extra fields) for the duration of
    the block. The fields are unbound on exit, including on error.
    """
    bind_context(**{SCAN_SESSION_KEY: scan_session_id}, **extra)
    try:
        yield
    finally:
        unbind_context(SCAN_SESSION_KEY, *extra)


class LoggerMixin:
    """Gives service classes a ``logger`` named after the class."""

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        return get_logger(self.__class__.__name__)
