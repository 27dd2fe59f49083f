"""Structured logging for the snippets.

structlog renders each event as JSON; loguru owns the single output sink.
Standard library records emitted by ``google-auth`` and ``googleapiclient``
are forwarded to the same sink so one stream shows both.
"""

from __future__ import annotations

import logging
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, Mapping, TextIO

import structlog
from loguru import logger as loguru_logger

from shared.errors import SnippetConfigurationError

__all__ = [
    "GoogleLibraryInterceptHandler",
    "configure_logging",
    "get_logger",
    "get_operation_id",
    "operation_context",
]

_OPERATION_ID: ContextVar[str | None] = ContextVar("operation_id", default=None)
_CONFIGURED: bool = False

# googleapiclient warns about its discovery file cache on every build.
_QUIETED_LOGGERS = {"googleapiclient.discovery_cache": logging.ERROR}


def _render_line(record: Mapping[str, Any]) -> str:
    extra = record.get("extra") or {}
    origin = extra.get("operation") or extra.get("logger") or "-"
    operation_id = extra.get("operation_id") or "-"
    message = str(record.get("message", ""))
    # loguru formats the returned line again, so JSON braces must be escaped.
    message = message.replace("{", "{{").replace("}", "}}")
    return (
        f"{record['time']:%Y-%m-%dT%H:%M:%S%z} {record['level'].name} "
        f"[{extra.get('service', '-')}] {origin}#{operation_id} {message}\n"
    )


def _coerce_level(level: str | int) -> tuple[int, str]:
    """Return the numeric and named form of ``level``."""

    numeric = level if isinstance(level, int) else logging.getLevelName(level.upper())
    name = logging.getLevelName(numeric) if isinstance(numeric, int) else None
    if not isinstance(name, str) or name.startswith("Level "):
        raise SnippetConfigurationError(
            f"Unknown log level: {level}", context={"level": level}
        )
    return numeric, name


def get_operation_id() -> str | None:
    """Return the identifier of the operation running in this context, if any."""

    return _OPERATION_ID.get()


class GoogleLibraryInterceptHandler(logging.Handler):
    """Forward standard logging records into the loguru sink."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        loguru_logger.bind(
            logger=record.name, operation_id=get_operation_id()
        ).opt(exception=record.exc_info).log(level, record.getMessage())


def configure_logging(
    *,
    service_name: str | None = None,
    level: str | int = "INFO",
    sink: TextIO | None = None,
) -> None:
    """Route structlog events and Google library records to ``sink``.

    ``sink`` defaults to ``stderr`` so results printed on ``stdout`` stay
    machine readable. Only the first call installs handlers.
    """

    global _CONFIGURED

    numeric_level, level_name = _coerce_level(level)

    if not _CONFIGURED:
        loguru_logger.remove()
        loguru_logger.add(
            sink or sys.stderr,
            level=level_name,
            backtrace=False,
            diagnose=False,
            format=_render_line,
        )

        root = logging.getLogger()
        root.addHandler(GoogleLibraryInterceptHandler())
        root.setLevel(numeric_level)
        for name, quiet_level in _QUIETED_LOGGERS.items():
            logging.getLogger(name).setLevel(quiet_level)

        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.processors.add_log_level,
                structlog.stdlib.add_logger_name,
                structlog.processors.TimeStamper(fmt="iso", utc=True),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(sort_keys=True),
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        _CONFIGURED = True

    if service_name:
        loguru_logger.configure(extra={"service": service_name})
        structlog.contextvars.bind_contextvars(service=service_name)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name) if name else structlog.get_logger()


@contextmanager
def operation_context(
    operation: str, operation_id: str | None = None
) -> Iterator[str]:
    """Tag every event logged inside the block with ``operation`` and an id.

    Values bound under the same keys before the block are restored on exit.
    """

    oid = operation_id or uuid.uuid4().hex
    token = _OPERATION_ID.set(oid)
    previous = structlog.contextvars.get_contextvars()
    structlog.contextvars.bind_contextvars(operation=operation, operation_id=oid)
    try:
        with loguru_logger.contextualize(operation=operation, operation_id=oid):
            yield oid
    finally:
        structlog.contextvars.unbind_contextvars("operation", "operation_id")
        restore = {
            key: previous[key]
            for key in ("operation", "operation_id")
            if key in previous
        }
        if restore:
            structlog.contextvars.bind_contextvars(**restore)
        _OPERATION_ID.reset(token)
