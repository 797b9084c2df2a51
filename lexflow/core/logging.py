"""Structured logging for the LexFlow data layer.

JSON lines when LOG_FORMAT=json, colored console output otherwise. Record
operations bind ``collection`` and ``record_id`` through structlog
contextvars (see ``record_context``), so backend and calendar log lines
emitted underneath an operation carry the record they belong to. Detached
calendar tasks inherit the binding of the operation that spawned them.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from lexflow.core.config import Settings

QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "sqlalchemy.pool")


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def setup_logging(settings: Settings) -> None:
    """Route structlog and stdlib logging through one formatter on stdout."""
    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    structlog.configure(
        processors=[
            *pre_chain,
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    final: list[structlog.types.Processor] = [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
    ]
    if settings.log_format == "json":
        final.append(structlog.processors.dict_tracebacks)
    final.append(_renderer(settings.log_format))

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(foreign_pre_chain=pre_chain, processors=final)
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(settings.log_level.upper())

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


@contextmanager
def record_context(collection: str, record_id: str | None = None) -> Iterator[None]:
    """Bind the record an operation works on to every log line inside the block."""
    bindings: dict[str, str] = {"collection": collection}
    if record_id is not None:
        bindings["record_id"] = record_id
    with structlog.contextvars.bound_contextvars(**bindings):
        yield
