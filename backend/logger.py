# backend/logger.py
"""Structured logging via structlog.

Console output while debugging, JSON lines otherwise. Modules grab a logger with
``get_logger(__name__)`` and log short events with key/value context.
"""
import logging
import sys
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

import structlog
from structlog.stdlib import BoundLogger
from structlog.types import Processor


def _build_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.format_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]


def configure_logging(debug: bool = False) -> None:
    processors = _build_processors()
    renderer: Processor = structlog.dev.ConsoleRenderer() if debug else structlog.processors.JSONRenderer()

    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=processors,
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)


def get_logger(name: Optional[str] = None) -> BoundLogger:
    return structlog.get_logger(name)


@asynccontextmanager
async def async_log_timing(operation: str, logger: Optional[BoundLogger] = None, **context: Any) -> AsyncIterator[None]:
    """Log how long an awaited block took, whether it succeeded or raised."""
    log = logger or get_logger(__name__)
    start = time.perf_counter()
    try:
        yield
    finally:
        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        log.debug(f"{operation} completed", operation=operation, duration_ms=duration_ms, **context)
