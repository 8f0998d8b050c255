"""Structured logging for the trigger engine.

Every module logs through ``get_logger(component)``; events are snake_case
names with the decision inputs as key/value pairs. ``setup_logging`` is
applied by ``PredicateFactory.from_env`` from ``KUBETRIGGER_LOG_LEVEL``.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog


def setup_logging(level: str = "info", stream: TextIO | None = None) -> None:
    """Configure structlog for JSON lines on *stream* (stderr by default).

    Events below *level* are dropped before any processor runs, so debug
    lines on the hot update path cost nothing at the default level.
    """
    log_level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        # Loggers are module-level and built at import; caching would pin them
        # to whatever configuration was active on their first call.
        cache_logger_on_first_use=False,
    )


def get_logger(component: str) -> structlog.stdlib.BoundLogger:
    """Get a logger bound with a component name."""
    return structlog.get_logger(component=component)  # type: ignore[return-value]
