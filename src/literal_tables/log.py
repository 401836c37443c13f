"""Logging for the engine and its front ends.

Modules take a logger from ``get_logger`` at import time. Nothing is
printed until ``setup_logging`` has run, which ``ltsql`` does from its
settings before reading any input. Events go to stderr so that they never
interleave with result rows on stdout.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.typing import FilteringBoundLogger, Processor


def setup_logging(level: str = "WARNING", log_format: str = "console") -> None:
    """Route structlog events at ``level`` or above to stderr.

    ``log_format`` is ``json`` for one object per line, anything else for
    the human-readable console renderer.
    """
    threshold = logging.getLevelName(level.upper())
    renderer: Processor
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(threshold),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        # Settings may be applied more than once, e.g. in tests
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None, **initial_context: Any) -> FilteringBoundLogger:
    logger = structlog.get_logger(name)
    return logger.bind(**initial_context) if initial_context else logger
