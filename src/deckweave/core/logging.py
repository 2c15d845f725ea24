"""Structured logging configuration using structlog.

Library modules only call `get_logger(__name__)`. The process entry point
(the CLI, or whatever embeds deckweave) calls `configure_logging()` once:

- log_json=False: console output for humans
- log_json=True:  one JSON object per line for log aggregation
"""

from __future__ import annotations

import logging
import sys
from typing import cast

import structlog

from deckweave.core.config import Settings, get_settings

_configured = False


def configure_logging(settings: Settings | None = None) -> None:
    """Configure stdlib logging + structlog. Safe to call more than once."""
    global _configured
    if _configured:
        return

    settings = settings or get_settings()
    level = getattr(logging, str(settings.log_level).upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level,
    )

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.log_json:
        processors: list[structlog.types.Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=False),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
