"""
Structured logging setup.

The rules only ever log at DEBUG: which tier, which score, how long the
queue came out. Nothing that identifies a patient goes into a log line.

Importing this package never touches the global structlog configuration.
Our loggers wrap stdlib loggers with their own processor chain, so a host
application's structlog setup and logging levels are left as they are.
configure_logging() is the one opt-in for applications that want ours.
"""

from __future__ import annotations

import logging
from typing import Optional

import structlog

from carescore.core.config import settings

_SHARED_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]

# Shared by every logger from get_logger(); configure_logging() swaps the
# renderer in place so existing loggers pick it up.
_PROCESSORS: list = [*_SHARED_PROCESSORS, structlog.processors.JSONRenderer()]


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """
    Wire structlog onto the stdlib logging tree.

    level and fmt fall back to settings.log_level and settings.log_format.
    Safe to call more than once; the last call wins.
    """
    level = (level or settings.log_level).upper()
    fmt = fmt or settings.log_format

    renderer = (
        structlog.dev.ConsoleRenderer()
        if fmt == "console"
        else structlog.processors.JSONRenderer()
    )
    _PROCESSORS[-1] = renderer

    logging.basicConfig(format="%(message)s", level=level, force=True)
    structlog.configure(
        processors=_PROCESSORS,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        cache_logger_on_first_use=False,
    )
