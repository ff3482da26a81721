# hybridsim/logging.py

import logging
import sys
from typing import Optional

import structlog
from structlog.processors import JSONRenderer, TimeStamper, add_log_level
from structlog.stdlib import add_logger_name

from .config import config

LOG_FORMATS = ("json", "console")


def configure_logging(log_level: Optional[str] = None, log_format: Optional[str] = None):
    """Configure structured logging for hybridsim.

    Args:
        log_level: Standard logging level name; defaults to ``config.log_level``
        log_format: ``"json"`` for one JSON object per line, ``"console"`` for
            human readable output; defaults to ``config.log_format``
    """
    level_name = (log_level or config.log_level).upper()
    log_format = log_format or config.log_format
    if log_format not in LOG_FORMATS:
        raise ValueError(f"Unknown log format {log_format!r}; expected one of {LOG_FORMATS}")

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level_name, logging.INFO),
        force=True,
    )

    renderer = JSONRenderer() if log_format == "json" else structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            add_log_level,
            add_logger_name,
            TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str):
    """Get a structured logger instance."""
    return structlog.get_logger(name)
