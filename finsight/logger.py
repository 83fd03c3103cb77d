"""
Structured Logging

Every store mutation, load failure and backup operation is logged
as a structured event. Logs go to stdout as JSON through the stdlib
logging module, so the level can be controlled in one place.
"""

import logging
import sys
from typing import Optional

import structlog

from finsight.config import get_settings


_configured = False


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure structlog and the stdlib root handler.

    Args:
        level: Log level name. Defaults to the configured app log level.
    """
    global _configured

    level_name = level or get_settings().app.log_level
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level_name.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a bound logger, configuring logging on first use."""
    if not _configured:
        configure_logging()
    return structlog.get_logger(name)
