"""
Structured logging for the dashboard service.

Provider attempts, fallbacks and refresh ticks are logged as structlog
events on top of the standard library root logger, rendered either as JSON
lines or as coloured console output depending on ``settings.log.format``.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import structlog

from tradedesk.config.settings import settings

_CONFIGURED = False


def censor_sensitive(logger, method_name, event_dict):
    """Redact anything that looks like a credential."""
    sensitive_keys = ["password", "api_key", "secret", "token"]
    for key in list(event_dict.keys()):
        if any(sensitive in key.lower() for sensitive in sensitive_keys):
            event_dict[key] = "***REDACTED***"
    return event_dict


def configure_stdlib_logging() -> None:
    level = getattr(logging, settings.log.level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)


def setup_structlog() -> None:
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        censor_sensitive,
    ]
    if settings.log.format.lower() == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger, configuring logging on first use.

    Args:
        name: Logger name (usually __name__)
    """
    global _CONFIGURED

    if not _CONFIGURED:
        configure_stdlib_logging()
        setup_structlog()
        _CONFIGURED = True

    return structlog.get_logger(name)
