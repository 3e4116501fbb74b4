"""Structured logging configuration using structlog."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.typing import EventDict, WrappedLogger

from groupgallery.core.config import Settings, settings

REDACTED = "<redacted>"

# Libraries that log request URLs; file download URLs carry the bot token
NOISY_LOGGERS = ("httpx", "httpcore", "telegram", "telegram.ext")

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def token_redactor(token: str | None):
    """Build a processor masking ``token`` in every string value of an event."""

    def redact(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        if not token:
            return event_dict
        for key, value in event_dict.items():
            if isinstance(value, str) and token in value:
                event_dict[key] = value.replace(token, REDACTED)
        return event_dict

    return redact


def setup_logging(config: Settings = settings) -> None:
    """Configure structured logging for the application."""
    log_level = getattr(logging, config.log_level.upper(), logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if config.debug:
        processors.append(token_redactor(config.telegram_bot_token))
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        # Render tracebacks first so the redactor sees them as text
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.UnicodeDecoder())
        processors.append(token_redactor(config.telegram_bot_token))
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)

    for name in UVICORN_LOGGERS:
        logging.getLogger(name).setLevel(log_level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger bound to ``name``, usually the module name."""
    return structlog.get_logger(name)
