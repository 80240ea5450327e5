"""
forgeclaw_portal.observability.logging

structlog setup: one JSON object per line on stdout, which is what Northflank's
log viewer and the downstream log drain expect.

Responsibilities:
- Configure stdlib logging + structlog once per process (`configure_logging`).
- Stamp every event with the service name.
- Mask credentials: the customer's Anthropic key, passwords, tokens.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

MASK = "***"

# Keys that may carry customer or vendor credentials.
SENSITIVE_KEYS = frozenset(
    {
        "anthropic_api_key",
        "authorization",
        "new_password",
        "current_password",
        "password",
        "password_hash",
        "token",
    }
)

# Libraries whose own request logging duplicates ours.
_NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def configure_logging(*, service_name: str, level: str) -> None:
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=_processors(service_name),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _processors(service_name: str) -> list[Processor]:
    def add_service(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", service_name)
        return event_dict

    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_service,
        mask_sensitive,
        structlog.processors.dict_tracebacks,
        structlog.processors.JSONRenderer(),
    ]


def _mask(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: MASK if str(k).lower() in SENSITIVE_KEYS else _mask(v) for k, v in value.items()}
    return value


def mask_sensitive(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    # Top-level keys and keys inside dict values (e.g. a logged request payload).
    return _mask(event_dict)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
