"""Logging configuration for MakeAndCut.

Every log line is a JSON object. Request-scoped fields (method, path and the
caller supplied ``x-request-id``) are bound once per request by the HTTP
middleware and merged into each event emitted while that request runs.
"""

from __future__ import annotations

import logging
from typing import Any, MutableMapping

import structlog

REDACTED = "[redacted]"
SENSITIVE_KEYS = frozenset(
    {"password", "password_hash", "api_secret", "secret_key", "webhook_secret", "signature"}
)


def redact_secrets(
    _: Any, __: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Mask credential-like fields before rendering."""
    for key in SENSITIVE_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def bind_request_context(method: str, path: str, request_id: str | None = None) -> None:
    """Reset the per-request log context and bind the current request to it."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        method=method,
        path=path,
        request_id=request_id or "-",
    )


def configure_logging(level: str = "INFO") -> None:
    """Configure stdlib logging and structlog with JSON output."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            redact_secrets,
            structlog.processors.TimeStamper(fmt="iso", key="ts"),
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


__all__ = ["bind_request_context", "configure_logging", "redact_secrets"]
