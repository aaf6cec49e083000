"""
tenant_auth.observability.logging

Structured logging for authentication audit events.

Responsibilities:
- Configure `structlog` to emit one JSON object per event.
- Stamp every event with the service name and scrub credential-bearing fields.
- Provide a token fingerprint helper so bearer attempts are traceable without the token.
"""

from __future__ import annotations

import hashlib
import logging
import sys
from typing import Any

import structlog

# Field names that may never reach a log sink with their value intact.
SENSITIVE_KEYS = frozenset(
    {
        "password",
        "secret",
        "token",
        "bind_password",
        "client_secret",
        "authorization",
        "cookie",
    }
)
REDACTED = "[redacted]"


def configure_logging(*, service_name: str, level: str) -> None:
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _add_service_name(service_name),
            redact_secrets,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _add_service_name(service_name: str):
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def redact_secrets(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Replace the value of any credential-named field, whatever logged it."""
    for key in event_dict.keys() & SENSITIVE_KEYS:
        if event_dict[key] is not None:
            event_dict[key] = REDACTED
    return event_dict


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def fingerprint(value: str) -> str:
    # First 12 hex chars of sha256: enough to correlate attempts, useless for replay.
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:12]


# --- Module Notes -----------------------------------------------------------
# Request-scoped metadata is bound via contextvars in `observability.middleware`.
# Call sites still avoid passing secrets; `redact_secrets` only covers named fields.
