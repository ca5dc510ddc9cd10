"""Structured logging for the AI Dresser service.

Log lines are JSON objects carrying the event name, a correlation id and,
inside a session-scoped operation, the AI Dresser session id. Shopper
identifiers never reach the output: user ids become a short stable hash so
quota decisions for one shopper can still be followed across lines, and
contact details or URLs are masked.
"""

from __future__ import annotations

import contextlib
import contextvars
import hashlib
import json
import logging
import os
import re
import uuid
from typing import Any, Dict, Iterator

CORRELATION_ID: contextvars.ContextVar[str | None] = contextvars.ContextVar("correlation_id", default=None)
SESSION_ID: contextvars.ContextVar[str | None] = contextvars.ContextVar("dresser_session_id", default=None)

# LogRecord attributes that describe the record itself rather than the event.
_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

_HASHED_KEYS = frozenset({"user_id"})
_MASKED_KEYS = frozenset(
    {
        "email",
        "user_email",
        "user_name",
        "customer_name",
        "customer_email",
        "customerName",
        "customerEmail",
        "auth_token",
        "api_key",
        "image_url",
        "share_url",
        "webhook_url",
    }
)
_EMAIL_PATTERN = re.compile(r"[\w.\-+]+@[\w\-]+(\.[\w\-]+)+")
_USER_REFERENCE = re.compile(r"u_[0-9a-f]{12}")


def user_reference(user_id: str) -> str:
    """Short, stable, non-reversible stand-in for a user id; references pass through."""

    if _USER_REFERENCE.fullmatch(user_id):
        return user_id
    return "u_" + hashlib.sha256(user_id.encode("utf-8")).hexdigest()[:12]


def _scrub_text(value: str) -> str:
    if value.lower().startswith(("http://", "https://")):
        return "[redacted-url]"
    return _EMAIL_PATTERN.sub("[redacted-email]", value)


def redact_for_log(payload: Any) -> Any:
    """Return a copy of ``payload`` that is safe to log."""

    if payload is None or isinstance(payload, (bool, int, float)):
        return payload
    if isinstance(payload, str):
        return _scrub_text(payload)
    if isinstance(payload, dict):
        scrubbed: Dict[str, Any] = {}
        for key, value in payload.items():
            if key in _HASHED_KEYS and value:
                scrubbed[key] = user_reference(str(value))
            elif key in _MASKED_KEYS:
                scrubbed[key] = "[redacted]"
            else:
                scrubbed[key] = redact_for_log(value)
        return scrubbed
    if isinstance(payload, (list, tuple, set, frozenset)):
        return [redact_for_log(item) for item in payload]
    return _scrub_text(str(payload))


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with the event fields flattened in."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        message = super().format(record)
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "event": getattr(record, "event", record.getMessage()),
            "message": message,
            "correlation_id": getattr(record, "correlation_id", None) or CORRELATION_ID.get(),
            "session_id": getattr(record, "session_id", None) or SESSION_ID.get(),
        }
        extras = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRIBUTES and key not in payload
        }
        payload.update(redact_for_log(extras))
        return json.dumps(payload, default=str)


def configure_logging(level: int | str | None = None) -> None:
    """Install a single stream handler on the root logger.

    ``LOG_FORMAT=text`` switches to plain text for local debugging; JSON is
    the default.
    """

    handler = logging.StreamHandler()
    if os.getenv("LOG_FORMAT", "json").lower() == "text":
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    else:
        handler.setFormatter(JsonFormatter())
    logging.basicConfig(level=level or os.getenv("LOG_LEVEL", "INFO"), handlers=[handler], force=True)


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


def ensure_correlation_id(correlation_id: str | None = None) -> str:
    """Bind ``correlation_id`` (or keep the current one, or mint one) and return it."""

    if correlation_id:
        CORRELATION_ID.set(correlation_id)
        return correlation_id
    current = CORRELATION_ID.get()
    if current:
        return current
    minted = uuid.uuid4().hex
    CORRELATION_ID.set(minted)
    return minted


@contextlib.contextmanager
def correlation_context(correlation_id: str | None = None) -> Iterator[str]:
    token = CORRELATION_ID.set(correlation_id or CORRELATION_ID.get() or uuid.uuid4().hex)
    try:
        yield CORRELATION_ID.get()
    finally:
        CORRELATION_ID.reset(token)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Log ``event`` with ``fields`` attached as structured, redacted extras."""

    correlation_id = ensure_correlation_id(fields.pop("correlation_id", None))
    exc_info = fields.pop("exc_info", None)
    logger.log(
        level,
        event,
        exc_info=exc_info,
        extra={"event": event, "correlation_id": correlation_id, **redact_for_log(fields)},
    )


@contextlib.contextmanager
def operation_context(name: str, session_id: str | None = None, correlation_id: str | None = None) -> Iterator[str]:
    """Scope a correlation id, and optionally a session id, around one operation."""

    session_token = SESSION_ID.set(session_id) if session_id else None
    try:
        with correlation_context(correlation_id) as scoped_id:
            logging.getLogger(__name__).debug("operation %s started", name)
            yield scoped_id
    finally:
        if session_token is not None:
            SESSION_ID.reset(session_token)


__all__ = [
    "CORRELATION_ID",
    "SESSION_ID",
    "JsonFormatter",
    "configure_logging",
    "correlation_context",
    "ensure_correlation_id",
    "get_logger",
    "log_event",
    "operation_context",
    "redact_for_log",
    "user_reference",
]
