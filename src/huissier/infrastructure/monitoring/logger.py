"""
Logging setup for the sign-in service.

Records are tagged with the service name and the current request id. Extra
fields that carry credentials are redacted by the formatter, so a careless
`extra={"token": ...}` cannot leak a session token into the log stream.
"""

import json
import logging
import sys
from contextvars import ContextVar, Token
from typing import Any, Dict, Optional
from uuid import uuid4

SERVICE_NAME = "huissier"

REDACTED = "[redacted]"

# Extra keys whose values are never written out
SENSITIVE_KEYS = frozenset(
    {
        "token",
        "access_token",
        "signature",
        "secret",
        "private_key",
        "service_role_key",
        "authorization",
    }
)

_request_id: ContextVar[Optional[str]] = ContextVar("huissier_request_id", default=None)

_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None)).keys()
) | {"message", "asctime", "taskName"}


def record_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Return the `extra=` fields of a record with credentials redacted."""
    fields = {}
    for key, value in vars(record).items():
        if key in _STANDARD_ATTRS or key.startswith("_"):
            continue
        fields[key] = REDACTED if key.lower() in SENSITIVE_KEYS else value
    return fields


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "service": SERVICE_NAME,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = _request_id.get()
        if request_id:
            entry["request_id"] = request_id

        entry.update(record_fields(record))

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable line with auth event fields appended as key=value."""

    def __init__(self):
        super().__init__(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = record_fields(record)
        fields.pop("event", None)
        if fields:
            line += " | " + " ".join(f"{k}={v}" for k, v in fields.items())
        return line


def setup_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure root logger.

    Args:
        level: Logging level name
        json_logs: JSON lines (production) or console format
    """
    numeric_level = getattr(logging, level.upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    if json_logs:
        handler.setFormatter(JSONFormatter(datefmt="%Y-%m-%dT%H:%M:%S"))
    else:
        handler.setFormatter(ConsoleFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for noisy in ("asyncio", "httpx", "httpcore", "sqlalchemy.engine"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def set_request_id(request_id: Optional[str] = None) -> Token:
    """
    Bind request id to the current context.

    Generates a UUID when none is given. Returns the context token so the
    caller can restore the previous value with `reset_request_id`.
    """
    return _request_id.set(request_id or str(uuid4()))


def reset_request_id(token: Token) -> None:
    _request_id.reset(token)


def get_request_id() -> Optional[str]:
    return _request_id.get()
