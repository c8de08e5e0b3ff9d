"""JSON log formatter for vault client logs.

Example output:
    {
        "timestamp": "2026-10-17T10:30:00.000Z",
        "level": "DEBUG",
        "service": "vaultkit",
        "logger": "vaultkit.data_access.http_data_access",
        "trace_id": "4f1c...",
        "message": "Vault request completed",
        "context": {"method": "GET", "path": "v1/sys/seal-status", "status_code": 200}
    }

Context keys that look like credentials (tokens, passwords, the
``X-Vault-Token`` header) are masked before serialization.
"""

import json
import logging
import traceback
from datetime import UTC, datetime
from typing import Any

REDACTED = "***"

_SENSITIVE_KEYS = frozenset(
    {
        "token",
        "client_token",
        "password",
        "personal_access_token",
        "secret_id",
        "x-vault-token",
    }
)

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED_FIELDS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "trace_id",
        "context",
        "exc_info",
        "exc_text",
        "stack_info",
    }
)


def redact(context: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``context`` with credential-like values masked."""
    return {
        key: REDACTED if key.lower() in _SENSITIVE_KEYS else value
        for key, value in context.items()
    }


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON documents.

    Args:
        service_name: Value for the ``service`` field
        include_context: Whether to emit the ``context`` field
    """

    def __init__(
        self, service_name: str, include_context: bool = True, *args: Any, **kwargs: Any
    ) -> None:
        super().__init__(*args, **kwargs)
        self.service_name = service_name
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self._format_timestamp(record.created),
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "trace_id": getattr(record, "trace_id", None),
            "message": record.getMessage(),
        }

        if self.include_context:
            context = self._extract_context(record)
            if context:
                entry["context"] = redact(context)

        if record.exc_info:
            exc_type, exc_value, exc_tb = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc_value) if exc_value else None,
                "traceback": "".join(traceback.format_exception(exc_type, exc_value, exc_tb)),
            }

        return json.dumps(entry, default=str)

    def _format_timestamp(self, created: float) -> str:
        """ISO 8601 UTC with millisecond precision and a ``Z`` suffix."""
        dt = datetime.fromtimestamp(created, tz=UTC)
        return dt.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    def _extract_context(self, record: logging.LogRecord) -> dict[str, Any] | None:
        # Explicit ``extra={"context": {...}}`` wins over loose extra fields
        context = getattr(record, "context", None)
        if isinstance(context, dict):
            return dict(context)

        extra = {
            key: value for key, value in record.__dict__.items() if key not in _RESERVED_FIELDS
        }
        return extra or None
