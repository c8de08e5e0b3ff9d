"""Structured JSON logging with trace ID propagation.

Usage:
    from vaultkit.common.logging import configure_logging, LogContext

    configure_logging(service_name="secrets-sync", log_level="DEBUG")
    with LogContext():
        await client.read_secret("secret/app/db")  # request carries X-Trace-ID
"""

from vaultkit.common.logging.config import TraceIDFilter, configure_logging, get_logger
from vaultkit.common.logging.context import (
    TRACE_ID_HEADER,
    LogContext,
    clear_trace_id,
    generate_trace_id,
    get_trace_id,
    set_trace_id,
)
from vaultkit.common.logging.formatter import JSONFormatter, redact
from vaultkit.common.logging.http_client import TracedAsyncClient

__all__ = [
    # Configuration
    "configure_logging",
    "get_logger",
    "TraceIDFilter",
    # Trace ID management
    "TRACE_ID_HEADER",
    "LogContext",
    "clear_trace_id",
    "generate_trace_id",
    "get_trace_id",
    "set_trace_id",
    # Formatting
    "JSONFormatter",
    "redact",
    # HTTP
    "TracedAsyncClient",
]
