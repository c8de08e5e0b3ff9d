"""Logging setup for applications embedding the vault client.

The library itself only calls ``logging.getLogger(__name__)``; applications
opt in to structured output by calling ``configure_logging()`` once at startup.

Example:
    >>> from vaultkit.common.logging import configure_logging
    >>> logger = configure_logging(service_name="secrets-sync", log_level="DEBUG")
"""

import logging
import sys

from vaultkit.common.logging.context import get_trace_id
from vaultkit.common.logging.formatter import JSONFormatter


class TraceIDFilter(logging.Filter):
    """Copy the current trace ID onto every record passing through the handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = get_trace_id()
        return True


def configure_logging(
    service_name: str = "vaultkit",
    log_level: str = "INFO",
    include_context: bool = True,
) -> logging.Logger:
    """Install a JSON stdout handler on the root logger.

    Existing root handlers are removed so repeated calls do not duplicate output.

    Args:
        service_name: Value for the ``service`` field of every record
        log_level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        include_context: Whether to emit ``extra`` fields under ``context``

    Returns:
        The configured root logger

    Raises:
        ValueError: If log_level is not a known level name
    """
    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {log_level}")

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(JSONFormatter(service_name=service_name, include_context=include_context))
    handler.addFilter(TraceIDFilter())
    root_logger.addHandler(handler)

    return root_logger


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name)
