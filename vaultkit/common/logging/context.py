"""Trace ID context for correlating client logs with Vault requests.

The current trace ID lives in a ``ContextVar`` so concurrent asyncio tasks
each see their own value. The Transport Engine stamps it on outgoing requests
under ``TRACE_ID_HEADER`` and the logging filter copies it onto every record.

Example:
    >>> from vaultkit.common.logging.context import LogContext, get_trace_id
    >>> with LogContext("req-42"):
    ...     get_trace_id()
    'req-42'
"""

import contextvars
import uuid
from types import TracebackType

_trace_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "vault_trace_id", default=None
)

TRACE_ID_HEADER = "X-Trace-ID"


def generate_trace_id() -> str:
    """Return a new UUID4 trace ID."""
    return str(uuid.uuid4())


def get_trace_id() -> str | None:
    """Return the trace ID bound to the current context, if any."""
    return _trace_id_var.get()


def set_trace_id(trace_id: str) -> None:
    """Bind ``trace_id`` to the current context.

    Raises:
        ValueError: If trace_id is empty
    """
    if not trace_id:
        raise ValueError("Trace ID cannot be empty")
    _trace_id_var.set(trace_id)


def clear_trace_id() -> None:
    _trace_id_var.set(None)


class LogContext:
    """Scope a trace ID to a block and restore the previous one on exit.

    Args:
        trace_id: Trace ID for the block. A new one is generated when omitted.
    """

    def __init__(self, trace_id: str | None = None) -> None:
        self.trace_id = trace_id or generate_trace_id()
        self._token: contextvars.Token[str | None] | None = None

    def __enter__(self) -> str:
        self._token = _trace_id_var.set(self.trace_id)
        return self.trace_id

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._token is not None:
            _trace_id_var.reset(self._token)
            self._token = None
