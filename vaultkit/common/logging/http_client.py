"""httpx client that propagates the current trace ID to Vault.

Every request sent through ``TracedAsyncClient`` carries the trace ID bound by
``LogContext``/``set_trace_id`` under ``X-Trace-ID``, so Vault audit logs can be
joined with client logs. Requests made outside any trace context are unchanged.
"""

from typing import Any

import httpx

from vaultkit.common.logging.context import TRACE_ID_HEADER, get_trace_id


class TracedAsyncClient(httpx.AsyncClient):
    """``httpx.AsyncClient`` that stamps ``X-Trace-ID`` on outgoing requests."""

    async def request(
        self,
        method: str,
        url: httpx.URL | str,
        **kwargs: Any,
    ) -> httpx.Response:
        trace_id = get_trace_id()
        if trace_id:
            headers = dict(kwargs.get("headers") or {})
            headers[TRACE_ID_HEADER] = trace_id
            kwargs["headers"] = headers

        return await super().request(method, url, **kwargs)
