"""
Generic request/response engine for the Vault HTTP API.

Every call the library makes (logins and resource methods alike) goes through
``HttpDataAccessManager.make_request``:

    1. Validate path and verb (unsupported verbs never reach the network)
    2. Serialize the payload to UTF-8 JSON (POST/PUT only)
    3. Apply header overrides to the shared ``httpx.AsyncClient``
    4. Send the request and read the body as text
    5. 2xx: return ``None`` for a blank body, the text itself for raw
       responses, otherwise the body validated into ``response_type``
    6. non-2xx: hand ``(status_code, body)`` to the caller's custom processor,
       or raise ``VaultApiError("<code> <name>. <body>")``

Connection-level failures (``httpx.TransportError``) propagate unchanged.
There is no retry: one attempt per call.

Header state:
    By default header overrides are written onto the shared client and stay
    set for every later call through the same manager, until overwritten.
    Concurrent callers setting different overrides race on that state.
    ``TransportConfiguration(persist_header_overrides=False)`` sends overrides
    with the single request instead.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from functools import lru_cache
from types import TracebackType
from typing import Any, Final

import httpx
from pydantic import TypeAdapter, ValidationError
from pydantic_core import to_json

from vaultkit.common.logging.http_client import TracedAsyncClient
from vaultkit.exceptions import (
    UnsupportedOperationError,
    VaultApiError,
    VaultArgumentError,
    VaultResponseParseError,
)

logger = logging.getLogger(__name__)

SUPPORTED_METHODS: Final[frozenset[str]] = frozenset({"GET", "DELETE", "POST", "PUT", "HEAD"})

# Only these verbs ever carry a request body
_BODY_METHODS: Final[frozenset[str]] = frozenset({"POST", "PUT"})

CustomProcessor = Callable[[int, str], Any]


@dataclass(frozen=True)
class TransportConfiguration:
    """
    Connection settings for one ``HttpDataAccessManager``.

    Attributes:
        base_address: Vault server URL (e.g., "https://vault.company.com:8200")
        timeout: Request timeout in seconds. None keeps the httpx default.
        transport: Custom transport, e.g. one presenting a client certificate
        post_client_initialize: Called once with the freshly built client
            (event hooks, default headers, ...)
        persist_header_overrides: Keep per-call header overrides on the shared
            client (default) or scope them to the single request
    """

    base_address: str | httpx.URL
    timeout: float | None = None
    transport: httpx.AsyncBaseTransport | None = None
    post_client_initialize: Callable[[httpx.AsyncClient], None] | None = None
    persist_header_overrides: bool = True


@dataclass(frozen=True)
class RequestDescriptor:
    """Description of a single Vault API call, consumed by ``HttpDataAccessManager.execute``."""

    path: str
    method: str
    payload: Any = None
    headers: Mapping[str, str] | None = None
    raw_response: bool = False
    custom_processor: CustomProcessor | None = None
    response_type: Any = Any


@lru_cache(maxsize=256)
def _adapter_for(response_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(response_type)


def serialize_payload(payload: Any) -> bytes:
    """Encode a payload (dict, list, pydantic model, dataclass) as UTF-8 JSON.

    Pydantic models are dumped by alias so wire names stay exactly as Vault
    expects them.
    """
    return to_json(payload, by_alias=True)


class HttpDataAccessManager:
    """
    Executes Vault API calls over a single reused ``httpx.AsyncClient``.

    One instance is owned by each authentication provider (for logins) and by
    ``VaultClient`` (for resource calls); instances are never shared.

    Example:
        >>> manager = HttpDataAccessManager(TransportConfiguration("http://127.0.0.1:8200"))
        >>> status = await manager.make_request("v1/sys/seal-status", "GET", response_type=SealStatus)
        >>> await manager.aclose()
    """

    def __init__(self, configuration: TransportConfiguration) -> None:
        if configuration is None:
            raise VaultArgumentError("configuration")
        if not configuration.base_address:
            raise VaultArgumentError("base_address")

        self._configuration = configuration

        client_kwargs: dict[str, Any] = {"base_url": configuration.base_address}
        if configuration.timeout is not None:
            client_kwargs["timeout"] = configuration.timeout
        if configuration.transport is not None:
            client_kwargs["transport"] = configuration.transport

        self._client: httpx.AsyncClient = TracedAsyncClient(**client_kwargs)

        if configuration.post_client_initialize is not None:
            configuration.post_client_initialize(self._client)

    @property
    def base_address(self) -> httpx.URL:
        return self._client.base_url

    @property
    def headers(self) -> httpx.Headers:
        """Headers currently set on the shared client (including persisted overrides)."""
        return self._client.headers

    @property
    def transport(self) -> httpx.AsyncBaseTransport | None:
        """The custom transport this manager was configured with, if any."""
        return self._configuration.transport

    async def execute(self, request: RequestDescriptor) -> Any:
        """Run ``request`` (see ``make_request`` for semantics)."""
        return await self.make_request(
            request.path,
            request.method,
            payload=request.payload,
            headers=request.headers,
            raw_response=request.raw_response,
            custom_processor=request.custom_processor,
            response_type=request.response_type,
        )

    async def make_request(
        self,
        path: str,
        method: str,
        payload: Any = None,
        headers: Mapping[str, str] | None = None,
        raw_response: bool = False,
        custom_processor: CustomProcessor | None = None,
        response_type: Any = Any,
    ) -> Any:
        """
        Perform one HTTP exchange against Vault.

        Args:
            path: Resource path relative to the base address (e.g., "v1/sys/seal-status")
            method: One of GET, DELETE, POST, PUT, HEAD (case-insensitive)
            payload: Request body, serialized to JSON. Ignored for GET/DELETE/HEAD.
            headers: Header overrides. Replace any existing header of the same name.
            raw_response: Return the body text as-is instead of deserializing it
            custom_processor: ``(status_code, body) -> result`` used instead of
                raising on non-2xx responses
            response_type: Type the JSON body is validated into (pydantic
                ``TypeAdapter``). Must be ``str`` when raw_response is set.

        Returns:
            The deserialized body, the raw text, the custom processor's result,
            or None when a 2xx body is empty or whitespace.

        Raises:
            VaultArgumentError: Empty path, or raw_response with a non-str response_type
            UnsupportedOperationError: Verb not supported (no request is sent)
            VaultApiError: Non-2xx status and no custom processor
            VaultResponseParseError: 2xx body does not match response_type
            httpx.TransportError: Vault unreachable or timed out
        """
        if not path:
            raise VaultArgumentError("path")
        if method is None:
            raise VaultArgumentError("method")

        verb = str(method).upper()
        if verb not in SUPPORTED_METHODS:
            raise UnsupportedOperationError(f"The HTTP method is not supported: {method}")

        if raw_response and response_type not in (str, Any):
            raise VaultArgumentError("response_type", "raw responses can only be returned as str")

        content = serialize_payload(payload) if payload is not None and verb in _BODY_METHODS else None

        request_headers: dict[str, str] | None = None
        if headers:
            if self._configuration.persist_header_overrides:
                self._apply_header_overrides(headers)
            else:
                request_headers = dict(headers)
        if content is not None:
            request_headers = {**(request_headers or {}), "Content-Type": "application/json"}

        try:
            response = await self._client.request(
                verb, path, content=content, headers=request_headers
            )
            response_text = response.text

            logger.debug(
                "Vault request completed",
                extra={"method": verb, "path": path, "status_code": response.status_code},
            )

            if response.is_success:
                return self._read_success(response_text, raw_response, response_type)

            return self._handle_failure(response, response_text, custom_processor)

        except httpx.HTTPStatusError as exc:
            # Raised below the engine (e.g. a response event hook) but still
            # carrying the server's answer: recover it like a plain non-2xx.
            response_text = await self._read_error_body(exc.response)
            if response_text is None:
                raise

            logger.debug(
                "Vault protocol error carries a response",
                extra={"method": verb, "path": path, "status_code": exc.response.status_code},
            )

            try:
                return self._handle_failure(exc.response, response_text, custom_processor)
            except VaultApiError as api_error:
                raise api_error from exc

    def _apply_header_overrides(self, headers: Mapping[str, str]) -> None:
        for name, value in headers.items():
            self._client.headers.pop(name, None)
            self._client.headers[name] = value

    def _read_success(self, response_text: str, raw_response: bool, response_type: Any) -> Any:
        if not response_text.strip():
            return None

        if raw_response:
            return response_text

        try:
            return _adapter_for(response_type).validate_json(response_text)
        except ValidationError as exc:
            raise VaultResponseParseError(
                f"Could not deserialize Vault response into {response_type!r}: {exc}",
                body=response_text,
            ) from exc

    def _handle_failure(
        self,
        response: httpx.Response,
        response_text: str,
        custom_processor: CustomProcessor | None,
    ) -> Any:
        status_code = response.status_code

        if custom_processor is not None:
            return custom_processor(status_code, response_text)

        status_name = response.reason_phrase or httpx.codes.get_reason_phrase(status_code)
        logger.warning(
            "Vault request failed",
            extra={
                "path": response.request.url.path,
                "status_code": status_code,
                "status_name": status_name,
            },
        )
        raise VaultApiError(status_code, status_name, response_text)

    async def _read_error_body(self, response: httpx.Response) -> str | None:
        try:
            await response.aread()
        except httpx.StreamError:
            return None
        return response.text

    async def aclose(self) -> None:
        """Close the underlying HTTP client and its connection pool."""
        await self._client.aclose()

    async def __aenter__(self) -> "HttpDataAccessManager":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()
