"""
Vault Client Exception Hierarchy.

Exception hierarchy:
    VaultClientError (base)
    ├── VaultArgumentError - Required argument missing or malformed (caller error)
    ├── UnsupportedOperationError - HTTP verb or auth backend kind not supported
    ├── VaultApiError - Vault answered with a non-2xx status
    ├── VaultResponseParseError - 2xx response body could not be deserialized
    └── VaultAuthenticationError - Login exchange did not yield a client token

Connection-level failures (server unreachable, timeouts) are NOT wrapped: they
surface as the original ``httpx.TransportError`` so callers keep the full cause.

Messages MUST NOT include tokens, passwords or secret values. Only paths,
argument names and the raw response body returned by Vault are included.
"""


class VaultClientError(Exception):
    """Base exception for all vault client errors."""


class VaultArgumentError(VaultClientError, ValueError):
    """
    Raised when a required argument is missing or malformed.

    Raised before any network activity. ``argument`` names the offending
    parameter so callers can tell which input was rejected.

    Example:
        >>> raise VaultArgumentError("vault_address")
        VaultArgumentError: Argument 'vault_address' is required
    """

    def __init__(self, argument: str, reason: str | None = None) -> None:
        self.argument = argument
        message = f"Argument '{argument}' is required"
        if reason:
            message = f"Argument '{argument}' is invalid: {reason}"
        super().__init__(message)


class UnsupportedOperationError(VaultClientError, NotImplementedError):
    """Raised for an HTTP verb or authentication backend kind the client cannot handle."""


class VaultApiError(VaultClientError):
    """
    Raised when Vault responds with a non-success status code.

    The message follows ``"<code> <name>. <body>"`` so the raw Vault error
    payload (usually ``{"errors": [...]}``) is visible verbatim.

    Attributes:
        status_code: Numeric HTTP status code (e.g., 403)
        status_name: Symbolic status name (e.g., "Forbidden")
        body: Raw response body text as returned by Vault
    """

    def __init__(self, status_code: int, status_name: str, body: str) -> None:
        self.status_code = status_code
        self.status_name = status_name
        self.body = body
        super().__init__(f"{status_code} {status_name}. {body}")


class VaultResponseParseError(VaultClientError):
    """Raised when a successful response body cannot be deserialized into the expected type."""

    def __init__(self, message: str, body: str) -> None:
        self.body = body
        super().__init__(message)


class VaultAuthenticationError(VaultClientError):
    """Raised when a login exchange completes but carries no client token."""

    def __init__(self, backend_type: str, reason: str) -> None:
        self.backend_type = backend_type
        super().__init__(f"Authentication with '{backend_type}' backend failed: {reason}")
