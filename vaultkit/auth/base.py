"""
Abstract authentication provider interface.

Architecture:
    AuthenticationProvider (ABC)
    ├── LoginAuthenticationProvider - logs in through an owned HttpDataAccessManager
    │   ├── AppIdAuthenticationProvider
    │   ├── GitHubAuthenticationProvider
    │   ├── LDAPAuthenticationProvider
    │   ├── CertificateAuthenticationProvider
    │   └── UsernamePasswordAuthenticationProvider
    ├── TokenAuthenticationProvider - literal token, no transport
    └── CustomAuthenticationProvider - caller-supplied async token factory

Providers are built once per VaultClient by ``create_authentication_provider``
and owned by it for its whole lifetime.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from types import TracebackType

from vaultkit.auth.models import AuthResponse
from vaultkit.data_access.http_data_access import HttpDataAccessManager
from vaultkit.exceptions import VaultAuthenticationError

logger = logging.getLogger(__name__)


class AuthenticationProvider(ABC):
    """Produces a Vault client token usable as the ``X-Vault-Token`` header."""

    backend_type: str

    @abstractmethod
    async def get_token(self) -> str:
        """Return the current client token, logging in first if needed."""

    async def refresh_token(self) -> str:
        """Obtain a fresh token. Providers with a fixed token return it unchanged."""
        return await self.get_token()

    async def aclose(self) -> None:
        """Release transport resources held by the provider."""

    async def __aenter__(self) -> "AuthenticationProvider":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()


class LoginAuthenticationProvider(AuthenticationProvider):
    """
    Base for providers that exchange credentials for a token over HTTP.

    The first ``get_token()`` performs the login and caches the token;
    ``refresh_token()`` always logs in again. Logins are serialized with an
    ``asyncio.Lock`` so concurrent callers trigger a single exchange.

    Subclasses provide ``_login_path()`` and ``_login_payload()``.
    """

    def __init__(self, data_access_manager: HttpDataAccessManager, mount_point: str) -> None:
        self._data_access_manager = data_access_manager
        self._mount_point = mount_point.strip("/")
        self._token: str | None = None
        self._lock = asyncio.Lock()

    @property
    def data_access_manager(self) -> HttpDataAccessManager:
        return self._data_access_manager

    @abstractmethod
    def _login_path(self) -> str:
        """Path of the login endpoint, relative to the Vault address."""

    def _login_payload(self) -> dict[str, str] | None:
        return None

    async def get_token(self) -> str:
        if self._token is not None:
            return self._token
        async with self._lock:
            if self._token is None:
                self._token = await self._login()
            return self._token

    async def refresh_token(self) -> str:
        async with self._lock:
            self._token = await self._login()
            return self._token

    async def _login(self) -> str:
        response: AuthResponse | None = await self._data_access_manager.make_request(
            self._login_path(),
            "POST",
            payload=self._login_payload(),
            response_type=AuthResponse,
        )

        if response is None or response.auth is None or not response.auth.client_token:
            raise VaultAuthenticationError(self.backend_type, "login response has no client token")

        logger.info(
            "Authenticated with Vault",
            extra={
                "backend_type": self.backend_type,
                "mount_point": self._mount_point,
                "lease_duration": response.auth.lease_duration,
                "renewable": response.auth.renewable,
            },
        )
        return response.auth.client_token

    async def aclose(self) -> None:
        await self._data_access_manager.aclose()
