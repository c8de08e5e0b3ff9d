"""Concrete authentication providers, one per ``AuthenticationBackendType``."""

import asyncio
from urllib.parse import quote

from vaultkit.auth.base import AuthenticationProvider, LoginAuthenticationProvider
from vaultkit.auth.models import (
    AppIdAuthenticationInfo,
    AuthenticationBackendType,
    CertificateAuthenticationInfo,
    CustomAuthenticationInfo,
    GitHubAuthenticationInfo,
    LDAPAuthenticationInfo,
    TokenAuthenticationInfo,
    UsernamePasswordAuthenticationInfo,
)
from vaultkit.data_access.http_data_access import HttpDataAccessManager
from vaultkit.exceptions import VaultArgumentError, VaultAuthenticationError


class AppIdAuthenticationProvider(LoginAuthenticationProvider):
    backend_type = AuthenticationBackendType.APP_ID

    def __init__(
        self, info: AppIdAuthenticationInfo, data_access_manager: HttpDataAccessManager
    ) -> None:
        super().__init__(data_access_manager, info.mount_point)
        self._info = info

    def _login_path(self) -> str:
        return f"v1/auth/{self._mount_point}/login"

    def _login_payload(self) -> dict[str, str]:
        return {"app_id": self._info.app_id, "user_id": self._info.user_id}


class GitHubAuthenticationProvider(LoginAuthenticationProvider):
    backend_type = AuthenticationBackendType.GITHUB

    def __init__(
        self, info: GitHubAuthenticationInfo, data_access_manager: HttpDataAccessManager
    ) -> None:
        super().__init__(data_access_manager, info.mount_point)
        self._info = info

    def _login_path(self) -> str:
        return f"v1/auth/{self._mount_point}/login"

    def _login_payload(self) -> dict[str, str]:
        return {"token": self._info.personal_access_token.get_secret_value()}


class LDAPAuthenticationProvider(LoginAuthenticationProvider):
    backend_type = AuthenticationBackendType.LDAP

    def __init__(
        self, info: LDAPAuthenticationInfo, data_access_manager: HttpDataAccessManager
    ) -> None:
        super().__init__(data_access_manager, info.mount_point)
        self._info = info

    def _login_path(self) -> str:
        return f"v1/auth/{self._mount_point}/login/{quote(self._info.username, safe='')}"

    def _login_payload(self) -> dict[str, str]:
        return {"password": self._info.password.get_secret_value()}


class CertificateAuthenticationProvider(LoginAuthenticationProvider):
    """Logs in with the client certificate presented by the manager's transport."""

    backend_type = AuthenticationBackendType.CERTIFICATE

    def __init__(
        self, info: CertificateAuthenticationInfo, data_access_manager: HttpDataAccessManager
    ) -> None:
        super().__init__(data_access_manager, info.mount_point)
        self._info = info

    def _login_path(self) -> str:
        return f"v1/auth/{self._mount_point}/login"


class UsernamePasswordAuthenticationProvider(LoginAuthenticationProvider):
    backend_type = AuthenticationBackendType.USERNAME_PASSWORD

    def __init__(
        self,
        info: UsernamePasswordAuthenticationInfo,
        data_access_manager: HttpDataAccessManager,
    ) -> None:
        super().__init__(data_access_manager, info.mount_point)
        self._info = info

    def _login_path(self) -> str:
        return f"v1/auth/{self._mount_point}/login/{quote(self._info.username, safe='')}"

    def _login_payload(self) -> dict[str, str]:
        return {"password": self._info.password.get_secret_value()}


class TokenAuthenticationProvider(AuthenticationProvider):
    """Hands out a token the caller already holds."""

    backend_type = AuthenticationBackendType.TOKEN

    def __init__(self, info: TokenAuthenticationInfo) -> None:
        token = info.token.get_secret_value()
        if not token:
            raise VaultArgumentError("token")
        self._token = token

    async def get_token(self) -> str:
        return self._token


class CustomAuthenticationProvider(AuthenticationProvider):
    """Delegates token acquisition to ``CustomAuthenticationInfo.token_factory``.

    The factory is awaited under a lock, so concurrent callers share one call.
    """

    backend_type = AuthenticationBackendType.CUSTOM

    def __init__(self, info: CustomAuthenticationInfo) -> None:
        self._info = info
        self._token: str | None = None
        self._lock = asyncio.Lock()

    async def get_token(self) -> str:
        if self._token is not None:
            return self._token
        async with self._lock:
            if self._token is None:
                self._token = await self._obtain()
            return self._token

    async def refresh_token(self) -> str:
        async with self._lock:
            self._token = await self._obtain()
            return self._token

    async def _obtain(self) -> str:
        token = await self._info.token_factory()
        if not token:
            raise VaultAuthenticationError(self.backend_type, "token factory returned no token")
        return token
