"""
Tests for vaultkit/auth/providers.py and vaultkit/auth/base.py.

Test Coverage:
    - Login endpoint path and body per backend kind
    - Token caching, refresh, and single login under concurrency
    - Login responses without a client token
    - Token and Custom providers
"""

import asyncio
import json

import httpx
import pytest
import respx

from vaultkit.auth.models import (
    AppIdAuthenticationInfo,
    CertificateAuthenticationInfo,
    CustomAuthenticationInfo,
    GitHubAuthenticationInfo,
    LDAPAuthenticationInfo,
    TokenAuthenticationInfo,
    UsernamePasswordAuthenticationInfo,
)
from vaultkit.auth.providers import (
    AppIdAuthenticationProvider,
    CertificateAuthenticationProvider,
    CustomAuthenticationProvider,
    GitHubAuthenticationProvider,
    LDAPAuthenticationProvider,
    TokenAuthenticationProvider,
    UsernamePasswordAuthenticationProvider,
)
from vaultkit.data_access.http_data_access import HttpDataAccessManager, TransportConfiguration
from vaultkit.exceptions import VaultApiError, VaultArgumentError, VaultAuthenticationError

BASE = "http://vault.test:8200"


def _login_response(token: str = "hvs.login") -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "request_id": "req-1",
            "auth": {
                "client_token": token,
                "accessor": "acc",
                "policies": ["default"],
                "lease_duration": 3600,
                "renewable": True,
            },
        },
    )


def _manager() -> HttpDataAccessManager:
    return HttpDataAccessManager(TransportConfiguration(base_address=BASE))


class TestLoginEndpoints:
    """Each login provider posts to its backend's login endpoint."""

    @pytest.mark.unit()
    @pytest.mark.asyncio()
    @respx.mock
    async def test_app_id_login(self) -> None:
        route = respx.post(f"{BASE}/v1/auth/app-id/login").mock(return_value=_login_response())
        provider = AppIdAuthenticationProvider(
            AppIdAuthenticationInfo(app_id="billing", user_id="host-7"), _manager()
        )

        async with provider:
            assert await provider.get_token() == "hvs.login"

        assert json.loads(route.calls.last.request.content) == {
            "app_id": "billing",
            "user_id": "host-7",
        }

    @pytest.mark.unit()
    @pytest.mark.asyncio()
    @respx.mock
    async def test_github_login_on_custom_mount(self) -> None:
        route = respx.post(f"{BASE}/v1/auth/gh-corp/login").mock(return_value=_login_response())
        provider = GitHubAuthenticationProvider(
            GitHubAuthenticationInfo(mount_point="/gh-corp/", personal_access_token="ghp_abc"),
            _manager(),
        )

        async with provider:
            await provider.get_token()

        assert json.loads(route.calls.last.request.content) == {"token": "ghp_abc"}

    @pytest.mark.unit()
    @pytest.mark.asyncio()
    @respx.mock
    async def test_ldap_login_puts_username_in_path(self) -> None:
        route = respx.post(f"{BASE}/v1/auth/ldap/login/alice").mock(
            return_value=_login_response()
        )
        provider = LDAPAuthenticationProvider(
            LDAPAuthenticationInfo(username="alice", password="ldap-pw"), _manager()
        )

        async with provider:
            await provider.get_token()

        assert json.loads(route.calls.last.request.content) == {"password": "ldap-pw"}

    @pytest.mark.unit()
    @pytest.mark.asyncio()
    @respx.mock
    async def test_userpass_login_escapes_username(self) -> None:
        route = respx.post(f"{BASE}/v1/auth/userpass/login/ci%2Fbot").mock(
            return_value=_login_response()
        )
        provider = UsernamePasswordAuthenticationProvider(
            UsernamePasswordAuthenticationInfo(username="ci/bot", password="pw"), _manager()
        )

        async with provider:
            await provider.get_token()

        assert route.call_count == 1
        assert json.loads(route.calls.last.request.content) == {"password": "pw"}

    @pytest.mark.unit()
    @pytest.mark.asyncio()
    @respx.mock
    async def test_certificate_login_has_no_body(self) -> None:
        route = respx.post(f"{BASE}/v1/auth/cert/login").mock(return_value=_login_response())
        provider = CertificateAuthenticationProvider(CertificateAuthenticationInfo(), _manager())

        async with provider:
            assert await provider.get_token() == "hvs.login"

        assert route.calls.last.request.content == b""


class TestTokenLifecycle:
    @pytest.mark.unit()
    @pytest.mark.asyncio()
    @respx.mock
    async def test_token_cached_after_first_login(self) -> None:
        route = respx.post(f"{BASE}/v1/auth/userpass/login/ci").mock(
            return_value=_login_response()
        )
        provider = UsernamePasswordAuthenticationProvider(
            UsernamePasswordAuthenticationInfo(username="ci", password="pw"), _manager()
        )

        async with provider:
            first = await provider.get_token()
            second = await provider.get_token()

        assert first == second == "hvs.login"
        assert route.call_count == 1

    @pytest.mark.unit()
    @pytest.mark.asyncio()
    @respx.mock
    async def test_refresh_logs_in_again(self) -> None:
        route = respx.post(f"{BASE}/v1/auth/userpass/login/ci").mock(
            side_effect=[_login_response("hvs.first"), _login_response("hvs.second")]
        )
        provider = UsernamePasswordAuthenticationProvider(
            UsernamePasswordAuthenticationInfo(username="ci", password="pw"), _manager()
        )

        async with provider:
            assert await provider.get_token() == "hvs.first"
            assert await provider.refresh_token() == "hvs.second"
            assert await provider.get_token() == "hvs.second"

        assert route.call_count == 2

    @pytest.mark.unit()
    @pytest.mark.asyncio()
    @respx.mock
    async def test_concurrent_callers_share_one_login(self) -> None:
        route = respx.post(f"{BASE}/v1/auth/ldap/login/alice").mock(
            return_value=_login_response()
        )
        provider = LDAPAuthenticationProvider(
            LDAPAuthenticationInfo(username="alice", password="pw"), _manager()
        )

        async with provider:
            tokens = await asyncio.gather(*(provider.get_token() for _ in range(5)))

        assert tokens == ["hvs.login"] * 5
        assert route.call_count == 1

    @pytest.mark.unit()
    @pytest.mark.asyncio()
    @pytest.mark.parametrize(
        "body",
        [
            {"request_id": "req-1"},
            {"auth": None},
            {"auth": {"client_token": ""}},
        ],
    )
    @respx.mock
    async def test_login_without_client_token_fails(self, body: dict[str, object]) -> None:
        respx.post(f"{BASE}/v1/auth/cert/login").mock(return_value=httpx.Response(200, json=body))
        provider = CertificateAuthenticationProvider(CertificateAuthenticationInfo(), _manager())

        async with provider:
            with pytest.raises(VaultAuthenticationError, match="certificate"):
                await provider.get_token()

    @pytest.mark.unit()
    @pytest.mark.asyncio()
    @respx.mock
    async def test_rejected_login_raises_api_error(self) -> None:
        respx.post(f"{BASE}/v1/auth/userpass/login/ci").mock(
            return_value=httpx.Response(400, text='{"errors":["invalid username or password"]}')
        )
        provider = UsernamePasswordAuthenticationProvider(
            UsernamePasswordAuthenticationInfo(username="ci", password="wrong"), _manager()
        )

        async with provider:
            with pytest.raises(VaultApiError) as exc_info:
                await provider.get_token()

        assert exc_info.value.status_code == 400
        assert "wrong" not in str(exc_info.value)


class TestTransportlessProviders:
    @pytest.mark.unit()
    @pytest.mark.asyncio()
    async def test_token_provider_returns_literal_token(self) -> None:
        provider = TokenAuthenticationProvider(TokenAuthenticationInfo(token="hvs.static"))

        assert await provider.get_token() == "hvs.static"
        assert await provider.refresh_token() == "hvs.static"

    @pytest.mark.unit()
    def test_token_provider_rejects_empty_token(self) -> None:
        with pytest.raises(VaultArgumentError) as exc_info:
            TokenAuthenticationProvider(TokenAuthenticationInfo(token=""))

        assert exc_info.value.argument == "token"

    @pytest.mark.unit()
    @pytest.mark.asyncio()
    async def test_custom_provider_caches_until_refresh(self) -> None:
        issued = iter(["hvs.one", "hvs.two"])
        calls: list[int] = []

        async def factory() -> str:
            calls.append(1)
            return next(issued)

        provider = CustomAuthenticationProvider(CustomAuthenticationInfo(token_factory=factory))

        assert await provider.get_token() == "hvs.one"
        assert await provider.get_token() == "hvs.one"
        assert await provider.refresh_token() == "hvs.two"
        assert len(calls) == 2

    @pytest.mark.unit()
    @pytest.mark.asyncio()
    async def test_custom_provider_concurrent_callers_share_one_factory_call(self) -> None:
        calls: list[int] = []

        async def factory() -> str:
            calls.append(1)
            await asyncio.sleep(0.01)
            return "hvs.shared"

        provider = CustomAuthenticationProvider(CustomAuthenticationInfo(token_factory=factory))

        tokens = await asyncio.gather(*(provider.get_token() for _ in range(5)))

        assert tokens == ["hvs.shared"] * 5
        assert len(calls) == 1

    @pytest.mark.unit()
    @pytest.mark.asyncio()
    async def test_custom_provider_rejects_empty_token(self) -> None:
        async def factory() -> str:
            return ""

        provider = CustomAuthenticationProvider(CustomAuthenticationInfo(token_factory=factory))

        with pytest.raises(VaultAuthenticationError, match="custom"):
            await provider.get_token()
