"""
Tests for vaultkit/auth/factory.py - authentication provider selection.

Test Coverage:
    - Each descriptor kind maps to its provider
    - Login providers get their own engine bound to the Vault address
    - Token and Custom providers get no transport
    - Certificate descriptors: transport presenting the certificate, or
      rejection before anything is built
    - Missing descriptor / address and unknown kinds
"""

from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import httpx
import pytest

from vaultkit.auth.base import LoginAuthenticationProvider
from vaultkit.auth.factory import build_client_certificate_transport, create_authentication_provider
from vaultkit.auth.models import (
    AppIdAuthenticationInfo,
    CertificateAuthenticationInfo,
    ClientCertificate,
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
from vaultkit.exceptions import UnsupportedOperationError, VaultArgumentError

BASE = "http://vault.test:8200"


async def _token_factory() -> str:
    return "hvs.custom"


class TestProviderSelection:
    """Descriptor kind → provider."""

    @pytest.mark.unit()
    @pytest.mark.asyncio()
    @pytest.mark.parametrize(
        ("info", "provider_type"),
        [
            (AppIdAuthenticationInfo(app_id="app", user_id="user"), AppIdAuthenticationProvider),
            (GitHubAuthenticationInfo(personal_access_token="ghp_x"), GitHubAuthenticationProvider),
            (LDAPAuthenticationInfo(username="alice", password="pw"), LDAPAuthenticationProvider),
            (
                UsernamePasswordAuthenticationInfo(username="ci", password="pw"),
                UsernamePasswordAuthenticationProvider,
            ),
        ],
    )
    async def test_login_kinds_get_engine_bound_to_address(
        self, info: object, provider_type: type[LoginAuthenticationProvider]
    ) -> None:
        provider = create_authentication_provider(info, BASE)  # type: ignore[arg-type]

        try:
            assert isinstance(provider, provider_type)
            base_address = provider.data_access_manager.base_address
            assert (base_address.scheme, base_address.host, base_address.port) == (
                "http",
                "vault.test",
                8200,
            )
            assert provider.data_access_manager.transport is None
        finally:
            await provider.aclose()

    @pytest.mark.unit()
    @pytest.mark.asyncio()
    async def test_token_kind_needs_no_transport(self) -> None:
        with patch("vaultkit.auth.factory.HttpDataAccessManager") as manager_cls:
            provider = create_authentication_provider(TokenAuthenticationInfo(token="hvs.t"), BASE)

        assert isinstance(provider, TokenAuthenticationProvider)
        assert await provider.get_token() == "hvs.t"
        manager_cls.assert_not_called()

    @pytest.mark.unit()
    @pytest.mark.asyncio()
    async def test_custom_kind_needs_no_transport(self) -> None:
        with patch("vaultkit.auth.factory.HttpDataAccessManager") as manager_cls:
            provider = create_authentication_provider(
                CustomAuthenticationInfo(token_factory=_token_factory), BASE
            )

        assert isinstance(provider, CustomAuthenticationProvider)
        assert await provider.get_token() == "hvs.custom"
        manager_cls.assert_not_called()

    @pytest.mark.unit()
    @pytest.mark.asyncio()
    async def test_timeout_reaches_login_engine(self) -> None:
        provider = create_authentication_provider(
            UsernamePasswordAuthenticationInfo(username="ci", password="pw"), BASE, timeout=4.0
        )

        try:
            assert provider.data_access_manager._client.timeout == httpx.Timeout(4.0)  # type: ignore[attr-defined]
        finally:
            await provider.aclose()


class TestCertificateSelection:
    @pytest.mark.unit()
    @pytest.mark.asyncio()
    async def test_certificate_transport_installed(self) -> None:
        transport = httpx.AsyncHTTPTransport()
        info = CertificateAuthenticationInfo(
            client_certificate=ClientCertificate(cert_file=Path("/etc/vault/client.pem"))
        )

        with patch(
            "vaultkit.auth.factory.build_client_certificate_transport", return_value=transport
        ) as build:
            provider = create_authentication_provider(info, BASE)

        try:
            assert isinstance(provider, CertificateAuthenticationProvider)
            assert provider.data_access_manager.transport is transport
            build.assert_called_once_with(info.client_certificate)
        finally:
            await provider.aclose()

    @pytest.mark.unit()
    def test_missing_certificate_rejected_before_construction(self) -> None:
        with (
            patch("vaultkit.auth.factory.build_client_certificate_transport") as build,
            patch("vaultkit.auth.factory.HttpDataAccessManager") as manager_cls,
            pytest.raises(VaultArgumentError) as exc_info,
        ):
            create_authentication_provider(CertificateAuthenticationInfo(), BASE)

        assert exc_info.value.argument == "authentication_info.client_certificate"
        build.assert_not_called()
        manager_cls.assert_not_called()

    @pytest.mark.unit()
    def test_transport_presents_certificate(self) -> None:
        certificate = ClientCertificate(
            cert_file=Path("/etc/vault/client.pem"),
            key_file=Path("/etc/vault/client.key"),
            password="key-pass",
        )
        ssl_context = MagicMock()

        with (
            patch("vaultkit.auth.factory.ssl.create_default_context", return_value=ssl_context),
            patch("vaultkit.auth.factory.httpx.AsyncHTTPTransport") as transport_cls,
        ):
            transport = build_client_certificate_transport(certificate)

        ssl_context.load_cert_chain.assert_called_once_with(
            certfile=Path("/etc/vault/client.pem"),
            keyfile=Path("/etc/vault/client.key"),
            password="key-pass",
        )
        transport_cls.assert_called_once_with(verify=ssl_context)
        assert transport is transport_cls.return_value

    @pytest.mark.unit()
    def test_transport_without_key_password(self) -> None:
        ssl_context = MagicMock()

        with (
            patch("vaultkit.auth.factory.ssl.create_default_context", return_value=ssl_context),
            patch("vaultkit.auth.factory.httpx.AsyncHTTPTransport"),
        ):
            build_client_certificate_transport(ClientCertificate(cert_file=Path("bundle.pem")))

        ssl_context.load_cert_chain.assert_called_once_with(
            certfile=Path("bundle.pem"), keyfile=None, password=None
        )


class TestSelectionErrors:
    @pytest.mark.unit()
    def test_missing_descriptor(self) -> None:
        with pytest.raises(VaultArgumentError) as exc_info:
            create_authentication_provider(None, BASE)  # type: ignore[arg-type]

        assert exc_info.value.argument == "authentication_info"

    @pytest.mark.unit()
    @pytest.mark.parametrize("address", ["", None])
    def test_missing_base_address(self, address: str | None) -> None:
        with pytest.raises(VaultArgumentError) as exc_info:
            create_authentication_provider(
                TokenAuthenticationInfo(token="hvs.t"), address  # type: ignore[arg-type]
            )

        assert exc_info.value.argument == "base_address"

    @pytest.mark.unit()
    def test_unknown_kind_not_supported(self) -> None:
        with pytest.raises(UnsupportedOperationError, match="kerberos"):
            create_authentication_provider(
                SimpleNamespace(backend_type="kerberos"), BASE  # type: ignore[arg-type]
            )
