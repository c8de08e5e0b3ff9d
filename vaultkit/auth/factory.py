"""
Selects and wires the authentication provider for an ``AuthenticationInfo``.

Dispatch is a closed ``match`` over the descriptor classes:
    - AppId, GitHub, LDAP, UsernamePassword → provider + HttpDataAccessManager(base_address)
    - Certificate → provider + HttpDataAccessManager over a transport whose TLS
      context presents the client certificate
    - Token → TokenAuthenticationProvider (no transport)
    - Custom → CustomAuthenticationProvider (no transport)

Adding a backend kind means adding a descriptor to ``AuthenticationInfo`` and a
case here; there is no registry.

Example:
    >>> provider = create_authentication_provider(
    ...     UsernamePasswordAuthenticationInfo(username="ci", password="s3cret"),
    ...     base_address="https://vault.company.com:8200",
    ...     timeout=10.0,
    ... )
    >>> token = await provider.get_token()
"""

import logging
import ssl

import httpx

from vaultkit.auth.base import AuthenticationProvider
from vaultkit.auth.models import (
    AppIdAuthenticationInfo,
    AuthenticationInfo,
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
from vaultkit.data_access.http_data_access import HttpDataAccessManager, TransportConfiguration
from vaultkit.exceptions import UnsupportedOperationError, VaultArgumentError

logger = logging.getLogger(__name__)


def build_client_certificate_transport(certificate: ClientCertificate) -> httpx.AsyncHTTPTransport:
    """Return a transport whose TLS handshakes present ``certificate``."""
    ssl_context = ssl.create_default_context()
    ssl_context.load_cert_chain(
        certfile=certificate.cert_file,
        keyfile=certificate.key_file,
        password=certificate.password.get_secret_value() if certificate.password else None,
    )
    return httpx.AsyncHTTPTransport(verify=ssl_context)


def create_authentication_provider(
    authentication_info: AuthenticationInfo,
    base_address: str | httpx.URL,
    timeout: float | None = None,
) -> AuthenticationProvider:
    """
    Build the provider for ``authentication_info``.

    Args:
        authentication_info: Descriptor of how to log in
        base_address: Vault server URL used for login calls
        timeout: Request timeout in seconds for the provider's transport

    Returns:
        A provider owning its own HttpDataAccessManager (none for Token/Custom)

    Raises:
        VaultArgumentError: Missing descriptor or base address, or a Certificate
            descriptor without a certificate. Nothing is constructed.
        UnsupportedOperationError: Descriptor kind not handled here
    """
    if authentication_info is None:
        raise VaultArgumentError("authentication_info")
    if not base_address:
        raise VaultArgumentError("base_address")

    def _manager(transport: httpx.AsyncBaseTransport | None = None) -> HttpDataAccessManager:
        return HttpDataAccessManager(
            TransportConfiguration(base_address=base_address, timeout=timeout, transport=transport)
        )

    match authentication_info:
        case AppIdAuthenticationInfo():
            provider: AuthenticationProvider = AppIdAuthenticationProvider(
                authentication_info, _manager()
            )
        case GitHubAuthenticationInfo():
            provider = GitHubAuthenticationProvider(authentication_info, _manager())
        case LDAPAuthenticationInfo():
            provider = LDAPAuthenticationProvider(authentication_info, _manager())
        case CertificateAuthenticationInfo():
            if authentication_info.client_certificate is None:
                raise VaultArgumentError(
                    "authentication_info.client_certificate",
                    "certificate authentication requires a client certificate",
                )
            transport = build_client_certificate_transport(authentication_info.client_certificate)
            provider = CertificateAuthenticationProvider(authentication_info, _manager(transport))
        case TokenAuthenticationInfo():
            provider = TokenAuthenticationProvider(authentication_info)
        case UsernamePasswordAuthenticationInfo():
            provider = UsernamePasswordAuthenticationProvider(authentication_info, _manager())
        case CustomAuthenticationInfo():
            provider = CustomAuthenticationProvider(authentication_info)
        case _:
            kind = getattr(authentication_info, "backend_type", type(authentication_info).__name__)
            raise UnsupportedOperationError(
                f"The requested authentication backend type is not supported: {kind}"
            )

    logger.debug(
        "Selected authentication provider",
        extra={"backend_type": provider.backend_type, "provider": type(provider).__name__},
    )
    return provider
