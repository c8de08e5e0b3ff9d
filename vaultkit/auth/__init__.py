"""
Authentication for the vault client.

Quick Start:
    >>> from vaultkit.auth import TokenAuthenticationInfo, create_authentication_provider
    >>> provider = create_authentication_provider(
    ...     TokenAuthenticationInfo(token="hvs.example"), "http://127.0.0.1:8200"
    ... )
    >>> await provider.get_token()
    'hvs.example'
"""

from vaultkit.auth.base import AuthenticationProvider, LoginAuthenticationProvider
from vaultkit.auth.factory import build_client_certificate_transport, create_authentication_provider
from vaultkit.auth.models import (
    AppIdAuthenticationInfo,
    AuthenticationBackendType,
    AuthenticationInfo,
    AuthInfo,
    AuthResponse,
    CertificateAuthenticationInfo,
    ClientCertificate,
    CustomAuthenticationInfo,
    GitHubAuthenticationInfo,
    LDAPAuthenticationInfo,
    TokenAuthenticationInfo,
    UsernamePasswordAuthenticationInfo,
    parse_authentication_info,
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

__all__ = [
    # Selector (recommended entry point)
    "create_authentication_provider",
    "build_client_certificate_transport",
    # Descriptors
    "AuthenticationInfo",
    "AuthenticationBackendType",
    "AppIdAuthenticationInfo",
    "GitHubAuthenticationInfo",
    "LDAPAuthenticationInfo",
    "CertificateAuthenticationInfo",
    "ClientCertificate",
    "TokenAuthenticationInfo",
    "UsernamePasswordAuthenticationInfo",
    "CustomAuthenticationInfo",
    "parse_authentication_info",
    # Login responses
    "AuthInfo",
    "AuthResponse",
    # Providers
    "AuthenticationProvider",
    "LoginAuthenticationProvider",
    "AppIdAuthenticationProvider",
    "GitHubAuthenticationProvider",
    "LDAPAuthenticationProvider",
    "CertificateAuthenticationProvider",
    "TokenAuthenticationProvider",
    "UsernamePasswordAuthenticationProvider",
    "CustomAuthenticationProvider",
]
