"""
vaultkit - async client for the HashiCorp Vault HTTP API.

Architecture:
    - HttpDataAccessManager: generic request/response engine (data_access/)
    - create_authentication_provider(): AuthenticationInfo → live provider (auth/)
    - VaultClient: resource methods (secrets, policies, mounts, tokens, seal)
    - VaultSettings / create_vault_client(): VAULT_* environment configuration

Quick Start:
    >>> from vaultkit import VaultClient, UsernamePasswordAuthenticationInfo
    >>> async with VaultClient(
    ...     "https://vault.company.com:8200",
    ...     UsernamePasswordAuthenticationInfo(username="ci", password="s3cret"),
    ... ) as client:
    ...     secret = await client.read_secret("secret/app/database")

Security:
    - Tokens and passwords are held as ``SecretStr`` and never logged
    - Error messages carry paths and Vault's own error body, never credentials
"""

from vaultkit.auth import (
    AppIdAuthenticationInfo,
    AuthenticationBackendType,
    AuthenticationInfo,
    AuthenticationProvider,
    CertificateAuthenticationInfo,
    ClientCertificate,
    CustomAuthenticationInfo,
    GitHubAuthenticationInfo,
    LDAPAuthenticationInfo,
    TokenAuthenticationInfo,
    UsernamePasswordAuthenticationInfo,
    create_authentication_provider,
    parse_authentication_info,
)
from vaultkit.client import VaultClient
from vaultkit.config import VaultSettings, create_vault_client, get_settings
from vaultkit.data_access import HttpDataAccessManager, RequestDescriptor, TransportConfiguration
from vaultkit.exceptions import (
    UnsupportedOperationError,
    VaultApiError,
    VaultArgumentError,
    VaultAuthenticationError,
    VaultClientError,
    VaultResponseParseError,
)

__all__ = [
    # Client
    "VaultClient",
    "VaultSettings",
    "create_vault_client",
    "get_settings",
    # Engine
    "HttpDataAccessManager",
    "RequestDescriptor",
    "TransportConfiguration",
    # Authentication
    "create_authentication_provider",
    "parse_authentication_info",
    "AuthenticationProvider",
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
    # Exceptions (callers should catch these)
    "VaultClientError",
    "VaultArgumentError",
    "UnsupportedOperationError",
    "VaultApiError",
    "VaultResponseParseError",
    "VaultAuthenticationError",
]
