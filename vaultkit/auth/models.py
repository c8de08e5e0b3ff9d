"""
Authentication descriptors and login response models.

An ``AuthenticationInfo`` is an immutable description of *how* to log in to
Vault. It is a closed tagged union over ``backend_type``; the selector in
``vaultkit.auth.factory`` turns it into a live provider.

Descriptors (except ``CustomAuthenticationInfo``) can be parsed from plain data,
which is how ``VaultSettings`` reads ``VAULT_AUTH`` from the environment:

    >>> parse_authentication_info({"backend_type": "userpass", "username": "ci", "password": "pw"})
    UsernamePasswordAuthenticationInfo(backend_type='userpass', mount_point='userpass', ...)
"""

from collections.abc import Awaitable, Callable
from enum import StrEnum
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr, TypeAdapter


class AuthenticationBackendType(StrEnum):
    APP_ID = "app-id"
    GITHUB = "github"
    LDAP = "ldap"
    CERTIFICATE = "certificate"
    TOKEN = "token"
    USERNAME_PASSWORD = "userpass"
    CUSTOM = "custom"


class _AuthenticationInfoBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class ClientCertificate(BaseModel):
    """
    PEM client certificate presented during the TLS handshake.

    Attributes:
        cert_file: Certificate (or combined cert + key) PEM file
        key_file: Private key PEM file, when not bundled in cert_file
        password: Passphrase for an encrypted private key
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    cert_file: Path
    key_file: Path | None = None
    password: SecretStr | None = None


class AppIdAuthenticationInfo(_AuthenticationInfoBase):
    backend_type: Literal["app-id"] = "app-id"
    mount_point: str = "app-id"
    app_id: str
    user_id: str


class GitHubAuthenticationInfo(_AuthenticationInfoBase):
    backend_type: Literal["github"] = "github"
    mount_point: str = "github"
    personal_access_token: SecretStr


class LDAPAuthenticationInfo(_AuthenticationInfoBase):
    backend_type: Literal["ldap"] = "ldap"
    mount_point: str = "ldap"
    username: str
    password: SecretStr


class CertificateAuthenticationInfo(_AuthenticationInfoBase):
    """
    TLS client-certificate login.

    ``client_certificate`` is optional at construction; a descriptor without
    one is rejected when a provider is selected for it.
    """

    backend_type: Literal["certificate"] = "certificate"
    mount_point: str = "cert"
    client_certificate: ClientCertificate | None = None


class TokenAuthenticationInfo(_AuthenticationInfoBase):
    backend_type: Literal["token"] = "token"
    token: SecretStr


class UsernamePasswordAuthenticationInfo(_AuthenticationInfoBase):
    backend_type: Literal["userpass"] = "userpass"
    mount_point: str = "userpass"
    username: str
    password: SecretStr


class CustomAuthenticationInfo(_AuthenticationInfoBase):
    """
    Login delegated to caller code.

    ``token_factory`` is awaited every time a token is (re)obtained and must
    return a Vault client token. It manages its own transport, if any.
    """

    backend_type: Literal["custom"] = "custom"
    token_factory: Callable[[], Awaitable[str]]


AuthenticationInfo = Annotated[
    AppIdAuthenticationInfo
    | GitHubAuthenticationInfo
    | LDAPAuthenticationInfo
    | CertificateAuthenticationInfo
    | TokenAuthenticationInfo
    | UsernamePasswordAuthenticationInfo
    | CustomAuthenticationInfo,
    Field(discriminator="backend_type"),
]

_authentication_info_adapter: TypeAdapter[AuthenticationInfo] = TypeAdapter(AuthenticationInfo)


def parse_authentication_info(data: dict[str, Any] | str) -> AuthenticationInfo:
    """Build a descriptor from a mapping or its JSON text, dispatching on ``backend_type``."""
    if isinstance(data, str):
        return _authentication_info_adapter.validate_json(data)
    return _authentication_info_adapter.validate_python(data)


class AuthInfo(BaseModel):
    """The ``auth`` block of a Vault login response."""

    client_token: str
    accessor: str | None = None
    policies: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] | None = None
    lease_duration: int = 0
    renewable: bool = False


class AuthResponse(BaseModel):
    """Envelope returned by ``auth/*/login`` and ``auth/token/create``."""

    request_id: str | None = None
    lease_id: str | None = None
    renewable: bool = False
    lease_duration: int = 0
    data: dict[str, Any] | None = None
    auth: AuthInfo | None = None
    warnings: list[str] | None = None
