"""
Vault client settings loaded from environment variables.

Uses Pydantic Settings for type-safe configuration with validation. Every
field maps to a ``VAULT_``-prefixed environment variable (or a ``.env`` entry).

Environment Variables:
    VAULT_ADDR (str, required):
        Vault server URL (e.g., "https://vault.company.com:8200")
    VAULT_TOKEN (str, optional):
        Client token. Used when VAULT_AUTH is not set.
    VAULT_AUTH (JSON, optional):
        Authentication descriptor, e.g.
        '{"backend_type": "userpass", "username": "ci", "password": "..."}'
    VAULT_TIMEOUT_SECONDS (float, optional):
        Request timeout for every call (default: 30)
    VAULT_PERSIST_HEADER_OVERRIDES (bool, optional):
        Keep header overrides on the shared HTTP client (default: true)
    VAULT_LOG_LEVEL (str, optional):
        Level used by ``create_vault_client(configure_logs=True)``

Example:
    >>> import os
    >>> os.environ["VAULT_ADDR"] = "http://127.0.0.1:8200"
    >>> os.environ["VAULT_TOKEN"] = "hvs.dev-root"
    >>> client = create_vault_client()
"""

import logging
from functools import lru_cache
from typing import Any

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from vaultkit.auth.models import (
    AuthenticationInfo,
    TokenAuthenticationInfo,
    parse_authentication_info,
)
from vaultkit.client import VaultClient
from vaultkit.common.logging.config import configure_logging
from vaultkit.exceptions import VaultArgumentError

logger = logging.getLogger(__name__)


class VaultSettings(BaseSettings):
    """
    Vault client configuration.

    All settings are loaded from environment variables or ``.env``.
    """

    model_config = SettingsConfigDict(
        env_prefix="VAULT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    address: str = Field(
        default="",
        validation_alias=AliasChoices("VAULT_ADDR", "VAULT_ADDRESS"),
        description="Vault server URL",
    )
    token: SecretStr | None = Field(
        default=None,
        description="Client token (token authentication)",
    )
    auth: AuthenticationInfo | None = Field(
        default=None,
        description="Authentication descriptor as JSON; takes precedence over VAULT_TOKEN",
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Request timeout in seconds",
    )
    persist_header_overrides: bool = Field(
        default=True,
        description="Keep header overrides on the shared HTTP client between calls",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    @field_validator("address")
    @classmethod
    def _strip_address(cls, value: str) -> str:
        return value.strip()

    @field_validator("auth", mode="before")
    @classmethod
    def _parse_auth(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_authentication_info(value) if value.strip() else None
        return value

    def authentication_info(self) -> AuthenticationInfo | None:
        """Descriptor to log in with: VAULT_AUTH, else VAULT_TOKEN, else None."""
        if self.auth is not None:
            return self.auth
        if self.token is not None and self.token.get_secret_value():
            return TokenAuthenticationInfo(token=self.token)
        return None


@lru_cache
def get_settings() -> VaultSettings:
    """Return settings loaded once per process."""
    return VaultSettings()


def create_vault_client(
    settings: VaultSettings | None = None,
    configure_logs: bool = False,
    **overrides: Any,
) -> VaultClient:
    """
    Create a VaultClient from settings.

    Args:
        settings: Explicit settings. If None, reads the environment (cached).
        configure_logs: Install JSON logging at ``settings.log_level``
        **overrides: Passed to VaultClient, replacing the matching setting
            (``vault_address``, ``authentication_info``, ``timeout``,
            ``persist_header_overrides``)

    Returns:
        VaultClient: Configured client

    Raises:
        VaultArgumentError: VAULT_ADDR not set and no ``vault_address`` override
    """
    settings = settings if settings is not None else get_settings()

    if configure_logs:
        configure_logging(service_name="vaultkit", log_level=settings.log_level)

    client_kwargs: dict[str, Any] = {
        "vault_address": settings.address,
        "authentication_info": settings.authentication_info(),
        "timeout": settings.timeout_seconds,
        "persist_header_overrides": settings.persist_header_overrides,
    }
    client_kwargs.update(overrides)

    if not client_kwargs["vault_address"]:
        raise VaultArgumentError(
            "vault_address",
            "set VAULT_ADDR to your Vault server URL (e.g., 'https://vault.company.com:8200')",
        )

    auth = client_kwargs["authentication_info"]
    logger.info(
        "Creating Vault client",
        extra={
            "vault_address": str(client_kwargs["vault_address"]),
            "backend_type": auth.backend_type if auth is not None else None,
        },
    )
    return VaultClient(**client_kwargs)
