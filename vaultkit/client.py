"""
VaultClient - resource methods over the Vault HTTP API.

Each method validates its arguments, builds the API path and payload, and hands
the call to the client's ``HttpDataAccessManager``. When an authentication
descriptor was supplied, the provider's token is attached as ``X-Vault-Token``
on every call.

Usage Example:
    >>> from vaultkit import VaultClient, TokenAuthenticationInfo
    >>> async with VaultClient(
    ...     "https://vault.company.com:8200",
    ...     TokenAuthenticationInfo(token="hvs.example"),
    ...     timeout=10.0,
    ... ) as client:
    ...     secret = await client.read_secret("secret/app/database")
    ...     password = secret.data["password"]

Errors:
    - VaultArgumentError: missing required argument (raised before any I/O)
    - VaultApiError: Vault returned a non-2xx status
    - httpx.TransportError: Vault unreachable / timed out
"""

import logging
from types import TracebackType
from typing import Any, Final, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError
from pydantic_core import to_json

from vaultkit.auth.base import AuthenticationProvider
from vaultkit.auth.factory import create_authentication_provider
from vaultkit.auth.models import AuthenticationInfo, AuthResponse
from vaultkit.data_access.http_data_access import (
    CustomProcessor,
    HttpDataAccessManager,
    TransportConfiguration,
)
from vaultkit.exceptions import VaultApiError, VaultArgumentError, VaultResponseParseError
from vaultkit.models import (
    AuthenticationBackend,
    HealthStatus,
    MountConfiguration,
    Policy,
    SealStatus,
    Secret,
    SecretBackend,
    TokenCreationRequest,
    TokenInfo,
)

logger = logging.getLogger(__name__)

VAULT_TOKEN_HEADER: Final = "X-Vault-Token"

# sys/health answers with these codes and a normal health body
_HEALTH_STATUS_CODES: Final[frozenset[int]] = frozenset({429, 472, 473, 501, 503})

TBackend = TypeVar("TBackend", SecretBackend, AuthenticationBackend)


def _require(value: Any, argument: str) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise VaultArgumentError(argument)


def _health_processor(status_code: int, body: str) -> HealthStatus:
    if status_code in _HEALTH_STATUS_CODES:
        try:
            return HealthStatus.model_validate_json(body)
        except ValidationError as exc:
            raise VaultResponseParseError(
                f"Could not deserialize {status_code} health response: {exc}", body=body
            ) from exc
    raise VaultApiError(status_code, httpx.codes.get_reason_phrase(status_code), body)


def _policy_processor(status_code: int, body: str) -> Policy | None:
    if status_code == 404:
        return None
    raise VaultApiError(status_code, httpx.codes.get_reason_phrase(status_code), body)


def _parse_backends(response: dict[str, Any] | None, model: type[TBackend]) -> dict[str, TBackend]:
    """Map ``{"secret/": {...}}`` listings (top-level or under ``data``) to models."""
    if not response:
        return {}
    listing = response.get("data") or response
    return {
        mount_point: model.model_validate({**entry, "mount_point": mount_point})
        for mount_point, entry in listing.items()
        if isinstance(entry, dict) and "type" in entry
    }


def _model_payload(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(by_alias=True, exclude_none=True)


class VaultClient:
    """
    Async client for a Vault server.

    Args:
        vault_address: Vault server URL (required)
        authentication_info: How to log in. None sends requests without a token.
        timeout: Request timeout in seconds for every call (logins included)
        persist_header_overrides: Keep header overrides (including the token)
            on the shared HTTP client between calls (default) or send them per
            request only

    Raises:
        VaultArgumentError: vault_address missing, or an invalid descriptor
        UnsupportedOperationError: descriptor kind not supported
    """

    def __init__(
        self,
        vault_address: str | httpx.URL,
        authentication_info: AuthenticationInfo | None = None,
        timeout: float | None = None,
        persist_header_overrides: bool = True,
    ) -> None:
        _require(vault_address, "vault_address")

        self._authentication_provider: AuthenticationProvider | None = None
        if authentication_info is not None:
            self._authentication_provider = create_authentication_provider(
                authentication_info, vault_address, timeout=timeout
            )

        self._data_access_manager = HttpDataAccessManager(
            TransportConfiguration(
                base_address=vault_address,
                timeout=timeout,
                persist_header_overrides=persist_header_overrides,
            )
        )

    @property
    def authentication_provider(self) -> AuthenticationProvider | None:
        return self._authentication_provider

    @property
    def data_access_manager(self) -> HttpDataAccessManager:
        return self._data_access_manager

    async def _make_request(
        self,
        path: str,
        method: str,
        payload: Any = None,
        response_type: Any = Any,
        raw_response: bool = False,
        custom_processor: CustomProcessor | None = None,
    ) -> Any:
        headers: dict[str, str] | None = None
        if self._authentication_provider is not None:
            headers = {VAULT_TOKEN_HEADER: await self._authentication_provider.get_token()}

        return await self._data_access_manager.make_request(
            path,
            method,
            payload=payload,
            headers=headers,
            raw_response=raw_response,
            custom_processor=custom_processor,
            response_type=response_type,
        )

    # ------------------------------------------------------------------
    # Seal / health
    # ------------------------------------------------------------------

    async def get_seal_status(self) -> SealStatus:
        return await self._make_request("v1/sys/seal-status", "GET", response_type=SealStatus)

    async def seal(self) -> None:
        await self._make_request("v1/sys/seal", "PUT")

    async def unseal(self, master_share_key: str | None, reset: bool = False) -> SealStatus:
        """Submit one unseal key share. ``reset=True`` discards previously submitted shares."""
        if not reset:
            _require(master_share_key, "master_share_key")

        payload: dict[str, Any] = {"reset": reset}
        if master_share_key:
            payload["key"] = master_share_key
        return await self._make_request(
            "v1/sys/unseal", "PUT", payload=payload, response_type=SealStatus
        )

    async def quick_unseal(self, all_master_share_keys: list[str]) -> SealStatus:
        """Submit key shares one by one until Vault reports it is unsealed."""
        if not all_master_share_keys:
            raise VaultArgumentError("all_master_share_keys")

        for key in all_master_share_keys:
            status = await self.unseal(key)
            if not status.sealed:
                break

        logger.info("Quick unseal finished", extra={"sealed": status.sealed})
        return status

    async def get_health_status(self) -> HealthStatus:
        """Health of the node; standby/sealed/uninitialized answers are returned, not raised."""
        return await self._make_request(
            "v1/sys/health",
            "GET",
            response_type=HealthStatus,
            custom_processor=_health_processor,
        )

    async def is_healthy(self) -> bool:
        """True when ``HEAD sys/health`` answers 2xx (initialized, unsealed, active)."""
        result = await self._make_request(
            "v1/sys/health", "HEAD", custom_processor=lambda status_code, body: False
        )
        return result is None

    async def get_initialization_status(self) -> bool:
        response = await self._make_request("v1/sys/init", "GET", response_type=dict[str, Any])
        return bool(response and response.get("initialized"))

    async def get_metrics(self, metrics_format: str = "prometheus") -> str | None:
        """Telemetry in Vault's text exposition format, returned verbatim."""
        _require(metrics_format, "metrics_format")
        return await self._make_request(
            f"v1/sys/metrics?format={quote(metrics_format, safe='')}",
            "GET",
            raw_response=True,
            response_type=str,
        )

    # ------------------------------------------------------------------
    # Policies
    # ------------------------------------------------------------------

    async def get_all_policy_names(self) -> list[str]:
        response = await self._make_request("v1/sys/policy", "GET", response_type=dict[str, Any])
        if not response:
            return []
        return list(response.get("policies") or response.get("keys") or [])

    async def get_policy(self, policy_name: str) -> Policy | None:
        """Return the policy, or None when Vault answers 404."""
        _require(policy_name, "policy_name")
        return await self._make_request(
            f"v1/sys/policy/{quote(policy_name, safe='')}",
            "GET",
            response_type=Policy,
            custom_processor=_policy_processor,
        )

    async def write_policy(self, policy: Policy) -> None:
        _require(policy, "policy")
        _require(policy.name, "policy.name")
        await self._make_request(
            f"v1/sys/policy/{quote(policy.name, safe='')}", "PUT", payload={"rules": policy.rules}
        )

    async def delete_policy(self, policy_name: str) -> None:
        _require(policy_name, "policy_name")
        await self._make_request(f"v1/sys/policy/{quote(policy_name, safe='')}", "DELETE")

    # ------------------------------------------------------------------
    # Secret backends (mounts)
    # ------------------------------------------------------------------

    async def get_all_mounted_secret_backends(self) -> dict[str, SecretBackend]:
        response = await self._make_request("v1/sys/mounts", "GET", response_type=dict[str, Any])
        return _parse_backends(response, SecretBackend)

    async def mount_secret_backend(self, secret_backend: SecretBackend) -> None:
        _require(secret_backend, "secret_backend")
        _require(secret_backend.mount_point, "secret_backend.mount_point")
        await self._make_request(
            f"v1/sys/mounts/{secret_backend.mount_point.strip('/')}",
            "POST",
            payload=_model_payload(secret_backend),
        )

    async def unmount_secret_backend(self, mount_point: str) -> None:
        _require(mount_point, "mount_point")
        await self._make_request(f"v1/sys/mounts/{mount_point.strip('/')}", "DELETE")

    async def remount_secret_backend(self, previous_mount_point: str, new_mount_point: str) -> None:
        _require(previous_mount_point, "previous_mount_point")
        _require(new_mount_point, "new_mount_point")
        await self._make_request(
            "v1/sys/remount",
            "POST",
            payload={"from": previous_mount_point, "to": new_mount_point},
        )

    async def get_mounted_secret_backend_configuration(self, mount_point: str) -> MountConfiguration:
        _require(mount_point, "mount_point")
        return await self._make_request(
            f"v1/sys/mounts/{mount_point.strip('/')}/tune",
            "GET",
            response_type=MountConfiguration,
        )

    async def tune_secret_backend_configuration(
        self, mount_point: str, mount_configuration: MountConfiguration | None = None
    ) -> None:
        _require(mount_point, "mount_point")
        payload = _model_payload(mount_configuration) if mount_configuration else {}
        await self._make_request(
            f"v1/sys/mounts/{mount_point.strip('/')}/tune", "POST", payload=payload
        )

    # ------------------------------------------------------------------
    # Authentication backends
    # ------------------------------------------------------------------

    async def get_all_enabled_authentication_backends(self) -> dict[str, AuthenticationBackend]:
        response = await self._make_request("v1/sys/auth", "GET", response_type=dict[str, Any])
        return _parse_backends(response, AuthenticationBackend)

    async def enable_authentication_backend(
        self, authentication_backend: AuthenticationBackend
    ) -> None:
        _require(authentication_backend, "authentication_backend")
        _require(authentication_backend.mount_point, "authentication_backend.mount_point")
        await self._make_request(
            f"v1/sys/auth/{authentication_backend.mount_point.strip('/')}",
            "POST",
            payload=_model_payload(authentication_backend),
        )

    async def disable_authentication_backend(self, mount_point: str) -> None:
        _require(mount_point, "mount_point")
        await self._make_request(f"v1/sys/auth/{mount_point.strip('/')}", "DELETE")

    # ------------------------------------------------------------------
    # Secrets and leases
    # ------------------------------------------------------------------

    async def read_secret(self, location_path: str) -> Secret[dict[str, Any]] | None:
        _require(location_path, "location_path")
        return await self._make_request(
            f"v1/{location_path.lstrip('/')}", "GET", response_type=Secret[dict[str, Any]]
        )

    async def write_secret(self, location_path: str, values: dict[str, Any]) -> None:
        _require(location_path, "location_path")
        _require(values, "values")
        await self._make_request(f"v1/{location_path.lstrip('/')}", "POST", payload=values)

    async def delete_secret(self, location_path: str) -> None:
        _require(location_path, "location_path")
        await self._make_request(f"v1/{location_path.lstrip('/')}", "DELETE")

    async def read_raw_secret(self, storage_path: str) -> dict[str, Any] | None:
        """Read an entry straight from the storage backend (``sys/raw``; root only)."""
        _require(storage_path, "storage_path")
        return await self._make_request(
            f"v1/sys/raw/{storage_path.lstrip('/')}", "GET", response_type=dict[str, Any]
        )

    async def write_raw_secret(self, storage_path: str, values: dict[str, Any]) -> None:
        _require(storage_path, "storage_path")
        _require(values, "values")
        await self._make_request(
            f"v1/sys/raw/{storage_path.lstrip('/')}",
            "PUT",
            payload={"value": to_json(values).decode("utf-8")},
        )

    async def delete_raw_secret(self, storage_path: str) -> None:
        _require(storage_path, "storage_path")
        await self._make_request(f"v1/sys/raw/{storage_path.lstrip('/')}", "DELETE")

    async def renew_secret(
        self, lease_id: str, increment_seconds: int | None = None
    ) -> Secret[dict[str, Any]] | None:
        _require(lease_id, "lease_id")
        payload: dict[str, Any] = {"lease_id": lease_id}
        if increment_seconds is not None:
            payload["increment"] = increment_seconds
        return await self._make_request(
            "v1/sys/leases/renew", "PUT", payload=payload, response_type=Secret[dict[str, Any]]
        )

    async def revoke_secret(self, lease_id: str) -> None:
        _require(lease_id, "lease_id")
        await self._make_request("v1/sys/leases/revoke", "PUT", payload={"lease_id": lease_id})

    async def revoke_all_secrets_or_tokens_under_prefix(self, prefix: str) -> None:
        _require(prefix, "prefix")
        await self._make_request(f"v1/sys/leases/revoke-prefix/{prefix.strip('/')}", "PUT")

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    async def get_calling_token_info(self) -> Secret[TokenInfo] | None:
        return await self._make_request(
            "v1/auth/token/lookup-self", "GET", response_type=Secret[TokenInfo]
        )

    async def get_token_info(self, token: str) -> Secret[TokenInfo] | None:
        """Look up another token; the token travels in the body, never in the URL."""
        _require(token, "token")
        return await self._make_request(
            "v1/auth/token/lookup",
            "POST",
            payload={"token": token},
            response_type=Secret[TokenInfo],
        )

    async def create_token(
        self, token_creation_request: TokenCreationRequest | None = None
    ) -> AuthResponse | None:
        payload = _model_payload(token_creation_request) if token_creation_request else {}
        return await self._make_request(
            "v1/auth/token/create", "POST", payload=payload, response_type=AuthResponse
        )

    async def revoke_token(self, token: str) -> None:
        _require(token, "token")
        await self._make_request("v1/auth/token/revoke", "POST", payload={"token": token})

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        """Close the resource transport and the provider's login transport."""
        await self._data_access_manager.aclose()
        if self._authentication_provider is not None:
            await self._authentication_provider.aclose()

    async def __aenter__(self) -> "VaultClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()
