"""
Typed views of Vault API payloads used by ``VaultClient``.

Field names match Vault's JSON keys; where a key is too terse to read well
(``t``/``n`` on seal status, ``type`` on mounts) the model uses an alias and
accepts either spelling on input.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from vaultkit.auth.models import AuthInfo

TData = TypeVar("TData")


class _VaultModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Secret(_VaultModel, Generic[TData]):
    """Standard Vault response envelope with a typed ``data`` block."""

    request_id: str | None = None
    lease_id: str | None = None
    renewable: bool = False
    lease_duration: int = 0
    data: TData | None = None
    wrap_info: dict[str, Any] | None = None
    warnings: list[str] | None = None
    auth: AuthInfo | None = None


class SealStatus(_VaultModel):
    sealed: bool
    secret_threshold: int = Field(alias="t")
    secret_shares: int = Field(alias="n")
    progress: int = 0
    initialized: bool | None = None
    nonce: str | None = None
    version: str | None = None
    cluster_name: str | None = None
    cluster_id: str | None = None


class HealthStatus(_VaultModel):
    """Body of ``sys/health``; Vault also returns it with 429/472/473/501/503."""

    initialized: bool = False
    sealed: bool = True
    standby: bool = False
    performance_standby: bool = False
    replication_dr_mode: str | None = None
    replication_performance_mode: str | None = None
    server_time_utc: int | None = None
    version: str | None = None
    cluster_name: str | None = None
    cluster_id: str | None = None


class Policy(_VaultModel):
    name: str
    rules: str = ""


class MountConfiguration(_VaultModel):
    default_lease_ttl: int | str | None = None
    max_lease_ttl: int | str | None = None


class SecretBackend(_VaultModel):
    """A mounted secret backend (``sys/mounts``)."""

    mount_point: str | None = Field(default=None, exclude=True)
    backend_type: str = Field(alias="type")
    description: str | None = None
    config: MountConfiguration | None = None


class AuthenticationBackend(_VaultModel):
    """An enabled authentication backend (``sys/auth``)."""

    mount_point: str | None = Field(default=None, exclude=True)
    backend_type: str = Field(alias="type")
    description: str | None = None


class TokenInfo(_VaultModel):
    """``data`` block of ``auth/token/lookup-self``."""

    id: str | None = None
    accessor: str | None = None
    display_name: str | None = None
    policies: list[str] = Field(default_factory=list)
    meta: dict[str, Any] | None = None
    num_uses: int = 0
    orphan: bool = False
    path: str | None = None
    ttl: int = 0
    creation_time: int | None = None
    creation_ttl: int | None = None
    explicit_max_ttl: int | None = None
    expire_time: str | None = None
    renewable: bool | None = None


class TokenCreationRequest(_VaultModel):
    """Body of ``auth/token/create``; unset fields are omitted from the request."""

    id: str | None = None
    policies: list[str] | None = None
    meta: dict[str, str] | None = None
    no_parent: bool | None = None
    no_default_policy: bool | None = None
    renewable: bool | None = None
    ttl: str | None = None
    explicit_max_ttl: str | None = None
    display_name: str | None = None
    num_uses: int | None = None
