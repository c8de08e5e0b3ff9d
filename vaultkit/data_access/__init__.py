"""HTTP request/response engine shared by authentication providers and VaultClient."""

from vaultkit.data_access.http_data_access import (
    SUPPORTED_METHODS,
    CustomProcessor,
    HttpDataAccessManager,
    RequestDescriptor,
    TransportConfiguration,
    serialize_payload,
)

__all__ = [
    "HttpDataAccessManager",
    "TransportConfiguration",
    "RequestDescriptor",
    "CustomProcessor",
    "SUPPORTED_METHODS",
    "serialize_payload",
]
