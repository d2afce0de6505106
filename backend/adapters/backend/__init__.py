"""Hosted backend adapter (REST, remote procedures, auth)."""

from .client import (
    BackendAPIError,
    BackendAuthError,
    BackendClient,
    BackendConnectionError,
    BackendError,
    build_query_params,
    create_backend_client,
    eq,
    gte,
    in_,
    lte,
)

__all__ = [
    "BackendClient",
    "BackendError",
    "BackendAPIError",
    "BackendAuthError",
    "BackendConnectionError",
    "build_query_params",
    "create_backend_client",
    "eq",
    "gte",
    "in_",
    "lte",
]
