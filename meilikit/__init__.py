"""Asynchronous index lifecycle client for Meilisearch-compatible search services."""

from importlib import metadata

__package_name__ = "meilikit"
__version__ = metadata.version(__package_name__)

from meilikit.settings import ClientSettings, client_settings  # noqa: E402
from meilikit.errors import (  # noqa: E402
    ApiError,
    ConflictError,
    MeilikitError,
    NotFoundError,
    TaskTimeoutError,
    TransportError,
    ValidationError,
)
from meilikit.index import Index  # noqa: E402
from meilikit.client import Client  # noqa: E402

__all__ = [
    "Client",
    "Index",
    "ClientSettings",
    "client_settings",
    "MeilikitError",
    "ApiError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "TransportError",
    "TaskTimeoutError",
]
