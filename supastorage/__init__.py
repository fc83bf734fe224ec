"""Python client for Supabase-style object storage."""

__version__ = "0.1.0"

from supastorage.storage import (  # noqa: E402
    ClientConfig,
    ConfigurationError,
    FileOptions,
    MalformedResponseError,
    SearchOptions,
    StorageClient,
    StorageError,
    TransportError,
    UrlOptions,
    get_storage_client,
)

__all__ = [
    "ClientConfig",
    "ConfigurationError",
    "FileOptions",
    "MalformedResponseError",
    "SearchOptions",
    "StorageClient",
    "StorageError",
    "TransportError",
    "UrlOptions",
    "__version__",
    "get_storage_client",
]
