"""Object storage client.

This module exposes the bucket-scoped client for a Supabase-style storage
REST API, its option models, result types, and error hierarchy.
"""

from .errors import (
    ConfigurationError,
    MalformedResponseError,
    StorageError,
    TransportError,
)
from .models import ClientConfig, ObjectDownload, SignedUrl, StorageResponse
from .options import FileOptions, SearchOptions, SortBy, UrlOptions, merge_options
from .paths import clean_path, storage_path
from .client import StorageClient, get_storage_client

__all__ = [
    "ClientConfig",
    "ConfigurationError",
    "FileOptions",
    "MalformedResponseError",
    "ObjectDownload",
    "SearchOptions",
    "SignedUrl",
    "SortBy",
    "StorageClient",
    "StorageError",
    "StorageResponse",
    "TransportError",
    "UrlOptions",
    "clean_path",
    "get_storage_client",
    "merge_options",
    "storage_path",
]
