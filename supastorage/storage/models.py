"""Client configuration and result types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterator, Mapping

import requests

from supastorage.storage.errors import ConfigurationError

if TYPE_CHECKING:
    from supastorage.common.config import Settings

DEFAULT_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Immutable connection settings for one bucket.

    ``base_url`` is the storage API root, e.g.
    ``https://<ref>.supabase.co/storage/v1``.
    """

    base_url: str
    auth_token: str
    bucket_id: str

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ConfigurationError("base_url is required")
        if not self.auth_token:
            raise ConfigurationError("auth_token is required")
        if not self.bucket_id:
            raise ConfigurationError("bucket_id is required")
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_settings(cls, settings: "Settings", bucket_id: str) -> "ClientConfig":
        """Build a config from settings.

        Raises:
            ConfigurationError: If the API key or storage host is not configured.
        """
        if not settings.API_KEY:
            raise ConfigurationError("API_KEY is required")
        base_url = settings.storage_url
        if not base_url:
            raise ConfigurationError("STORAGE_URL or REFERENCE_ID is required")
        return cls(base_url=base_url, auth_token=settings.API_KEY, bucket_id=bucket_id)

    def __repr__(self) -> str:
        return (
            f"ClientConfig(base_url={self.base_url!r}, auth_token='***', "
            f"bucket_id={self.bucket_id!r})"
        )


@dataclass(frozen=True, slots=True)
class StorageResponse:
    """Successful API response with its decoded JSON body."""

    status_code: int
    data: Any
    headers: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class SignedUrl:
    """One entry of a batch signing result.

    ``signed_url`` is None when the service reported an ``error`` for the path.
    """

    path: str | None
    signed_url: str | None
    error: str | None = None


class ObjectDownload:
    """Streamed object body; close it, or use it as a context manager."""

    def __init__(self, response: requests.Response) -> None:
        self._response = response

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def content_type(self) -> str | None:
        return self._response.headers.get("content-type")

    @property
    def content_length(self) -> int | None:
        value = self._response.headers.get("content-length")
        return int(value) if value is not None else None

    def iter_bytes(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
        return self._response.iter_content(chunk_size=chunk_size)

    def read(self) -> bytes:
        return self._response.content

    def close(self) -> None:
        self._response.close()

    def __enter__(self) -> "ObjectDownload":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
