"""Storage client for a Supabase-style object storage REST API.

Each public method maps to exactly one HTTP request against
``{base_url}/object/...`` (``get_public_url`` makes none). Failures are
raised to the caller as ``StorageError`` subclasses; nothing is retried.
"""

from __future__ import annotations

import json
import logging
import os
import time
from pathlib import Path
from typing import Any, BinaryIO, Mapping, Sequence, Union

import requests

from supastorage.common.config import DEFAULT_HEADERS, Settings, get_settings
from supastorage.infra.observability.metrics import LATENCY, REQUESTS
from supastorage.infra.transport import RequestsTransport, Transport
from supastorage.storage.errors import (
    ConfigurationError,
    MalformedResponseError,
    TransportError,
)
from supastorage.storage.models import (
    ClientConfig,
    ObjectDownload,
    SignedUrl,
    StorageResponse,
)
from supastorage.storage.options import (
    FileOptions,
    SearchOptions,
    UrlOptions,
    merge_options,
)
from supastorage.storage.paths import (
    download_query,
    encode_url,
    storage_path,
)

logger = logging.getLogger("supastorage.http")

FileSource = Union[bytes, bytearray, str, os.PathLike, BinaryIO]
OptionsInput = Union[Mapping[str, Any], None]

SENSITIVE_KEYS = {
    "apikey",
    "api_key",
    "authorization",
    "password",
    "secret",
    "token",
    "access_token",
    "refresh_token",
}


def _mask(obj: Any) -> Any:
    if isinstance(obj, Mapping):
        return {
            k: "***" if isinstance(k, str) and k.lower() in SENSITIVE_KEYS else _mask(v)
            for k, v in obj.items()
        }
    if isinstance(obj, list):
        return [_mask(x) for x in obj]
    return obj


def _read_file(file: FileSource) -> bytes:
    """Return the bytes of an in-memory buffer, a binary stream, or a local path."""
    if isinstance(file, (bytes, bytearray)):
        return bytes(file)
    if hasattr(file, "read"):
        data = file.read()
        return data.encode("utf-8") if isinstance(data, str) else bytes(data)
    return Path(file).read_bytes()


def _check_expires_in(expires_in: int) -> None:
    if isinstance(expires_in, bool) or not isinstance(expires_in, int) or expires_in <= 0:
        raise ValueError("expires_in must be a positive integer number of seconds")


class StorageClient:
    """Client bound to a single bucket.

    Example:
        ```python
        client = get_storage_client("avatars")
        client.upload("users/1.png", Path("1.png"), {"contentType": "image/png"})
        url = client.create_signed_url("users/1.png", 60)
        ```
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: Transport | None = None,
        trace_http: bool = False,
    ) -> None:
        self._config = config
        self._transport = transport or RequestsTransport()
        self._trace_http = trace_http
        self._headers = {
            **DEFAULT_HEADERS,
            "Authorization": f"Bearer {config.auth_token}",
        }

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def bucket_id(self) -> str:
        return self._config.bucket_id

    def list(
        self, prefix: str = "", options: OptionsInput | SearchOptions = None
    ) -> StorageResponse:
        """List objects under ``prefix``.

        Args:
            prefix: Folder path to list.
            options: Search overrides (``limit``, ``offset``, ``sortBy``, ``search``).

        Returns:
            StorageResponse whose data is the list of object metadata entries.

        Raises:
            ValueError: If an option fails validation (e.g. ``limit`` below 1),
                before any request is sent.
            TransportError: If the request fails.
        """
        search = merge_options(SearchOptions, options)
        body = {"prefix": prefix, **search.to_wire()}
        response = self._send(
            "list", "POST", f"/object/list/{self.bucket_id}", json_body=body
        )
        return self._decode(response)

    def upload(
        self,
        path: str,
        file: FileSource,
        options: OptionsInput | FileOptions = None,
    ) -> StorageResponse:
        """Upload a new object; with ``upsert`` set, replace an existing one.

        Args:
            path: Object path such as ``folder/subfolder/image.png``.
            file: Bytes, a binary file object, or a local file path.
            options: File overrides (``cacheControl``, ``upsert``, ``contentType``).
        """
        return self._upload_or_update("upload", "POST", path, file, options)

    def update(
        self,
        path: str,
        file: FileSource,
        options: OptionsInput | FileOptions = None,
    ) -> StorageResponse:
        """Replace the object stored at ``path``."""
        return self._upload_or_update("update", "PUT", path, file, options)

    def _upload_or_update(
        self,
        operation: str,
        method: str,
        path: str,
        file: FileSource,
        options: OptionsInput | FileOptions,
    ) -> StorageResponse:
        file_options = merge_options(FileOptions, options)
        headers = {
            "cache-control": f"max-age={file_options.cache_control}",
            "content-type": file_options.content_type,
        }
        if method == "POST":
            headers["x-upsert"] = "true" if file_options.upsert else "false"

        response = self._send(
            operation,
            method,
            f"/object/{storage_path(self.bucket_id, path)}",
            body=_read_file(file),
            headers=headers,
        )
        return self._decode(response)

    def move(self, from_path: str, to_path: str) -> StorageResponse:
        """Move an object to a new path within the bucket."""
        return self._relocate("move", from_path, to_path)

    def copy(self, from_path: str, to_path: str) -> StorageResponse:
        """Copy an object to a new path within the bucket."""
        return self._relocate("copy", from_path, to_path)

    def _relocate(self, operation: str, from_path: str, to_path: str) -> StorageResponse:
        body = {
            "bucketId": self.bucket_id,
            "sourceKey": from_path,
            "destinationKey": to_path,
        }
        response = self._send(operation, "POST", f"/object/{operation}", json_body=body)
        return self._decode(response)

    def create_signed_url(
        self,
        path: str,
        expires_in: int,
        options: OptionsInput | UrlOptions = None,
    ) -> str:
        """Create a time-limited URL for a private object.

        Args:
            path: Object path, e.g. ``folder/image.png``.
            expires_in: Seconds until the URL expires; must be positive.
            options: ``download`` to serve the object as an attachment.

        Returns:
            The absolute signed URL, percent-encoded as a single token.

        Raises:
            ValueError: If ``expires_in`` is not a positive integer.
            TransportError: If the request fails.
            MalformedResponseError: If the response has no ``signedURL``.
        """
        _check_expires_in(expires_in)
        url_options = merge_options(UrlOptions, options)
        response = self._send(
            "create_signed_url",
            "POST",
            f"/object/sign/{storage_path(self.bucket_id, path)}",
            json_body={"expiresIn": expires_in},
        )
        data = self._decode(response).data
        signed_path = data.get("signedURL") if isinstance(data, dict) else None
        if not signed_path:
            raise MalformedResponseError(
                "Signed URL response is missing 'signedURL'", body=data
            )
        return self._signed_url(signed_path, url_options)

    def create_signed_urls(
        self,
        paths: Sequence[str],
        expires_in: int,
        options: OptionsInput | UrlOptions = None,
    ) -> list[SignedUrl]:
        """Create signed URLs for several objects in one request.

        Paths the service cannot sign come back with ``signed_url=None`` and
        the reported ``error``.
        """
        _check_expires_in(expires_in)
        url_options = merge_options(UrlOptions, options)
        response = self._send(
            "create_signed_urls",
            "POST",
            f"/object/sign/{self.bucket_id}",
            json_body={"paths": list(paths), "expires_in": expires_in},
        )
        data = self._decode(response).data
        if not isinstance(data, list):
            raise MalformedResponseError(
                "Batch signing response is not a list", body=data
            )

        results: list[SignedUrl] = []
        for entry in data:
            if not isinstance(entry, dict):
                raise MalformedResponseError(
                    "Batch signing entry is not an object", body=data
                )
            signed_path = entry.get("signedURL") or entry.get("signed_url")
            if signed_path:
                results.append(
                    SignedUrl(
                        path=entry.get("path"),
                        signed_url=self._signed_url(signed_path, url_options),
                    )
                )
            elif entry.get("error"):
                results.append(
                    SignedUrl(
                        path=entry.get("path"),
                        signed_url=None,
                        error=str(entry["error"]),
                    )
                )
            else:
                raise MalformedResponseError(
                    "Batch signing entry is missing 'signedURL'", body=data
                )
        return results

    def download(
        self, path: str, options: OptionsInput | UrlOptions = None
    ) -> ObjectDownload:
        """Stream an object from a private bucket.

        For public buckets, fetch the URL from ``get_public_url`` instead.
        ``options`` are validated but do not change the request.
        """
        merge_options(UrlOptions, options)
        response = self._send(
            "download",
            "GET",
            f"/object/{storage_path(self.bucket_id, path)}",
            stream=True,
        )
        return ObjectDownload(response)

    def get_public_url(
        self, path: str, options: OptionsInput | UrlOptions = None
    ) -> str:
        """Build the public URL of an object without contacting the service.

        Does not check that the bucket is public; for a private bucket the
        URL will not be downloadable.
        """
        url_options = merge_options(UrlOptions, options)
        return encode_url(
            f"{self._config.base_url}/object/public/"
            f"{storage_path(self.bucket_id, path)}{download_query(url_options)}"
        )

    def remove(self, paths: Sequence[str]) -> StorageResponse:
        """Delete objects by path; data lists the removed objects."""
        response = self._send(
            "remove",
            "DELETE",
            f"/object/{self.bucket_id}",
            json_body={"prefixes": list(paths)},
        )
        return self._decode(response)

    def _signed_url(self, signed_path: str, options: UrlOptions) -> str:
        return encode_url(
            f"{self._config.base_url}{signed_path}{download_query(options)}"
        )

    def _send(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        body: bytes | None = None,
        json_body: Any = None,
        headers: Mapping[str, str] | None = None,
        stream: bool = False,
    ) -> requests.Response:
        request_headers = dict(self._headers)
        if json_body is not None:
            request_headers["content-type"] = "application/json"
            body = json.dumps(json_body).encode("utf-8")
        if headers:
            request_headers.update(headers)

        start = time.perf_counter()
        try:
            response = self._transport.request(
                method,
                f"{self._config.base_url}{path}",
                headers=request_headers,
                body=body,
                stream=stream,
            )
        except TransportError as exc:
            status = str(exc.status_code) if exc.status_code is not None else "error"
            self._record(
                operation, method, path, status, start, request_headers, json_body
            )
            raise

        self._record(
            operation,
            method,
            path,
            str(response.status_code),
            start,
            request_headers,
            json_body,
        )
        return response

    def _record(
        self,
        operation: str,
        method: str,
        path: str,
        status: str,
        start: float,
        headers: Mapping[str, str],
        json_body: Any,
    ) -> None:
        elapsed = time.perf_counter() - start
        REQUESTS.labels(operation, method, status).inc()
        LATENCY.labels(operation, method).observe(elapsed)

        level = logging.INFO
        if status == "error" or status.startswith("5"):
            level = logging.ERROR
        elif status.startswith("4"):
            level = logging.WARNING

        duration_ms = round(elapsed * 1000, 3)
        extra_payload: dict[str, Any] = {
            "operation": operation,
            "method": method,
            "path": path,
            "status": status,
            "duration_ms": duration_ms,
            "bucket": self.bucket_id,
        }
        if self._trace_http:
            extra_payload["request_headers"] = _mask(headers)
            extra_payload["request_body"] = _mask(json_body)

        logger.log(
            level,
            "storage request operation=%s method=%s path=%s status=%s duration_ms=%.3f",
            operation,
            method,
            path,
            status,
            duration_ms,
            extra={"extra": extra_payload},
        )

    @staticmethod
    def _decode(response: requests.Response) -> StorageResponse:
        if not response.content:
            data = None
        else:
            try:
                data = response.json()
            except ValueError as exc:
                raise TransportError(
                    f"Storage API returned a body that is not valid JSON: {exc}",
                    status_code=response.status_code,
                    body=response.text,
                ) from exc
        return StorageResponse(
            status_code=response.status_code,
            data=data,
            headers=dict(response.headers),
        )

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> "StorageClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def get_storage_client(
    bucket_id: str | None = None,
    *,
    settings: Settings | None = None,
    transport: Transport | None = None,
) -> StorageClient:
    """Build a client from environment settings.

    Args:
        bucket_id: Bucket to operate on; defaults to ``STORAGE_BUCKET``.
        settings: Settings to use instead of ``get_settings()``.
        transport: Transport to use instead of a new ``RequestsTransport``.

    Raises:
        ConfigurationError: If the API key, storage host, or bucket is missing.
    """
    settings = settings or get_settings()
    bucket = bucket_id or settings.STORAGE_BUCKET
    if not bucket:
        raise ConfigurationError("bucket_id or STORAGE_BUCKET is required")
    config = ClientConfig.from_settings(settings, bucket)
    return StorageClient(
        config,
        transport=transport or RequestsTransport.from_settings(settings),
        trace_http=settings.TRACE_HTTP,
    )
