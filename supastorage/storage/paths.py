"""Object path normalization and URL assembly."""

from __future__ import annotations

import re
from urllib.parse import quote_plus

from supastorage.storage.options import UrlOptions

_SLASH_RUN = re.compile(r"/+")


def clean_path(path: str) -> str:
    """Collapse repeated slashes and drop one leading and one trailing slash.

    The result never starts or ends with ``/`` and never contains ``//``;
    cleaning an already clean path returns it unchanged.
    """
    collapsed = _SLASH_RUN.sub("/", path)
    if collapsed.startswith("/"):
        collapsed = collapsed[1:]
    if collapsed.endswith("/"):
        collapsed = collapsed[:-1]
    return collapsed


def storage_path(bucket_id: str, path: str) -> str:
    """Return ``{bucket_id}/{clean path}``, or the bare bucket id for an empty path."""
    cleaned = clean_path(path)
    if not cleaned:
        return bucket_id
    return f"{bucket_id}/{cleaned}"


def download_query(options: UrlOptions) -> str:
    download = options.download
    if not download:
        return ""
    return "?download=true"


def encode_url(url: str) -> str:
    """Percent-encode the whole URL as a single opaque token."""
    return quote_plus(url, safe="")
