"""Transport protocol consumed by the storage client.

The client delegates every network exchange to a transport: perform one
HTTP request and return the response, or raise ``TransportError``.
"""

from __future__ import annotations

from typing import Mapping, Protocol

import requests


class Transport(Protocol):
    """Protocol for the HTTP executor behind ``StorageClient``.

    Implementations must not retry; a failed exchange is reported to the
    caller exactly once.
    """

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        body: bytes | str | None = None,
        stream: bool = False,
    ) -> requests.Response:
        """Send a single HTTP request.

        Args:
            method: HTTP method, e.g. ``"POST"``.
            url: Absolute request URL.
            headers: Complete header set for the request.
            body: Raw request body, already serialized.
            stream: Defer reading the response body until iterated.

        Returns:
            The response for any 2xx status.

        Raises:
            TransportError: On network failure or a non-2xx status.
        """
        ...

    def close(self) -> None:
        """Release pooled connections."""
        ...
