"""requests-backed transport implementation.

Dependencies:
    - requests
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping

import requests

from supastorage.storage.errors import TransportError

if TYPE_CHECKING:
    from supastorage.common.config import Settings

# Cap on how much of an error body is echoed into exception messages
MAX_ERROR_TEXT = 512


def _error_message(response: requests.Response) -> tuple[str, Any]:
    """Extract a readable message and the decoded body from an error response."""
    try:
        body = response.json()
    except ValueError:
        text = response.text or ""
        return (text[:MAX_ERROR_TEXT] or response.reason or "no response body"), text
    if isinstance(body, dict):
        for key in ("message", "error", "msg"):
            value = body.get(key)
            if value:
                return str(value), body
    return str(body)[:MAX_ERROR_TEXT], body


class RequestsTransport:
    """Synchronous transport built on a shared ``requests.Session``.

    The session keeps connections pooled across calls. Adapters are left at
    their default of no retries.
    """

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self._timeout = timeout
        self._session = session or self._build_session()

    @classmethod
    def from_settings(cls, settings: "Settings") -> "RequestsTransport":
        return cls(timeout=float(settings.STORAGE_TIMEOUT_SECONDS))

    @staticmethod
    def _build_session() -> requests.Session:
        return requests.Session()

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        body: bytes | str | None = None,
        stream: bool = False,
    ) -> requests.Response:
        """Send one request and raise ``TransportError`` unless it succeeds."""
        try:
            response = self._session.request(
                method,
                url,
                headers=dict(headers),
                data=body,
                stream=stream,
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        if not 200 <= response.status_code < 300:
            message, error_body = _error_message(response)
            response.close()
            raise TransportError(
                f"Storage API returned {response.status_code}: {message}",
                status_code=response.status_code,
                body=error_body,
            )
        return response

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "RequestsTransport":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
