"""Error types raised by the storage client."""

from __future__ import annotations


class StorageError(RuntimeError):
    """Base class for all storage client failures."""


class ConfigurationError(StorageError):
    """Raised when required credentials, host, or bucket are missing."""


class TransportError(StorageError):
    """Raised when the HTTP exchange itself fails.

    Covers network failures, non-2xx responses, and bodies that cannot be
    decoded. ``status_code`` is ``None`` when no response was received.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: object = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body


class MalformedResponseError(StorageError):
    """Raised when a decoded response lacks a field the client needs."""

    def __init__(self, message: str, *, body: object = None) -> None:
        super().__init__(message)
        self.body = body
