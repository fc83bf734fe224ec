"""HTTP transport layer used by the storage client."""

from .base import Transport
from .requests_transport import RequestsTransport

__all__ = [
    "RequestsTransport",
    "Transport",
]
