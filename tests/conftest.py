from __future__ import annotations

import pytest

from supastorage.common.config import get_settings
from supastorage.storage.client import StorageClient
from supastorage.storage.models import ClientConfig
from tests.storage.mock_transport import BASE_URL, BUCKET, TOKEN, MockTransport


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path):
    """Keep tests independent of the developer's environment and .env file."""
    for name in (
        "API_KEY",
        "REFERENCE_ID",
        "STORAGE_URL",
        "STORAGE_BUCKET",
        "STORAGE_TIMEOUT_SECONDS",
        "TRACE_HTTP",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()  # type: ignore[attr-defined]
    yield
    get_settings.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def config() -> ClientConfig:
    return ClientConfig(base_url=BASE_URL, auth_token=TOKEN, bucket_id=BUCKET)


@pytest.fixture()
def transport() -> MockTransport:
    return MockTransport()


@pytest.fixture()
def client(config, transport) -> StorageClient:
    return StorageClient(config, transport=transport)
