"""Tests for environment-driven settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from supastorage.common.config import Settings, get_settings


def test_defaults_without_environment():
    settings = Settings.from_environment()

    assert settings.API_KEY is None
    assert settings.storage_url is None
    assert settings.STORAGE_TIMEOUT_SECONDS == 30.0
    assert settings.TRACE_HTTP is False


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("API_KEY", "secret")
    monkeypatch.setenv("REFERENCE_ID", "abcd")
    monkeypatch.setenv("STORAGE_BUCKET", "docs")
    monkeypatch.setenv("STORAGE_TIMEOUT_SECONDS", "7.5")
    monkeypatch.setenv("TRACE_HTTP", "yes")

    settings = Settings.from_environment()

    assert settings.API_KEY == "secret"
    assert settings.storage_url == "https://abcd.supabase.co/storage/v1"
    assert settings.STORAGE_BUCKET == "docs"
    assert settings.STORAGE_TIMEOUT_SECONDS == 7.5
    assert settings.TRACE_HTTP is True


def test_explicit_storage_url_overrides_reference_id():
    settings = Settings(REFERENCE_ID="abcd", STORAGE_URL="http://localhost:5000/storage/v1/")

    assert settings.storage_url == "http://localhost:5000/storage/v1"


def test_env_file_fills_missing_values(monkeypatch):
    Path(".env").write_text(
        "# local credentials\nAPI_KEY='from-file'\nREFERENCE_ID=\"file-ref\"\nnot a pair\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("REFERENCE_ID", "env-ref")

    settings = Settings.from_environment()

    assert settings.API_KEY == "from-file"
    assert settings.REFERENCE_ID == "env-ref"


def test_rejects_non_positive_timeout():
    with pytest.raises(ValueError):
        Settings(STORAGE_TIMEOUT_SECONDS=0)


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
