from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from supastorage import __version__

ENV_FILE = Path(".env")

DEFAULT_HEADERS: dict[str, str] = {"X-Client-Info": f"supastorage-py/{__version__}"}


def _load_env_file() -> None:
    if not ENV_FILE.exists():
        return
    for raw_line in ENV_FILE.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "y", "on"}


@dataclass
class Settings:
    API_KEY: str | None = None
    REFERENCE_ID: str | None = None
    STORAGE_URL: str | None = None
    STORAGE_BUCKET: str | None = None
    STORAGE_TIMEOUT_SECONDS: float = 30.0
    TRACE_HTTP: bool = False

    def __post_init__(self) -> None:
        if self.STORAGE_TIMEOUT_SECONDS <= 0:
            raise ValueError("STORAGE_TIMEOUT_SECONDS must be positive.")

    @property
    def storage_url(self) -> str | None:
        """Root of the storage REST API, or None when no host is configured."""
        if self.STORAGE_URL:
            return self.STORAGE_URL.rstrip("/")
        if self.REFERENCE_ID:
            return f"https://{self.REFERENCE_ID}.supabase.co/storage/v1"
        return None

    @classmethod
    def from_environment(cls) -> "Settings":
        _load_env_file()
        return cls(
            API_KEY=os.environ.get("API_KEY") or None,
            REFERENCE_ID=os.environ.get("REFERENCE_ID") or None,
            STORAGE_URL=os.environ.get("STORAGE_URL") or None,
            STORAGE_BUCKET=os.environ.get("STORAGE_BUCKET") or None,
            STORAGE_TIMEOUT_SECONDS=float(
                os.environ.get("STORAGE_TIMEOUT_SECONDS", cls.STORAGE_TIMEOUT_SECONDS)
            ),
            TRACE_HTTP=_as_bool(os.environ.get("TRACE_HTTP"), cls.TRACE_HTTP),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_environment()
