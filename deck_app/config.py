"""Runtime settings read from the environment (and an optional .env file)."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from urllib.parse import urlparse

from dotenv import load_dotenv

from deck_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from deck_app.constants.store_constants import (
    DEFAULT_STORE_TABLE,
    DEFAULT_STORE_TIMEOUT_SECONDS,
    PLACEHOLDER_VALUES,
)

BACKEND_REST = "rest"
BACKEND_MEMORY = "memory"
BACKEND_UNCONFIGURED = "unconfigured"


@dataclass(frozen=True, slots=True)
class Settings:
    """Configuration resolved once at startup and passed down explicitly."""

    store_url: str | None = None
    store_key: str | None = None
    store_table: str = DEFAULT_STORE_TABLE
    store_timeout: float = DEFAULT_STORE_TIMEOUT_SECONDS
    store_backend: str | None = None
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    catalog_path: Path | None = None

    @property
    def has_store_credentials(self) -> bool:
        if not self.store_url or not self.store_key:
            return False
        if self.store_url in PLACEHOLDER_VALUES or self.store_key in PLACEHOLDER_VALUES:
            return False
        return _is_valid_url(self.store_url)

    def resolved_backend(self) -> str:
        if self.store_backend == BACKEND_MEMORY:
            return BACKEND_MEMORY
        if self.has_store_credentials:
            return BACKEND_REST
        return BACKEND_UNCONFIGURED


def load_settings(env_file: str | os.PathLike[str] | None = None) -> Settings:
    """Build settings from ``DECKTALK_*`` variables, falling back to Supabase names."""
    load_dotenv(env_file)
    catalog_path = os.environ.get("DECKTALK_CATALOG_PATH")
    return Settings(
        store_url=os.environ.get("DECKTALK_STORE_URL") or os.environ.get("SUPABASE_URL"),
        store_key=os.environ.get("DECKTALK_STORE_KEY") or os.environ.get("SUPABASE_ANON_KEY"),
        store_table=os.environ.get("DECKTALK_STORE_TABLE", DEFAULT_STORE_TABLE),
        store_timeout=float(os.environ.get("DECKTALK_STORE_TIMEOUT", DEFAULT_STORE_TIMEOUT_SECONDS)),
        store_backend=(os.environ.get("DECKTALK_STORE_BACKEND") or "").strip().lower() or None,
        host=os.environ.get("DECKTALK_HOST", DEFAULT_HOST),
        port=int(os.environ.get("DECKTALK_PORT", DEFAULT_PORT)),
        catalog_path=Path(catalog_path) if catalog_path else None,
    )


def _is_valid_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)
