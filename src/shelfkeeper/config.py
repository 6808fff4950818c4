# ABOUTME: Runtime settings for shelfkeeper, read from environment variables.
# ABOUTME: Defaults place the database and blob storage under ~/.shelfkeeper.

import os
from dataclasses import dataclass
from pathlib import Path

from shelfkeeper.metadata.http import DEFAULT_TIMEOUT
from shelfkeeper.metadata.retailer import DEFAULT_URL_TEMPLATE

DEFAULT_HOME = Path.home() / ".shelfkeeper"
DEFAULT_DB_PATH = DEFAULT_HOME / "shelfkeeper.db"
DEFAULT_STORAGE_DIR = DEFAULT_HOME / "storage"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 5000

_TRUTHY = {"1", "true", "yes", "on"}


def default_public_url(host: str, port: int) -> str:
    """Where `shelfkeeper serve` on host:port publishes blob storage."""
    return f"http://{host}:{port}/storage"


DEFAULT_PUBLIC_URL = default_public_url(DEFAULT_HOST, DEFAULT_PORT)


def _env_path(name: str, default: Path) -> Path:
    value = os.environ.get(name)
    return Path(value).expanduser() if value else default


@dataclass(frozen=True)
class Settings:
    """Everything the lookup pipeline, CLI, and web app need to be wired up."""

    db_path: Path = DEFAULT_DB_PATH
    storage_dir: Path = DEFAULT_STORAGE_DIR
    public_url: str = DEFAULT_PUBLIC_URL
    timeout: float = DEFAULT_TIMEOUT
    google_api_key: str | None = None
    retailer_url: str = DEFAULT_URL_TEMPLATE
    retailer_enabled: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from SHELFKEEPER_* and GOOGLE_BOOKS_API_KEY.

        Raises:
            ValueError: If SHELFKEEPER_TIMEOUT is not a number.
        """
        timeout_raw = os.environ.get("SHELFKEEPER_TIMEOUT")
        try:
            timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT
        except ValueError as exc:
            raise ValueError(f"SHELFKEEPER_TIMEOUT must be a number, got {timeout_raw!r}") from exc

        disabled = os.environ.get("SHELFKEEPER_DISABLE_RETAILER", "").strip().lower()
        return cls(
            db_path=_env_path("SHELFKEEPER_DB", DEFAULT_DB_PATH),
            storage_dir=_env_path("SHELFKEEPER_STORAGE_DIR", DEFAULT_STORAGE_DIR),
            public_url=os.environ.get("SHELFKEEPER_PUBLIC_URL", DEFAULT_PUBLIC_URL).rstrip("/"),
            timeout=timeout,
            google_api_key=os.environ.get("GOOGLE_BOOKS_API_KEY") or None,
            retailer_url=os.environ.get("SHELFKEEPER_RETAILER_URL", DEFAULT_URL_TEMPLATE),
            retailer_enabled=disabled not in _TRUTHY,
        )
