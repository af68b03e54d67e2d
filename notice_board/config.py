"""Configuration handling for the notice board service."""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

from notice_board.db import build_database_url
from notice_board.errors import ConfigurationError

BACKENDS = ("memory", "supabase", "sql")
DEFAULT_BACKEND = "memory"
DEFAULT_TABLE = "avisos"
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
DEFAULT_ALLOWED_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    store_backend: str = DEFAULT_BACKEND
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    notices_table: str = DEFAULT_TABLE
    store_timeout: float = DEFAULT_TIMEOUT_SECONDS
    database_url: Optional[str] = None
    allowed_origins: List[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_ORIGINS))
    allowed_origin_regex: Optional[str] = None
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"


def _parse_allowed_origins() -> List[str]:
    """
    Parse comma-separated ALLOWED_ORIGINS from env.

    Falls back to localhost dev origins when not set.
    """
    raw = (os.getenv("ALLOWED_ORIGINS") or "").strip()
    if not raw:
        return list(DEFAULT_ALLOWED_ORIGINS)

    origins = [o.strip() for o in raw.split(",")]
    return [o for o in origins if o]


def _parse_number(key: str, default, cast):
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{key} must be a number, got {raw!r}") from exc


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """
    Load settings from the environment (and a .env file if present).

    Raises ConfigurationError when the selected backend lacks its required
    connection parameters, so the process fails before serving requests.
    """
    load_dotenv()

    backend = (os.getenv("STORE_BACKEND") or DEFAULT_BACKEND).strip().lower()
    if backend not in BACKENDS:
        raise ConfigurationError(f"STORE_BACKEND must be one of {', '.join(BACKENDS)}, got {backend!r}")

    supabase_url = (os.getenv("SUPABASE_URL") or "").strip() or None
    supabase_key = (os.getenv("SUPABASE_KEY") or "").strip() or None
    if backend == "supabase" and (not supabase_url or not supabase_key):
        raise ConfigurationError(
            "Supabase configuration missing: set SUPABASE_URL and SUPABASE_KEY (e.g. in .env)."
        )

    database_url = None
    if backend == "sql":
        database_url = build_database_url()
        if not database_url:
            raise ConfigurationError("SQL backend selected but no DATABASE_URL/POSTGRES_* settings found.")

    return Settings(
        store_backend=backend,
        supabase_url=supabase_url,
        supabase_key=supabase_key,
        notices_table=(os.getenv("NOTICES_TABLE") or DEFAULT_TABLE).strip(),
        store_timeout=_parse_number("STORE_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS, float),
        database_url=database_url,
        allowed_origins=_parse_allowed_origins(),
        allowed_origin_regex=(os.getenv("ALLOWED_ORIGIN_REGEX") or "").strip() or None,
        host=(os.getenv("HOST") or DEFAULT_HOST).strip(),
        port=_parse_number("PORT", DEFAULT_PORT, int),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper(),
    )
