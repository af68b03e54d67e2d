import os
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from notice_board.errors import ConfigurationError

Base = declarative_base()


def _normalize_sqlalchemy_postgres_url(url: str) -> str:
    """
    Normalize a Postgres URL into a SQLAlchemy psycopg2 URL.

    Accepts:
    - postgresql://...
    - postgresql+psycopg2://...

    Returns:
    - postgresql+psycopg2://...
    """
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg2://", 1)
    return url


def _env_postgres_url_if_usable() -> Optional[str]:
    """
    Return a SQLAlchemy-ready URL from POSTGRES_URL, but only if it is usable.

    A credential-less POSTGRES_URL such as ``postgresql://localhost:5432/app``
    makes psycopg2 default the username to the OS user, so it is only accepted
    when it carries both user and password.
    """
    postgres_url = os.getenv("POSTGRES_URL")
    if not postgres_url:
        return None

    if not postgres_url.startswith(("postgresql://", "postgresql+psycopg2://")):
        return postgres_url

    normalized = _normalize_sqlalchemy_postgres_url(postgres_url)
    try:
        parsed = make_url(normalized)
    except (ArgumentError, ValueError) as exc:
        raise ConfigurationError(f"POSTGRES_URL is not a valid database URL: {exc}") from exc
    if parsed.username and parsed.password:
        return normalized
    return None


# PUBLIC_INTERFACE
def build_database_url() -> Optional[str]:
    """
    Build a SQLAlchemy database URL from the environment.

    Preference order:
    1) DATABASE_URL (any SQLAlchemy URL, e.g. sqlite:///notices.db)
    2) POSTGRES_URL (only if it includes explicit credentials)
    3) POSTGRES_USER/POSTGRES_PASSWORD/POSTGRES_DB/POSTGRES_PORT (+ POSTGRES_HOST, default localhost)

    Returns None when nothing usable is configured. Raises ConfigurationError
    for a malformed POSTGRES_URL.
    """
    database_url = (os.getenv("DATABASE_URL") or "").strip()
    if database_url:
        return _normalize_sqlalchemy_postgres_url(database_url)

    usable_env_url = _env_postgres_url_if_usable()
    if usable_env_url:
        return usable_env_url

    user = os.getenv("POSTGRES_USER")
    password = os.getenv("POSTGRES_PASSWORD")
    db = os.getenv("POSTGRES_DB")
    port = os.getenv("POSTGRES_PORT")
    if user and password and db and port:
        host = os.getenv("POSTGRES_HOST", "localhost")
        return f"postgresql+psycopg2://{user}:{password}@{host}:{port}/{db}"

    return None


# PUBLIC_INTERFACE
def make_engine(database_url: str, timeout: float = 10.0) -> Engine:
    """Create an engine; in-memory SQLite gets a single shared connection usable across threads."""
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)

    connect_args = {}
    if url.get_backend_name() == "postgresql":
        # statement_timeout bounds queries stuck behind locks or a slow server
        connect_args = {
            "connect_timeout": max(1, int(timeout)),
            "options": f"-c statement_timeout={int(timeout * 1000)}",
        }
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_timeout=timeout,
        connect_args=connect_args,
    )


# PUBLIC_INTERFACE
def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
