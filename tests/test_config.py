import inspect

import pytest

from notice_board.config import DEFAULT_ALLOWED_ORIGINS, Settings, get_settings
from notice_board.errors import ConfigurationError
from notice_board.stores import MemoryNoticeStore, SqlNoticeStore, SupabaseNoticeStore, build_store

ENV_KEYS = [
    "STORE_BACKEND",
    "SUPABASE_URL",
    "SUPABASE_KEY",
    "NOTICES_TABLE",
    "STORE_TIMEOUT_SECONDS",
    "DATABASE_URL",
    "POSTGRES_URL",
    "POSTGRES_USER",
    "POSTGRES_PASSWORD",
    "POSTGRES_DB",
    "POSTGRES_PORT",
    "POSTGRES_HOST",
    "ALLOWED_ORIGINS",
    "ALLOWED_ORIGIN_REGEX",
    "HOST",
    "PORT",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    # keep load_dotenv away from any .env in the working tree
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("notice_board.config.load_dotenv", lambda: False)


def test_defaults():
    settings = get_settings()

    assert settings.store_backend == "memory"
    assert settings.notices_table == "avisos"
    assert settings.store_timeout == 10.0
    assert settings.port == 3000
    assert settings.allowed_origins == DEFAULT_ALLOWED_ORIGINS
    assert settings.allowed_origin_regex is None
    assert isinstance(build_store(settings), MemoryNoticeStore)


@pytest.mark.parametrize(
    "env",
    [
        {},
        {"SUPABASE_URL": "https://x.supabase.co"},
        {"SUPABASE_KEY": "secret"},
        {"SUPABASE_URL": "  ", "SUPABASE_KEY": "secret"},
    ],
)
def test_supabase_backend_requires_url_and_key(monkeypatch, env):
    monkeypatch.setenv("STORE_BACKEND", "supabase")
    for key, value in env.items():
        monkeypatch.setenv(key, value)

    with pytest.raises(ConfigurationError):
        get_settings()


def test_supabase_settings_are_read(monkeypatch):
    monkeypatch.setenv("STORE_BACKEND", "Supabase")
    monkeypatch.setenv("SUPABASE_URL", "https://x.supabase.co")
    monkeypatch.setenv("SUPABASE_KEY", "secret")
    monkeypatch.setenv("NOTICES_TABLE", "mural")
    monkeypatch.setenv("STORE_TIMEOUT_SECONDS", "2.5")

    settings = get_settings()

    assert settings.store_backend == "supabase"
    assert (settings.supabase_url, settings.supabase_key) == ("https://x.supabase.co", "secret")
    assert settings.notices_table == "mural"
    assert settings.store_timeout == 2.5


def test_sql_backend_requires_database_url(monkeypatch):
    monkeypatch.setenv("STORE_BACKEND", "sql")
    with pytest.raises(ConfigurationError):
        get_settings()


def test_sql_backend_from_database_url(monkeypatch, tmp_path):
    monkeypatch.setenv("STORE_BACKEND", "sql")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'n.db'}")

    store = build_store(get_settings())

    assert isinstance(store, SqlNoticeStore)
    store.close()


def test_postgres_url_without_credentials_is_ignored(monkeypatch):
    monkeypatch.setenv("STORE_BACKEND", "sql")
    monkeypatch.setenv("POSTGRES_URL", "postgresql://localhost:5432/app")
    with pytest.raises(ConfigurationError):
        get_settings()


def test_database_url_is_not_resolved_for_other_backends(monkeypatch):
    monkeypatch.setenv("POSTGRES_URL", "postgresql://user:pw@db:5432/app")
    assert get_settings().database_url is None


@pytest.mark.parametrize("url", ["postgresql://user:pw@db:notaport/app", "postgresql://user:pw@[::1/app"])
def test_malformed_postgres_url_is_ignored_by_memory_backend(monkeypatch, url):
    monkeypatch.setenv("POSTGRES_URL", url)
    assert get_settings().store_backend == "memory"


@pytest.mark.parametrize("url", ["postgresql://user:pw@db:notaport/app", "postgresql://user:pw@[::1/app"])
def test_malformed_postgres_url_is_a_configuration_error_for_sql(monkeypatch, url):
    monkeypatch.setenv("STORE_BACKEND", "sql")
    monkeypatch.setenv("POSTGRES_URL", url)
    with pytest.raises(ConfigurationError) as excinfo:
        get_settings()
    assert excinfo.value.__cause__ is not None


def test_postgres_url_is_normalized(monkeypatch):
    monkeypatch.setenv("STORE_BACKEND", "sql")
    monkeypatch.setenv("POSTGRES_URL", "postgresql://user:pw@db:5432/app")
    assert get_settings().database_url == "postgresql+psycopg2://user:pw@db:5432/app"


def test_postgres_parts_compose_a_url(monkeypatch):
    monkeypatch.setenv("STORE_BACKEND", "sql")
    monkeypatch.setenv("POSTGRES_USER", "user")
    monkeypatch.setenv("POSTGRES_PASSWORD", "pw")
    monkeypatch.setenv("POSTGRES_DB", "app")
    monkeypatch.setenv("POSTGRES_PORT", "5001")

    assert get_settings().database_url == "postgresql+psycopg2://user:pw@localhost:5001/app"


def test_unknown_backend_is_rejected(monkeypatch):
    monkeypatch.setenv("STORE_BACKEND", "redis")
    with pytest.raises(ConfigurationError):
        get_settings()


@pytest.mark.parametrize("key", ["PORT", "STORE_TIMEOUT_SECONDS"])
def test_non_numeric_values_are_rejected(monkeypatch, key):
    monkeypatch.setenv(key, "soon")
    with pytest.raises(ConfigurationError):
        get_settings()


def test_allowed_origins_are_split(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, ,https://b.example")
    assert get_settings().allowed_origins == ["https://a.example", "https://b.example"]


def test_store_defaults_come_from_settings_defaults():
    settings = Settings()

    for store_class in (SqlNoticeStore, SupabaseNoticeStore):
        timeout = inspect.signature(store_class).parameters["timeout"].default
        assert timeout == settings.store_timeout
    assert inspect.signature(SupabaseNoticeStore).parameters["table"].default == settings.notices_table
