from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

_BACKENDS = {"memory", "sqlite", "postgrest"}


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'memory' (default), 'sqlite' or 'postgrest'
    - SQLITE_DB_PATH: path to sqlite db file. Default './data/todos.db'
    - POSTGREST_URL: base URL of the hosted store (e.g. 'https://xyz.supabase.co/rest/v1')
    - POSTGREST_API_KEY: API key sent as 'apikey' and bearer token
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - GRAPHIQL: 'true' (default) to serve the GraphiQL IDE on /graphql
    - LOG_LEVEL: root log level for the app loggers, 'INFO' by default
    """

    persistence_backend: str = "memory"
    sqlite_db_path: str = "./data/todos.db"
    postgrest_url: Optional[str] = None
    postgrest_api_key: Optional[str] = None
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])
    graphiql: bool = True
    log_level: str = "INFO"


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_bool(value: str, default: bool = False) -> bool:
    v = value.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("PERSISTENCE_BACKEND", "memory").strip().lower()
    if backend not in _BACKENDS:
        # Fallback to memory if unsupported
        backend = "memory"

    return Settings(
        persistence_backend=backend,
        sqlite_db_path=_get_env("SQLITE_DB_PATH", "./data/todos.db").strip(),
        postgrest_url=os.getenv("POSTGREST_URL") or None,
        postgrest_api_key=os.getenv("POSTGREST_API_KEY") or None,
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        graphiql=_parse_bool(_get_env("GRAPHIQL", "true"), True),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
    )
