"""Persistence collaborator: table-scoped CRUD over todos, users and assignments."""
from __future__ import annotations

import logging
from typing import Optional

from ..settings import Settings, get_settings
from .base import Filter, Row, Store, Table
from .memory import InMemoryStore

logger = logging.getLogger(__name__)

__all__ = ["Filter", "Row", "Store", "Table", "InMemoryStore", "get_store"]


# PUBLIC_INTERFACE
def get_store(settings: Optional[Settings] = None) -> Store:
    """
    Factory to return the configured store based on settings.
    - memory: InMemoryStore
    - sqlite: SQLiteStore at settings.sqlite_db_path
    - postgrest: PostgrestStore at settings.postgrest_url (falls back to memory when unset)
    """
    settings = settings or get_settings()
    if settings.persistence_backend == "sqlite":
        from .sqlite import SQLiteStore

        return SQLiteStore(settings.sqlite_db_path)
    if settings.persistence_backend == "postgrest":
        if not settings.postgrest_url:
            logger.warning("PERSISTENCE_BACKEND=postgrest without POSTGREST_URL; using memory store")
            return InMemoryStore()
        from .postgrest import PostgrestStore

        return PostgrestStore(settings.postgrest_url, settings.postgrest_api_key)
    return InMemoryStore()
