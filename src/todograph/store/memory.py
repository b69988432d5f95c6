from __future__ import annotations

import itertools
import logging
from threading import RLock
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..errors import StorageError
from .base import Filter, Row, Store, Table, TableSchema, get_schema

logger = logging.getLogger(__name__)


class InMemoryTable(Table):
    """
    Thread-safe in-memory table suitable for testing and default runtime.

    Rows are keyed by the table key; the key is unique like a primary key.
    """

    def __init__(self, schema: TableSchema, lock: RLock) -> None:
        self.name = schema.name
        self._schema = schema
        self._lock = lock
        self._rows: Dict[Tuple[Any, ...], Row] = {}
        self._seq: Dict[Tuple[Any, ...], int] = {}
        self._counter = itertools.count()

    def _key(self, row: Mapping[str, Any]) -> Tuple[Any, ...]:
        return tuple(row[c] for c in self._schema.key)

    def _matching(self, filters: Sequence[Filter]) -> List[Tuple[Tuple[Any, ...], Row]]:
        self._schema.check_columns(f.column for f in filters)
        return [(k, r) for k, r in self._rows.items() if all(f.matches(r) for f in filters)]

    def select(
        self,
        filters: Sequence[Filter] = (),
        order: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Row]:
        with self._lock:
            matched = self._matching(filters)
            if order is not None:
                self._schema.check_columns([order])
                # Insertion sequence breaks ties so equal timestamps keep creation order
                matched.sort(key=lambda kv: (kv[1][order], self._seq[kv[0]]), reverse=descending)
            if limit is not None:
                matched = matched[: max(limit, 0)]
            logger.debug("select %s filters=%s -> %d rows", self.name, filters, len(matched))
            # Return copies to avoid external mutation
            return [dict(r) for _, r in matched]

    def insert(self, rows: Sequence[Mapping[str, Any]]) -> List[Row]:
        with self._lock:
            prepared = [self._schema.with_defaults(r) for r in rows]
            keys = [self._key(r) for r in prepared]
            if len(set(keys)) != len(keys) or any(k in self._rows for k in keys):
                raise StorageError(
                    f'duplicate key value violates unique constraint "{self.name}_pkey"', table=self.name
                )
            for key, row in zip(keys, prepared):
                self._rows[key] = row
                self._seq[key] = next(self._counter)
            logger.debug("insert %s -> %d rows", self.name, len(prepared))
            return [dict(r) for r in prepared]

    def update(self, values: Mapping[str, Any], filters: Sequence[Filter]) -> List[Row]:
        self._require_filters(filters, "UPDATE")
        self._schema.check_columns(values.keys())
        if any(c in values for c in self._schema.key):
            raise StorageError(f"key columns of {self.name} cannot be updated", table=self.name)
        with self._lock:
            updated = []
            for key, row in self._matching(filters):
                row = {**row, **values}
                self._rows[key] = row
                updated.append(dict(row))
            logger.debug("update %s filters=%s -> %d rows", self.name, filters, len(updated))
            return updated

    def delete(self, filters: Sequence[Filter]) -> List[Row]:
        self._require_filters(filters, "DELETE")
        with self._lock:
            deleted = []
            for key, row in self._matching(filters):
                del self._rows[key]
                del self._seq[key]
                deleted.append(row)
            logger.debug("delete %s filters=%s -> %d rows", self.name, filters, len(deleted))
            return deleted


# PUBLIC_INTERFACE
class InMemoryStore(Store):
    """Process-local store holding every table in dictionaries."""

    backend = "memory"

    def __init__(self) -> None:
        self._lock = RLock()
        self._tables: Dict[str, InMemoryTable] = {}

    def table(self, name: str) -> Table:
        with self._lock:
            table = self._tables.get(name)
            if table is None:
                table = InMemoryTable(get_schema(name), self._lock)
                self._tables[name] = table
            return table
