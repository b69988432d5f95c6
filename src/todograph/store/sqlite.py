from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from typing import Any, Generator, List, Mapping, Optional, Sequence, Tuple

from ..errors import StorageError
from ..models import TODO_ASSIGNMENTS, TODOS, USERS
from .base import Filter, Row, Store, Table, TableSchema, get_schema

logger = logging.getLogger(__name__)

_DDL = (
    f"""
    CREATE TABLE IF NOT EXISTS {TODOS} (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        completed INTEGER NOT NULL DEFAULT 0,
        flagged INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {USERS} (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        email TEXT NOT NULL,
        created_at TEXT NOT NULL
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {TODO_ASSIGNMENTS} (
        todo_id TEXT NOT NULL REFERENCES {TODOS}(id) ON DELETE CASCADE,
        user_id TEXT NOT NULL REFERENCES {USERS}(id) ON DELETE CASCADE,
        PRIMARY KEY (todo_id, user_id)
    )
    """,
    f"CREATE INDEX IF NOT EXISTS idx_{TODOS}_created_at ON {TODOS}(created_at)",
    f"CREATE INDEX IF NOT EXISTS idx_{USERS}_created_at ON {USERS}(created_at)",
    f"CREATE INDEX IF NOT EXISTS idx_{TODO_ASSIGNMENTS}_user_id ON {TODO_ASSIGNMENTS}(user_id)",
)


def _where(filters: Sequence[Filter]) -> Tuple[str, List[Any]]:
    clauses: List[str] = []
    params: List[Any] = []
    for f in filters:
        if f.op == "eq":
            clauses.append(f"{f.column} = ?")
            params.append(f.value)
        elif f.op == "neq":
            clauses.append(f"{f.column} != ?")
            params.append(f.value)
        elif f.op == "in":
            if not f.value:
                clauses.append("0")
                continue
            clauses.append(f"{f.column} IN ({', '.join('?' for _ in f.value)})")
            params.extend(f.value)
        else:
            clauses.append(f"{f.column} IS NOT NULL")
    where_sql = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    return where_sql, params


class SQLiteTable(Table):
    """A table of the SQLite store. Statements run on a fresh connection each."""

    def __init__(self, store: "SQLiteStore", schema: TableSchema) -> None:
        self.name = schema.name
        self._store = store
        self._schema = schema

    def _row_to_dict(self, row: sqlite3.Row) -> Row:
        out = {k: row[k] for k in row.keys()}
        for column in self._schema.booleans:
            if out.get(column) is not None:
                out[column] = bool(out[column])
        return out

    def _run(self, sql: str, params: Sequence[Any]) -> List[Row]:
        logger.debug("sqlite %s %s", " ".join(sql.split()), list(params))
        try:
            with self._store._conn() as conn:
                rows = conn.execute(sql, params).fetchall()
                return [self._row_to_dict(r) for r in rows]
        except sqlite3.Error as e:
            raise StorageError(str(e), table=self.name) from e

    def select(
        self,
        filters: Sequence[Filter] = (),
        order: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Row]:
        self._schema.check_columns(f.column for f in filters)
        where_sql, params = _where(filters)
        order_sql = ""
        if order is not None:
            self._schema.check_columns([order])
            direction = "DESC" if descending else "ASC"
            # rowid follows insertion order and breaks timestamp ties
            order_sql = f"ORDER BY {order} {direction}, rowid {direction}"
        limit_sql = ""
        if limit is not None:
            limit_sql = "LIMIT ?"
            params.append(max(limit, 0))
        return self._run(f"SELECT * FROM {self.name} {where_sql} {order_sql} {limit_sql}", params)

    def insert(self, rows: Sequence[Mapping[str, Any]]) -> List[Row]:
        prepared = [self._schema.with_defaults(r) for r in rows]
        if not prepared:
            return []
        columns = self._schema.columns
        placeholders = ", ".join("?" for _ in columns)
        values_sql = ", ".join(f"({placeholders})" for _ in prepared)
        params = [r[c] for r in prepared for c in columns]
        return self._run(
            f"INSERT INTO {self.name} ({', '.join(columns)}) VALUES {values_sql} RETURNING *",
            params,
        )

    def update(self, values: Mapping[str, Any], filters: Sequence[Filter]) -> List[Row]:
        self._require_filters(filters, "UPDATE")
        self._schema.check_columns(values.keys())
        self._schema.check_columns(f.column for f in filters)
        if not values:
            return self.select(filters)
        set_sql = ", ".join(f"{c} = ?" for c in values)
        where_sql, params = _where(filters)
        return self._run(
            f"UPDATE {self.name} SET {set_sql} {where_sql} RETURNING *",
            [*values.values(), *params],
        )

    def delete(self, filters: Sequence[Filter]) -> List[Row]:
        self._require_filters(filters, "DELETE")
        self._schema.check_columns(f.column for f in filters)
        where_sql, params = _where(filters)
        return self._run(f"DELETE FROM {self.name} {where_sql} RETURNING *", params)


# PUBLIC_INTERFACE
class SQLiteStore(Store):
    """
    Lightweight SQLite store; tables are created on first use of the path.
    """

    backend = "sqlite"

    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._init_db()

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def _init_db(self) -> None:
        try:
            with self._conn() as conn:
                for statement in _DDL:
                    conn.execute(statement)
        except sqlite3.Error as e:
            raise StorageError(f"cannot initialise {self._db_path}: {e}") from e
        logger.info("sqlite store ready at %s", self._db_path)

    def table(self, name: str) -> Table:
        return SQLiteTable(self, get_schema(name))
