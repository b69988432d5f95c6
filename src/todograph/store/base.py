from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..errors import StorageError
from ..models import TODO_ASSIGNMENTS, TODOS, USERS

Row = Dict[str, Any]

_OPS = {"eq", "neq", "in", "not_null"}


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class Filter:
    """
    A single column predicate understood by every backend.

    Supported operators: eq, neq, in, not_null.
    """

    column: str
    op: str
    value: Any = None

    def __post_init__(self) -> None:
        if self.op not in _OPS:
            raise ValueError(f"unsupported filter operator: {self.op}")

    @classmethod
    def eq(cls, column: str, value: Any) -> "Filter":
        return cls(column, "eq", value)

    @classmethod
    def neq(cls, column: str, value: Any) -> "Filter":
        return cls(column, "neq", value)

    @classmethod
    def in_(cls, column: str, values: Iterable[Any]) -> "Filter":
        return cls(column, "in", tuple(values))

    @classmethod
    def not_null(cls, column: str) -> "Filter":
        return cls(column, "not_null")

    def matches(self, row: Mapping[str, Any]) -> bool:
        current = row.get(self.column)
        if self.op == "eq":
            return current == self.value
        if self.op == "neq":
            return current is not None and current != self.value
        if self.op == "in":
            return current in self.value
        return current is not None


@dataclass(frozen=True)
class TableSchema:
    """
    Column layout of a table for the self-hosted backends.

    The hosted backend relies on the remote schema instead.
    """

    name: str
    columns: Tuple[str, ...]
    key: Tuple[str, ...]
    required: Tuple[str, ...] = ()
    booleans: Tuple[str, ...] = ()
    defaults: Mapping[str, Callable[[], Any]] = field(default_factory=dict)

    def check_columns(self, names: Iterable[str]) -> None:
        for name in names:
            if name not in self.columns:
                raise StorageError(
                    f'column "{name}" of relation "{self.name}" does not exist', table=self.name
                )

    def with_defaults(self, row: Mapping[str, Any]) -> Row:
        self.check_columns(row.keys())
        out: Row = {}
        for column in self.columns:
            if column in row and row[column] is not None:
                out[column] = row[column]
            elif column in self.defaults:
                out[column] = self.defaults[column]()
            else:
                out[column] = row.get(column)
        for column in self.required:
            if out.get(column) is None:
                raise StorageError(
                    f'null value in column "{column}" of relation "{self.name}" violates not-null constraint',
                    table=self.name,
                )
        return out


SCHEMAS: Dict[str, TableSchema] = {
    TODOS: TableSchema(
        name=TODOS,
        columns=("id", "title", "completed", "flagged", "created_at"),
        key=("id",),
        required=("title",),
        booleans=("completed", "flagged"),
        defaults={
            "id": new_id,
            "completed": lambda: False,
            "flagged": lambda: False,
            "created_at": utcnow_iso,
        },
    ),
    USERS: TableSchema(
        name=USERS,
        columns=("id", "name", "email", "created_at"),
        key=("id",),
        required=("name", "email"),
        defaults={"id": new_id, "created_at": utcnow_iso},
    ),
    TODO_ASSIGNMENTS: TableSchema(
        name=TODO_ASSIGNMENTS,
        columns=("todo_id", "user_id"),
        key=("todo_id", "user_id"),
        required=("todo_id", "user_id"),
    ),
}


def get_schema(name: str) -> TableSchema:
    try:
        return SCHEMAS[name]
    except KeyError:
        raise StorageError(f'relation "{name}" does not exist', table=name) from None


# PUBLIC_INTERFACE
class Table(ABC):
    """
    Table-scoped operations of the persistence collaborator.

    Every method returns plain dict rows and raises StorageError on failure.
    """

    name: str

    @abstractmethod
    def select(
        self,
        filters: Sequence[Filter] = (),
        order: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Row]:
        """Return rows matching all filters, optionally ordered and limited."""

    @abstractmethod
    def insert(self, rows: Sequence[Mapping[str, Any]]) -> List[Row]:
        """Insert rows and return them as stored (server defaults applied)."""

    @abstractmethod
    def update(self, values: Mapping[str, Any], filters: Sequence[Filter]) -> List[Row]:
        """Apply values to rows matching filters and return the updated rows."""

    @abstractmethod
    def delete(self, filters: Sequence[Filter]) -> List[Row]:
        """Delete rows matching filters and return the deleted rows."""

    def _require_filters(self, filters: Sequence[Filter], verb: str) -> None:
        if not filters:
            raise StorageError(f"{verb} requires a filter", table=self.name)


# PUBLIC_INTERFACE
class Store(ABC):
    """A persistence collaborator exposing named tables."""

    backend: str

    @abstractmethod
    def table(self, name: str) -> Table:
        """Return the table called ``name``."""

    def close(self) -> None:
        """Release backend resources."""
