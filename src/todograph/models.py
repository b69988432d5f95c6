from __future__ import annotations

from typing import TypedDict

TODOS = "todos"
USERS = "users"
TODO_ASSIGNMENTS = "todo_assignments"


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A row of the ``todos`` table as returned by every store backend.

    Fields:
    - id: Opaque string identifier assigned by the store
    - title: Short title (1..200 chars, trimmed on input via schemas)
    - completed: Boolean completion flag
    - flagged: Boolean flag, independent of completed
    - created_at: ISO8601 creation timestamp assigned by the store
    """

    id: str
    title: str
    completed: bool
    flagged: bool
    created_at: str


# PUBLIC_INTERFACE
class UserEntity(TypedDict):
    """A row of the ``users`` table."""

    id: str
    name: str
    email: str
    created_at: str
