from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, cast

from .models import TODO_ASSIGNMENTS, TODOS, USERS, TodoEntity, UserEntity
from .schemas import TodoCreate, TodoUpdate, UserCreate
from .store import Filter, Store

logger = logging.getLogger(__name__)


def _first(rows: list) -> Optional[dict]:
    return rows[0] if rows else None


# PUBLIC_INTERFACE
class TodoRepository:
    """CRUD over the ``todos`` table."""

    def __init__(self, store: Store) -> None:
        self._todos = store.table(TODOS)
        self._assignments = store.table(TODO_ASSIGNMENTS)

    def list(self) -> List[TodoEntity]:
        """Return every todo, newest first."""
        return cast(List[TodoEntity], self._todos.select(order="created_at", descending=True))

    def get(self, todo_id: str) -> Optional[TodoEntity]:
        """Return a todo by id, or None if not found."""
        return cast(Optional[TodoEntity], _first(self._todos.select([Filter.eq("id", todo_id)], limit=1)))

    def create(self, data: TodoCreate) -> TodoEntity:
        """Insert a todo that starts neither completed nor flagged."""
        row = self._todos.insert([{"title": data.title, "completed": False, "flagged": False}])[0]
        logger.info("created todo %s", row["id"])
        return cast(TodoEntity, row)

    def update(self, todo_id: str, data: TodoUpdate) -> Optional[TodoEntity]:
        """
        Apply only the fields present in ``data``; omitted fields are left untouched.
        Return the updated entity or None if not found.
        """
        changes = data.changes()
        if not changes:
            return self.get(todo_id)
        row = _first(self._todos.update(changes, [Filter.eq("id", todo_id)]))
        if row is not None:
            logger.info("updated todo %s fields=%s", todo_id, sorted(changes))
        return cast(Optional[TodoEntity], row)

    def toggle_flag(self, todo_id: str) -> Optional[TodoEntity]:
        current = self.get(todo_id)
        if current is None:
            return None
        return self.update(todo_id, TodoUpdate(flagged=not current["flagged"]))

    def delete(self, todo_id: str) -> bool:
        """
        Delete a todo and its assignment rows.

        No existence check is made: deleting an unknown id succeeds.
        """
        self._assignments.delete([Filter.eq("todo_id", todo_id)])
        self._todos.delete([Filter.eq("id", todo_id)])
        logger.info("deleted todo %s", todo_id)
        return True

    def delete_all(self) -> bool:
        """Delete every todo with one filtered statement per table."""
        self._assignments.delete([Filter.not_null("todo_id")])
        removed = self._todos.delete([Filter.not_null("id")])
        logger.info("deleted all todos (%d rows)", len(removed))
        return True


# PUBLIC_INTERFACE
class UserRepository:
    """CRUD over the ``users`` table. Updates replace every field."""

    def __init__(self, store: Store) -> None:
        self._users = store.table(USERS)
        self._assignments = store.table(TODO_ASSIGNMENTS)

    def list(self) -> List[UserEntity]:
        return cast(List[UserEntity], self._users.select(order="created_at", descending=True))

    def get(self, user_id: str) -> Optional[UserEntity]:
        return cast(Optional[UserEntity], _first(self._users.select([Filter.eq("id", user_id)], limit=1)))

    def create(self, data: UserCreate) -> UserEntity:
        row = self._users.insert([{"name": data.name, "email": data.email}])[0]
        logger.info("created user %s", row["id"])
        return cast(UserEntity, row)

    def update(self, user_id: str, data: UserCreate) -> Optional[UserEntity]:
        row = _first(self._users.update({"name": data.name, "email": data.email}, [Filter.eq("id", user_id)]))
        if row is not None:
            logger.info("updated user %s", user_id)
        return cast(Optional[UserEntity], row)

    def delete(self, user_id: str) -> bool:
        """Delete a user and clear it from every todo it was assigned to."""
        self._assignments.delete([Filter.eq("user_id", user_id)])
        self._users.delete([Filter.eq("id", user_id)])
        logger.info("deleted user %s", user_id)
        return True


# PUBLIC_INTERFACE
class AssignmentRepository:
    """Many-to-many links between todos and users."""

    def __init__(self, store: Store) -> None:
        self._assignments = store.table(TODO_ASSIGNMENTS)
        self._todos = store.table(TODOS)
        self._users = store.table(USERS)

    def _pair(self, todo_id: str, user_id: str) -> List[Filter]:
        return [Filter.eq("todo_id", todo_id), Filter.eq("user_id", user_id)]

    def assign(self, todo_id: str, user_id: str) -> bool:
        """Link a user to a todo. Return False when the pair was already linked."""
        if self._assignments.select(self._pair(todo_id, user_id), limit=1):
            return False
        self._assignments.insert([{"todo_id": todo_id, "user_id": user_id}])
        logger.info("assigned todo %s to user %s", todo_id, user_id)
        return True

    def unassign(self, todo_id: str, user_id: str) -> bool:
        removed = self._assignments.delete(self._pair(todo_id, user_id))
        if removed:
            logger.info("unassigned todo %s from user %s", todo_id, user_id)
        return bool(removed)

    def users_for_todo(self, todo_id: str) -> List[UserEntity]:
        links = self._assignments.select([Filter.eq("todo_id", todo_id)])
        if not links:
            return []
        ids = [link["user_id"] for link in links]
        return cast(List[UserEntity], self._users.select([Filter.in_("id", ids)], order="created_at"))

    def todos_for_user(self, user_id: str) -> List[TodoEntity]:
        links = self._assignments.select([Filter.eq("user_id", user_id)])
        if not links:
            return []
        ids = [link["todo_id"] for link in links]
        return cast(List[TodoEntity], self._todos.select([Filter.in_("id", ids)], order="created_at"))


@dataclass(frozen=True)
class Repositories:
    todos: TodoRepository
    users: UserRepository
    assignments: AssignmentRepository


# PUBLIC_INTERFACE
def build_repositories(store: Store) -> Repositories:
    """Bundle the repositories sharing one store."""
    return Repositories(
        todos=TodoRepository(store),
        users=UserRepository(store),
        assignments=AssignmentRepository(store),
    )
