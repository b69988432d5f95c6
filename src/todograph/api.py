"""
GraphQL API: object types, queries and mutations.

Resolvers are thin: each one runs a blocking repository call in the
threadpool and lets storage errors propagate unchanged into the GraphQL
``errors`` list. Field names keep the published wire names (``created_at``, ``assignedUsers``).
"""
from typing import Callable, List, Optional, Type, TypeVar

import strawberry
from pydantic import BaseModel, ValidationError
from starlette.concurrency import run_in_threadpool
from strawberry.types import Info

from .context import Context
from .errors import InvalidInputError, NotFoundError
from .models import TodoEntity, UserEntity
from .schemas import TodoCreate, TodoUpdate, UserCreate

M = TypeVar("M", bound=BaseModel)
R = TypeVar("R")


async def _call(fn: Callable[..., R], *args) -> R:
    """Run a blocking repository call in the threadpool, off the event loop."""
    return await run_in_threadpool(fn, *args)


def _validated(model: Type[M], **values) -> M:
    try:
        return model(**values)
    except ValidationError as e:
        detail = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise InvalidInputError(detail) from e


@strawberry.type(description="A task record with title and completion/flag state.")
class Todo:
    id: strawberry.ID
    title: str
    completed: bool
    flagged: bool
    created_at: str = strawberry.field(name="created_at")

    @classmethod
    def from_row(cls, row: TodoEntity) -> "Todo":
        return cls(
            id=strawberry.ID(str(row["id"])),
            title=row["title"],
            completed=bool(row["completed"]),
            flagged=bool(row.get("flagged") or False),
            created_at=str(row["created_at"]),
        )

    @strawberry.field(description="Users linked to this todo.")
    async def assigned_users(self, info: Info[Context, None]) -> List["User"]:
        rows = await _call(info.context.repos.assignments.users_for_todo, self.id)
        return [User.from_row(r) for r in rows]


@strawberry.type(description="A person record that can be linked to todos.")
class User:
    id: strawberry.ID
    name: str
    email: str
    created_at: str = strawberry.field(name="created_at")

    @classmethod
    def from_row(cls, row: UserEntity) -> "User":
        return cls(
            id=strawberry.ID(str(row["id"])),
            name=row["name"],
            email=row["email"],
            created_at=str(row["created_at"]),
        )

    @strawberry.field(description="Todos this user is assigned to.")
    async def todos(self, info: Info[Context, None]) -> List[Todo]:
        rows = await _call(info.context.repos.assignments.todos_for_user, self.id)
        return [Todo.from_row(r) for r in rows]


async def _require_todo(info: Info[Context, None], todo_id: str) -> Todo:
    row = await _call(info.context.repos.todos.get, todo_id)
    if row is None:
        raise NotFoundError("Todo", todo_id)
    return Todo.from_row(row)


async def _require_user(info: Info[Context, None], user_id: str) -> User:
    row = await _call(info.context.repos.users.get, user_id)
    if row is None:
        raise NotFoundError("User", user_id)
    return User.from_row(row)


@strawberry.type
class Query:
    @strawberry.field(description="All todos, newest first.")
    async def todos(self, info: Info[Context, None]) -> List[Todo]:
        return [Todo.from_row(r) for r in await _call(info.context.repos.todos.list)]

    @strawberry.field
    async def todo(self, info: Info[Context, None], id: strawberry.ID) -> Optional[Todo]:
        return await _require_todo(info, id)

    @strawberry.field(description="All users, newest first.")
    async def users(self, info: Info[Context, None]) -> List[User]:
        return [User.from_row(r) for r in await _call(info.context.repos.users.list)]

    @strawberry.field
    async def user(self, info: Info[Context, None], id: strawberry.ID) -> Optional[User]:
        return await _require_user(info, id)


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def create_todo(self, info: Info[Context, None], title: str) -> Todo:
        data = _validated(TodoCreate, title=title)
        return Todo.from_row(await _call(info.context.repos.todos.create, data))

    @strawberry.mutation(description="Apply only the provided fields; omitted fields are left untouched.")
    async def update_todo(
        self,
        info: Info[Context, None],
        id: strawberry.ID,
        title: Optional[str] = None,
        completed: Optional[bool] = None,
        flagged: Optional[bool] = None,
    ) -> Todo:
        data = _validated(TodoUpdate, title=title, completed=completed, flagged=flagged)
        row = await _call(info.context.repos.todos.update, id, data)
        if row is None:
            raise NotFoundError("Todo", id)
        return Todo.from_row(row)

    @strawberry.mutation
    async def toggle_flag(self, info: Info[Context, None], id: strawberry.ID) -> Todo:
        row = await _call(info.context.repos.todos.toggle_flag, id)
        if row is None:
            raise NotFoundError("Todo", id)
        return Todo.from_row(row)

    @strawberry.mutation
    async def delete_todo(self, info: Info[Context, None], id: strawberry.ID) -> bool:
        return await _call(info.context.repos.todos.delete, id)

    @strawberry.mutation
    async def delete_all_todos(self, info: Info[Context, None]) -> bool:
        return await _call(info.context.repos.todos.delete_all)

    @strawberry.mutation
    async def create_user(self, info: Info[Context, None], name: str, email: str) -> User:
        data = _validated(UserCreate, name=name, email=email)
        return User.from_row(await _call(info.context.repos.users.create, data))

    @strawberry.mutation(description="Replace name and email of a user.")
    async def update_user(self, info: Info[Context, None], id: strawberry.ID, name: str, email: str) -> User:
        data = _validated(UserCreate, name=name, email=email)
        row = await _call(info.context.repos.users.update, id, data)
        if row is None:
            raise NotFoundError("User", id)
        return User.from_row(row)

    @strawberry.mutation
    async def delete_user(self, info: Info[Context, None], id: strawberry.ID) -> bool:
        return await _call(info.context.repos.users.delete, id)

    @strawberry.mutation
    async def assign_todo_to_user(
        self, info: Info[Context, None], todo_id: strawberry.ID, user_id: strawberry.ID
    ) -> Todo:
        await _require_todo(info, todo_id)
        await _require_user(info, user_id)
        await _call(info.context.repos.assignments.assign, todo_id, user_id)
        return await _require_todo(info, todo_id)

    @strawberry.mutation
    async def unassign_todo_from_user(
        self, info: Info[Context, None], todo_id: strawberry.ID, user_id: strawberry.ID
    ) -> Todo:
        await _call(info.context.repos.assignments.unassign, todo_id, user_id)
        return await _require_todo(info, todo_id)


schema = strawberry.Schema(query=Query, mutation=Mutation)
