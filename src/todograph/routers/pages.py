"""
Browser pages: the todo list and the user directory.

Every action is a form POST that runs one GraphQL mutation and redirects
back to the list view, which re-runs its list query in full.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import APIRouter, Form, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from .. import documents
from ..api import schema
from ..client import GraphQLClient, GraphQLClientError
from ..context import Context
from ..utils import available_users, format_date, format_datetime

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"], include_in_schema=False)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))
templates.env.filters["datetime"] = format_datetime
templates.env.filters["date"] = format_date


def _client(request: Request) -> GraphQLClient:
    return GraphQLClient(schema, Context(request.app.state.repos))


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


async def _mutate(request: Request, action: str, document: str, variables: Dict[str, Any]) -> bool:
    """Run one mutation; failures are logged and reported as False."""
    try:
        await _client(request).execute(document, variables)
    except GraphQLClientError:
        logger.exception("Error %s", action)
        return False
    return True


# PUBLIC_INTERFACE
@router.get("/", response_class=HTMLResponse)
async def todos_page(request: Request, edit: Optional[str] = Query(None)) -> HTMLResponse:
    """
    Todo list. ``edit`` names the todo whose title is being edited.
    """
    try:
        data = await _client(request).execute(documents.GET_TODOS)
    except GraphQLClientError as e:
        logger.exception("Error loading todos")
        return templates.TemplateResponse(
            request, "todos.html", {"error": str(e), "rows": []}, status_code=500
        )
    users = data["users"]
    rows = [{"todo": t, "available": available_users(users, t["assignedUsers"])} for t in data["todos"]]
    return templates.TemplateResponse(request, "todos.html", {"rows": rows, "editing": edit, "error": None})


@router.post("/todos")
async def create_todo(request: Request, title: str = Form("")) -> RedirectResponse:
    if title.strip():
        await _mutate(request, "creating todo", documents.CREATE_TODO, {"title": title})
    return _redirect("/")


@router.post("/todos/{todo_id}/toggle")
async def toggle_todo(request: Request, todo_id: str, completed: bool = Form(False)) -> RedirectResponse:
    await _mutate(request, "updating todo", documents.UPDATE_TODO, {"id": todo_id, "completed": not completed})
    return _redirect("/")


@router.post("/todos/{todo_id}/flag")
async def flag_todo(request: Request, todo_id: str) -> RedirectResponse:
    await _mutate(request, "flagging todo", documents.TOGGLE_FLAG, {"id": todo_id})
    return _redirect("/")


@router.post("/todos/{todo_id}/title")
async def rename_todo(request: Request, todo_id: str, title: str = Form("")) -> RedirectResponse:
    # Stay in edit mode on blank input or failure
    if not title.strip():
        return _redirect(f"/?edit={todo_id}")
    ok = await _mutate(request, "updating todo", documents.UPDATE_TODO, {"id": todo_id, "title": title})
    return _redirect("/" if ok else f"/?edit={todo_id}")


@router.post("/todos/{todo_id}/delete")
async def delete_todo(request: Request, todo_id: str) -> RedirectResponse:
    await _mutate(request, "deleting todo", documents.DELETE_TODO, {"id": todo_id})
    return _redirect("/")


@router.get("/todos/delete-all", response_class=HTMLResponse)
async def confirm_delete_all(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "confirm.html",
        {
            "message": "Are you sure you want to delete all todos?",
            "action": "/todos/delete-all",
            "cancel": "/",
        },
    )


@router.post("/todos/delete-all")
async def delete_all_todos(request: Request, confirm: str = Form("")) -> RedirectResponse:
    if confirm == "yes":
        await _mutate(request, "deleting all todos", documents.DELETE_ALL_TODOS, {})
    return _redirect("/")


@router.post("/todos/{todo_id}/assign")
async def assign_user(request: Request, todo_id: str, user_id: str = Form("")) -> RedirectResponse:
    if user_id:
        await _mutate(request, "assigning user", documents.ASSIGN_TODO, {"todoId": todo_id, "userId": user_id})
    return _redirect("/")


@router.post("/todos/{todo_id}/unassign/{user_id}")
async def unassign_user(request: Request, todo_id: str, user_id: str) -> RedirectResponse:
    await _mutate(request, "unassigning user", documents.UNASSIGN_TODO, {"todoId": todo_id, "userId": user_id})
    return _redirect("/")


# PUBLIC_INTERFACE
@router.get("/users", response_class=HTMLResponse)
async def users_page(
    request: Request,
    edit: Optional[str] = Query(None),
    form: bool = Query(False),
) -> HTMLResponse:
    """
    User directory. ``edit`` names the user being edited, ``form`` opens the add-user form.
    """
    try:
        data = await _client(request).execute(documents.GET_USERS)
    except GraphQLClientError as e:
        logger.exception("Error loading users")
        return templates.TemplateResponse(
            request, "users.html", {"error": str(e), "users": []}, status_code=500
        )
    return templates.TemplateResponse(
        request,
        "users.html",
        {"users": data["users"], "editing": edit, "show_form": form, "error": None},
    )


@router.post("/users")
async def create_user(request: Request, name: str = Form(""), email: str = Form("")) -> RedirectResponse:
    if not name.strip() or not email.strip():
        return _redirect("/users?form=1")
    ok = await _mutate(request, "creating user", documents.CREATE_USER, {"name": name, "email": email})
    return _redirect("/users" if ok else "/users?form=1")


@router.post("/users/{user_id}")
async def update_user(
    request: Request, user_id: str, name: str = Form(""), email: str = Form("")
) -> RedirectResponse:
    if not name.strip() or not email.strip():
        return _redirect(f"/users?edit={user_id}")
    ok = await _mutate(
        request, "updating user", documents.UPDATE_USER, {"id": user_id, "name": name, "email": email}
    )
    return _redirect("/users" if ok else f"/users?edit={user_id}")


@router.get("/users/{user_id}/delete", response_class=HTMLResponse)
async def confirm_delete_user(request: Request, user_id: str) -> Any:
    try:
        data = await _client(request).execute(documents.GET_USER, {"id": user_id})
    except GraphQLClientError:
        logger.exception("Error loading user %s", user_id)
        return _redirect("/users")
    return templates.TemplateResponse(
        request,
        "confirm.html",
        {
            "message": f"Are you sure you want to delete {data['user']['name']}?",
            "action": f"/users/{user_id}/delete",
            "cancel": "/users",
        },
    )


@router.post("/users/{user_id}/delete")
async def delete_user(request: Request, user_id: str, confirm: str = Form("")) -> RedirectResponse:
    if confirm == "yes":
        await _mutate(request, "deleting user", documents.DELETE_USER, {"id": user_id})
    return _redirect("/users")
