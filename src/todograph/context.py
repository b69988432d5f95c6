from __future__ import annotations

from fastapi import Request
from strawberry.fastapi import BaseContext

from .repositories import Repositories


class Context(BaseContext):
    """GraphQL execution context carrying the repositories of the running app."""

    def __init__(self, repos: Repositories) -> None:
        super().__init__()
        self.repos = repos


# PUBLIC_INTERFACE
async def get_context(request: Request) -> Context:
    """FastAPI dependency building the context for the /graphql router."""
    return Context(request.app.state.repos)
