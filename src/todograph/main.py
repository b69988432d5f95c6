from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .log import configure_logging
from .repositories import build_repositories
from .routers import pages as pages_router
from .routers.graph import build_graphql_router
from .settings import Settings, get_settings
from .store import Store, get_store

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "graphql",
        "description": "GraphQL API for todos, users and their assignments, served at /graphql.",
    },
]


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None, store: Optional[Store] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Configuration; read from the environment when omitted.
        store: Persistence collaborator; built from settings when omitted.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    store = store or get_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        store.close()

    app = FastAPI(
        title="Todo GraphQL",
        description="Todo list with user assignments, served as a GraphQL API and browser pages.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.repos = build_repositories(store)

    # CORS_ALLOW_ORIGINS lists the allowed origins; '*' or nothing means any origin
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Form and path parameters that fail validation get one JSON error shape
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Return a consistent JSON structure for request validation errors.

        Response format:
            {
                "error": "ValidationError",
                "detail": [... pydantic/fastapi error details ...],
                "message": "Request validation failed"
            }
        """
        return JSONResponse(
            status_code=422,
            content={
                "error": "ValidationError",
                "message": "Request validation failed",
                "detail": exc.errors(),
            },
        )

    # PUBLIC_INTERFACE
    @app.get("/health", summary="Health Check", tags=["health"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health.
        """
        return {"message": "Healthy", "backend": store.backend}

    app.include_router(build_graphql_router(settings.graphiql), prefix="/graphql")
    app.include_router(pages_router.router)
    return app


app = create_app()
