from __future__ import annotations

from strawberry.fastapi import GraphQLRouter

from ..api import schema
from ..context import get_context


# PUBLIC_INTERFACE
def build_graphql_router(graphiql: bool = True) -> GraphQLRouter:
    """
    Return the /graphql router serving the app schema.

    GraphiQL is served on GET requests from browsers when ``graphiql`` is true.
    """
    return GraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide="graphiql" if graphiql else None,
    )
