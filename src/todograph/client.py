from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import strawberry

from .context import Context
from .errors import TodographError

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class GraphQLClientError(TodographError):
    """The executed document returned errors."""

    def __init__(self, messages: List[str]) -> None:
        super().__init__("; ".join(messages))
        self.messages = messages


# PUBLIC_INTERFACE
class GraphQLClient:
    """
    Runs GraphQL documents against the app schema in-process.

    The pages use it the way a browser client would use the /graphql
    endpoint: one document per user action, data back or an error.
    """

    def __init__(self, schema: strawberry.Schema, context: Context) -> None:
        self._schema = schema
        self._context = context

    async def execute(self, document: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        logger.debug("graphql %s variables=%s", " ".join(document.split())[:80], variables)
        result = await self._schema.execute(
            document, variable_values=variables, context_value=self._context
        )
        if result.errors:
            raise GraphQLClientError([e.message for e in result.errors])
        return result.data or {}
