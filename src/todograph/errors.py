from __future__ import annotations


class TodographError(Exception):
    """Base class for application errors."""


# PUBLIC_INTERFACE
class StorageError(TodographError):
    """
    A persistence operation failed.

    Raised by every store backend with the backend's own message so that
    resolvers can propagate it unchanged.
    """

    def __init__(self, message: str, *, table: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.table = table


# PUBLIC_INTERFACE
class NotFoundError(TodographError):
    """A row required by an operation does not exist."""

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id


# PUBLIC_INTERFACE
class InvalidInputError(TodographError):
    """Arguments of an operation failed validation."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Invalid input: {detail}")
        self.detail = detail
