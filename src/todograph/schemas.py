from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

TITLE_MAX = 200
NAME_MAX = 200


def _clean_text(value: str, field_name: str, max_length: int) -> str:
    s = value.strip()
    if not (1 <= len(s) <= max_length):
        raise ValueError(f"{field_name} length must be between 1 and {max_length} characters")
    return s


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Input for creating a new Todo item.
    """

    model_config = ConfigDict(json_schema_extra={"example": {"title": "Buy milk"}})

    title: str = Field(..., description="Short title for the todo item")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """
        Strip whitespace and enforce 1..200 length.
        """
        return _clean_text(v, "title", TITLE_MAX)


# PUBLIC_INTERFACE
class TodoUpdate(BaseModel):
    """
    Input for updating an existing Todo item.
    All fields are optional; only provided fields will be updated.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"title": "Buy oat milk", "completed": True}}
    )

    title: Optional[str] = Field(default=None, description="Short title for the todo item")
    completed: Optional[bool] = Field(default=None, description="Completion status flag")
    flagged: Optional[bool] = Field(default=None, description="Flag marker")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        """
        If title is provided, strip whitespace and enforce 1..200 length.
        """
        if v is None:
            return v
        return _clean_text(v, "title", TITLE_MAX)

    def changes(self) -> dict:
        """Return only the fields that were given a value."""
        return self.model_dump(exclude_none=True)


# PUBLIC_INTERFACE
class UserCreate(BaseModel):
    """
    Input for creating a user, also used for full-field replacement on update.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"name": "Alice", "email": "alice@example.com"}}
    )

    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Contact email address")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _clean_text(v, "name", NAME_MAX)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        s = v.strip()
        if not s or "@" not in s:
            raise ValueError("email must be a non-empty address containing '@'")
        return s
