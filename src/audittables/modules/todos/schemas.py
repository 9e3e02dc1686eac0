"""Pydantic schemas for todo operations."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from audittables.core.constants import MAX_BATCH_SIZE, MAX_DESCRIPTION_LENGTH, MAX_ROW_ID


class TodoBase(BaseModel):
    """Base schema for todo data."""

    description: str = Field(..., min_length=1, max_length=MAX_DESCRIPTION_LENGTH)


class TodoCreate(TodoBase):
    """Schema for creating a new todo."""

    completed: bool = False


class TodoUpdate(BaseModel):
    """Schema for updating todo data.

    Omitted fields are left unchanged.
    """

    description: str | None = Field(None, min_length=1, max_length=MAX_DESCRIPTION_LENGTH)
    completed: bool | None = None


class TodoResponse(TodoBase):
    """Schema for todo response data."""

    id: int
    completed: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TodoListResponse(BaseModel):
    """Schema for listing todos."""

    items: list[TodoResponse]
    total: int
    page: int
    page_size: int


class TodoBatchComplete(BaseModel):
    """Schema for completing several todos in one revision."""

    ids: list[Annotated[int, Field(ge=1, le=MAX_ROW_ID)]] = Field(
        ..., min_length=1, max_length=MAX_BATCH_SIZE
    )

    @field_validator("ids")
    @classmethod
    def unique_ids(cls, v: list[int]) -> list[int]:
        """Reject duplicate IDs; one revision changes each todo once."""
        if len(set(v)) != len(v):
            raise ValueError("ids must not contain duplicates")
        return v


class TodoBatchResponse(BaseModel):
    """Schema for the result of a batch operation."""

    revision_number: int | None
    items: list[TodoResponse]
