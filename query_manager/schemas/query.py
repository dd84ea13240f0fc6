"""Query template request/response schemas."""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

# Values a caller may bind to a placeholder
ParamValue = str | int | float | bool | None


def _check_name(name: str) -> str:
    # ids are UUIDs; names must stay out of that space
    try:
        uuid.UUID(name)
    except ValueError:
        return name
    raise ValueError("name must not be a UUID")


class QueryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    body: str = Field(..., min_length=1)  # SQL with :name placeholders
    description: str | None = None
    parameter_spec: dict[str, Any] = {}

    @field_validator("name")
    @classmethod
    def name_is_not_an_id(cls, v: str) -> str:
        return _check_name(v)


class QueryUpdate(BaseModel):
    """Partial update: only fields present in the request body are applied.

    ``description: null`` clears the description; omitting it leaves it alone.
    """

    name: str | None = Field(None, min_length=1, max_length=255)
    body: str | None = Field(None, min_length=1)
    description: str | None = None
    parameter_spec: dict[str, Any] | None = None
    is_active: bool | None = None

    @field_validator("name", "body", "parameter_spec", "is_active")
    @classmethod
    def not_null(cls, v: Any) -> Any:
        # only description may be cleared
        if v is None:
            raise ValueError("field cannot be null")
        return v

    @field_validator("name")
    @classmethod
    def name_is_not_an_id(cls, v: str) -> str:
        return _check_name(v)


class QuerySummary(BaseModel):
    id: str
    name: str
    description: str | None
    parameter_spec: dict[str, Any]
    created_at: datetime

    model_config = {"from_attributes": True}


class QueryResponse(BaseModel):
    id: str
    name: str
    body: str
    description: str | None
    parameter_spec: dict[str, Any]
    is_active: bool
    created_by: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class QueryExecute(BaseModel):
    """Runtime values for the template's placeholders."""
    parameters: dict[str, ParamValue] = {}


class ExecutionMetadata(BaseModel):
    query_name: str | None = None
    execution_time_ms: int | None = None
    rows_affected: int | None = None


class ExecutionResponse(BaseModel):
    success: bool = True
    data: list[dict[str, Any]]
    metadata: ExecutionMetadata


class ExecutionErrorResponse(BaseModel):
    success: bool = False
    error: str
    metadata: ExecutionMetadata


class DeleteResponse(BaseModel):
    success: bool = True
    message: str
