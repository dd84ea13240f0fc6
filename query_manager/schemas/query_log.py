"""Execution log response schema."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class QueryLogResponse(BaseModel):
    id: str
    query_id: str | None
    executed_by: str
    parameters_used: dict[str, Any]
    status: str
    execution_time_ms: int
    rows_affected: int | None
    error_message: str | None
    executed_at: datetime

    model_config = {"from_attributes": True}
