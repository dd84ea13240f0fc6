"""Execution log ORM model — one immutable row per execution attempt."""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from query_manager.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class SqlQueryLog(Base):
    __tablename__ = "sql_query_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    query_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("sql_queries.id"), nullable=True, index=True
    )
    executed_by: Mapped[str] = mapped_column(String(255))
    parameters_used: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    status: Mapped[str] = mapped_column(String(16))  # success | error
    execution_time_ms: Mapped[int] = mapped_column(Integer)
    rows_affected: Mapped[int | None] = mapped_column(Integer, nullable=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    executed_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
