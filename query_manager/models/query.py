"""Query template ORM model — named, parameterized SQL statements."""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from query_manager.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class SqlQuery(Base):
    __tablename__ = "sql_queries"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), unique=True)
    body: Mapped[str] = mapped_column(Text)  # SQL with :name placeholders
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    parameter_spec: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)  # advisory
    is_active: Mapped[bool] = mapped_column(default=True)
    created_by: Mapped[str] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )
