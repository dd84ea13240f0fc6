"""Audit service — append-only execution log."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from query_manager.exceptions import AuditWriteError
from query_manager.models.query_log import SqlQueryLog

logger = logging.getLogger(__name__)


async def append_log(db: AsyncSession, entry: SqlQueryLog) -> SqlQueryLog:
    db.add(entry)
    try:
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        raise AuditWriteError(str(exc)) from exc
    return entry


async def record(db: AsyncSession, entry: SqlQueryLog) -> bool:
    """Persist ``entry``; a failure is logged here and reported as ``False``.

    Never raises: the caller's execution outcome must not depend on the audit
    write.
    """
    try:
        await append_log(db, entry)
    except AuditWriteError:
        logger.exception(
            "Failed to record %s execution of query %s", entry.status, entry.query_id
        )
        return False
    return True


async def list_logs(
    db: AsyncSession, query_id: str, limit: int = 50, offset: int = 0
) -> list[SqlQueryLog]:
    stmt = (
        select(SqlQueryLog)
        .where(SqlQueryLog.query_id == query_id)
        .order_by(SqlQueryLog.executed_at.desc())
        .limit(limit)
        .offset(offset)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())
