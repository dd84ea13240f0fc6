"""Query service — template store for named SQL statements."""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from query_manager.exceptions import DuplicateNameError
from query_manager.models.query import SqlQuery
from query_manager.schemas.query import QueryCreate, QueryUpdate

logger = logging.getLogger(__name__)


async def list_active(db: AsyncSession) -> list[SqlQuery]:
    stmt = select(SqlQuery).where(SqlQuery.is_active.is_(True)).order_by(SqlQuery.name)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def find_active(db: AsyncSession, identifier: str) -> SqlQuery | None:
    """Resolve an active template by id, falling back to name.

    An id match always wins over a name match.
    """
    for column in (SqlQuery.id, SqlQuery.name):
        stmt = select(SqlQuery).where(column == identifier, SqlQuery.is_active.is_(True))
        result = await db.execute(stmt)
        query = result.scalars().first()
        if query:
            return query
    return None


async def get_query(db: AsyncSession, query_id: str) -> SqlQuery | None:
    return await db.get(SqlQuery, query_id)


async def create_query(db: AsyncSession, data: QueryCreate, created_by: str) -> SqlQuery:
    query = SqlQuery(
        name=data.name,
        body=data.body,
        description=data.description,
        parameter_spec=data.parameter_spec,
        created_by=created_by,
    )
    db.add(query)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateNameError(data.name) from None
    await db.refresh(query)
    logger.info("Created query '%s' (%s)", query.name, query.id)
    return query


async def update_query(
    db: AsyncSession, query_id: str, data: QueryUpdate
) -> SqlQuery | None:
    query = await db.get(SqlQuery, query_id)
    if not query:
        return None

    for field in data.model_fields_set:
        setattr(query, field, getattr(data, field))
    query.updated_at = func.now()

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateNameError(data.name or "") from None
    await db.refresh(query)
    return query


async def soft_delete_query(db: AsyncSession, query_id: str) -> bool:
    query = await db.get(SqlQuery, query_id)
    if not query:
        return False

    query.is_active = False
    query.updated_at = func.now()
    await db.commit()
    logger.info("Deactivated query '%s' (%s)", query.name, query.id)
    return True
