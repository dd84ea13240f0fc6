"""SQLAlchemy-backed relational adapter.

Runs bound statements on any SQLAlchemy async engine (SQLite via aiosqlite,
PostgreSQL via asyncpg, MySQL via aiomysql, ...). Each call is a single
transaction: committed on success, rolled back on failure, never retried.

- Single statement: ``RowSetResponse`` (rows, driver-reported rowcount).
- Several ``;``-separated statements: ``ResultSetsResponse`` with one row
  array per statement (empty for statements that return no rows).
"""

from __future__ import annotations

import asyncio
import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError, StatementError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from query_manager.adapters.base import (
    BackendAdapter,
    BackendResponse,
    ResultSetsResponse,
    RowSetResponse,
)
from query_manager.exceptions import BackendError
from query_manager.utils.binding import BoundStatement

logger = logging.getLogger(__name__)


def split_statements(sql: str) -> list[str]:
    """Split SQL on ``;`` outside quotes, dollar-quotes and comments."""
    stmts: list[str] = []
    current: list[str] = []
    i = 0
    length = len(sql)

    while i < length:
        ch = sql[i]

        if ch in ("'", '"'):
            # quoted literal; a doubled quote is the only escape (standard SQL)
            end = i + 1
            while end < length:
                c = sql[end]
                if c == ch:
                    if end + 1 < length and sql[end + 1] == ch:
                        end += 2
                        continue
                    break
                end += 1
            current.append(sql[i : end + 1])
            i = end + 1
            continue

        if sql.startswith("$$", i):
            end = sql.find("$$", i + 2)
            end = length if end == -1 else end + 2
            current.append(sql[i:end])
            i = end
            continue

        if sql.startswith("--", i):
            end = sql.find("\n", i)
            end = length if end == -1 else end + 1
            current.append(sql[i:end])
            i = end
            continue

        if sql.startswith("/*", i):
            end = sql.find("*/", i + 2)
            end = length if end == -1 else end + 2
            current.append(sql[i:end])
            i = end
            continue

        if ch == ";":
            stmt = "".join(current).strip()
            if stmt:
                stmts.append(stmt)
            current = []
            i += 1
            continue

        current.append(ch)
        i += 1

    tail = "".join(current).strip()
    if tail:
        stmts.append(tail)
    return stmts


def _driver_message(exc: SQLAlchemyError) -> str:
    """The driver's own error text, without SQLAlchemy's SQL/params trailer."""
    if isinstance(exc, StatementError) and exc.orig is not None:
        return str(exc.orig)
    return str(exc)


class SQLAlchemyBackend(BackendAdapter):
    def __init__(self, engine: AsyncEngine, *, timeout: float | None = None):
        self.engine = engine
        self.timeout = timeout

    @classmethod
    def from_url(cls, url: str, *, timeout: float | None = None) -> SQLAlchemyBackend:
        return cls(create_async_engine(url, pool_pre_ping=True), timeout=timeout)

    async def execute(self, statement: BoundStatement) -> BackendResponse:
        statements = split_statements(statement.text)
        if not statements:
            raise BackendError("Query is empty")

        try:
            if self.timeout:
                return await asyncio.wait_for(self._run(statement, statements), self.timeout)
            return await self._run(statement, statements)
        except asyncio.TimeoutError:
            raise BackendError(f"Query timed out after {self.timeout:g}s") from None
        except SQLAlchemyError as exc:
            logger.debug("Backend rejected statement: %s", exc)
            raise BackendError(_driver_message(exc)) from exc

    async def _run(self, statement: BoundStatement, statements: list[str]) -> BackendResponse:
        async with self.engine.begin() as conn:
            if len(statements) == 1:
                return await self._run_one(conn, statement, statements[0])

            result_sets = []
            for sql in statements:
                response = await self._run_one(conn, statement, sql)
                result_sets.append(response.rows)
            return ResultSetsResponse(result_sets=result_sets)

    async def _run_one(
        self, conn: AsyncConnection, statement: BoundStatement, sql: str
    ) -> RowSetResponse:
        result = await conn.execute(text(sql), statement.params_for(sql))
        if result.returns_rows:
            rows = [dict(row) for row in result.mappings().all()]
            return RowSetResponse(rows=rows, rowcount=result.rowcount)
        return RowSetResponse(rows=[], rowcount=result.rowcount)

    async def dispose(self) -> None:
        await self.engine.dispose()
