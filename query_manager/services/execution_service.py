"""Execution service — runs saved queries and audits every attempt.

Flow for one invocation:

    resolve template -> bind -> backend.execute -> normalize -> audit

Unknown or inactive identifiers stop at resolution and are not audited.
Once a template is resolved exactly one log row is written, whether the run
succeeds or fails; the timer stops before that write. A failed audit write is
logged and otherwise ignored.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from query_manager.adapters.base import BackendAdapter
from query_manager.exceptions import ExecutionFailedError, QueryNotFoundError
from query_manager.models.query_log import SqlQueryLog
from query_manager.services import audit_service, query_service
from query_manager.utils.binding import bind
from query_manager.utils.normalize import normalize

logger = logging.getLogger(__name__)


@dataclass
class ExecutionResult:
    rows: list[dict[str, Any]]
    query_name: str
    execution_time_ms: int
    rows_affected: int


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


async def execute_query(
    db: AsyncSession,
    backend: BackendAdapter,
    identifier: str,
    parameters: dict[str, Any],
    executed_by: str,
) -> ExecutionResult:
    """Run the active template matching ``identifier`` with ``parameters``.

    Raises ``QueryNotFoundError`` before anything is audited, or
    ``ExecutionFailedError`` after the failure has been audited.
    """
    start = time.perf_counter()

    query = await query_service.find_active(db, identifier)
    if not query:
        raise QueryNotFoundError(identifier)

    # Snapshot the template; later writes on this session may expire it
    query_id, query_name, body = query.id, query.name, query.body
    log = SqlQueryLog(
        query_id=query_id,
        executed_by=executed_by,
        parameters_used=dict(parameters),
    )

    try:
        statement = bind(body, parameters)
        response = await backend.execute(statement)
        result = normalize(response)
    except Exception as exc:
        elapsed = _elapsed_ms(start)
        message = str(exc) or type(exc).__name__
        logger.warning("Query '%s' failed after %d ms: %s", query_name, elapsed, message)
        log.status = "error"
        log.error_message = message
        log.execution_time_ms = elapsed
        await audit_service.record(db, log)
        raise ExecutionFailedError(message, elapsed) from exc

    elapsed = _elapsed_ms(start)
    logger.info(
        "Query '%s' by %s: %d rows in %d ms", query_name, executed_by, result.row_count, elapsed
    )
    log.status = "success"
    log.rows_affected = result.row_count
    log.execution_time_ms = elapsed
    await audit_service.record(db, log)

    return ExecutionResult(
        rows=result.rows,
        query_name=query_name,
        execution_time_ms=elapsed,
        rows_affected=result.row_count,
    )
