"""Saved query CRUD + execute + execution log endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from query_manager.adapters.base import BackendAdapter
from query_manager.config import settings
from query_manager.database import get_db
from query_manager.deps import get_backend, require_permission
from query_manager.exceptions import DuplicateNameError, ExecutionFailedError, QueryNotFoundError
from query_manager.schemas.query import (
    DeleteResponse,
    ExecutionErrorResponse,
    ExecutionMetadata,
    ExecutionResponse,
    QueryCreate,
    QueryExecute,
    QueryResponse,
    QuerySummary,
    QueryUpdate,
)
from query_manager.schemas.query_log import QueryLogResponse
from query_manager.services import audit_service, execution_service, query_service

router = APIRouter()


@router.get("/", response_model=list[QuerySummary])
async def list_queries(
    db: AsyncSession = Depends(get_db), _: str = Depends(require_permission("read"))
):
    return await query_service.list_active(db)


@router.post("/", response_model=QueryResponse, status_code=201)
async def create_query(
    data: QueryCreate,
    db: AsyncSession = Depends(get_db),
    caller: str = Depends(require_permission("create")),
):
    try:
        return await query_service.create_query(db, data, created_by=caller)
    except DuplicateNameError as exc:
        raise HTTPException(status_code=409, detail=str(exc))


@router.get("/{identifier}", response_model=QueryResponse)
async def get_query(
    identifier: str,
    db: AsyncSession = Depends(get_db),
    _: str = Depends(require_permission("read")),
):
    query = await query_service.find_active(db, identifier)
    if not query:
        raise HTTPException(status_code=404, detail="Query not found")
    return query


@router.post(
    "/{identifier}/execute",
    response_model=ExecutionResponse,
    responses={500: {"model": ExecutionErrorResponse}},
)
async def execute_query(
    identifier: str,
    body: QueryExecute | None = None,
    db: AsyncSession = Depends(get_db),
    backend: BackendAdapter = Depends(get_backend),
    caller: str = Depends(require_permission("execute")),
):
    parameters = body.parameters if body else {}
    try:
        result = await execution_service.execute_query(
            db, backend, identifier, parameters, executed_by=caller
        )
    except QueryNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ExecutionFailedError as exc:
        error = ExecutionErrorResponse(
            error=exc.message,
            metadata=ExecutionMetadata(execution_time_ms=exc.execution_time_ms),
        )
        return JSONResponse(status_code=500, content=error.model_dump(exclude_none=True))

    return ExecutionResponse(
        data=result.rows,
        metadata=ExecutionMetadata(
            query_name=result.query_name,
            execution_time_ms=result.execution_time_ms,
            rows_affected=result.rows_affected,
        ),
    )


@router.patch("/{query_id}", response_model=QueryResponse)
async def update_query(
    query_id: str,
    data: QueryUpdate,
    db: AsyncSession = Depends(get_db),
    _: str = Depends(require_permission("update")),
):
    try:
        query = await query_service.update_query(db, query_id, data)
    except DuplicateNameError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    if not query:
        raise HTTPException(status_code=404, detail="Query not found")
    return query


@router.delete("/{query_id}", response_model=DeleteResponse)
async def delete_query(
    query_id: str,
    db: AsyncSession = Depends(get_db),
    _: str = Depends(require_permission("delete")),
):
    deleted = await query_service.soft_delete_query(db, query_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Query not found")
    return DeleteResponse(message="Query deleted successfully")


@router.get("/{query_id}/logs", response_model=list[QueryLogResponse])
async def list_query_logs(
    query_id: str,
    limit: int = Query(settings.logs_default_limit, ge=1, le=settings.logs_max_limit),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    _: str = Depends(require_permission("read")),
):
    return await audit_service.list_logs(db, query_id, limit=limit, offset=offset)
