"""Shared FastAPI dependencies: caller identity, permission gate, backend."""

from collections.abc import Callable

from fastapi import Depends, Header, HTTPException, Request

from query_manager.adapters.base import BackendAdapter
from query_manager.config import settings
from query_manager.services import permission_service


def get_caller(x_user_id: str | None = Header(None)) -> str:
    return x_user_id or settings.anonymous_user


def require_permission(action: str) -> Callable[..., str]:
    """Dependency factory: gate a route on ``action`` and return the caller.

    Use: ``caller: str = Depends(require_permission("execute"))``.
    """

    def _check(caller: str = Depends(get_caller)) -> str:
        if not permission_service.is_authorized(caller, action, "sql_queries"):
            raise HTTPException(
                status_code=403, detail="You do not have permission to execute SQL queries"
            )
        return caller

    return _check


def get_backend(request: Request) -> BackendAdapter:
    return request.app.state.backend
