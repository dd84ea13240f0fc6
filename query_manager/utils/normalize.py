"""Normalize backend responses into a single ``rows`` + ``row_count`` shape.

Engines report results differently: PostgreSQL-style drivers hand back a row
array with an affected-row count, MySQL-style drivers nest result sets, and
SQLite-style drivers return the bare rows. Each shape gets one branch here;
add a branch for a new shape rather than special-casing callers.
"""

from __future__ import annotations

import base64
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from query_manager.adapters.base import BackendResponse, ResultSetsResponse, RowSetResponse
from query_manager.exceptions import ResultShapeError


@dataclass
class NormalizedResult:
    rows: list[dict[str, Any]]
    row_count: int


def _cell(value: Any) -> Any:
    """Binary cells (BLOB, bytea, ...) become base64 text so rows stay JSON-safe."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return base64.b64encode(bytes(value)).decode("ascii")
    return value


def _as_rows(rows: Any) -> list[dict[str, Any]]:
    if isinstance(rows, (str, bytes)) or not isinstance(rows, Sequence):
        raise ResultShapeError(f"Unrecognized backend response: {type(rows).__name__}")
    out = []
    for row in rows:
        if not isinstance(row, Mapping):
            raise ResultShapeError(f"Unrecognized row type: {type(row).__name__}")
        out.append({key: _cell(value) for key, value in row.items()})
    return out


def _is_nested(response: Any) -> bool:
    return (
        isinstance(response, Sequence)
        and not isinstance(response, (str, bytes))
        and len(response) > 0
        and isinstance(response[0], Sequence)
        and not isinstance(response[0], (str, bytes))
    )


def normalize(response: BackendResponse) -> NormalizedResult:
    if isinstance(response, RowSetResponse):
        rows = _as_rows(response.rows)
        reported = response.rowcount
        if isinstance(reported, int) and reported >= 0:
            return NormalizedResult(rows=rows, row_count=reported)
        return NormalizedResult(rows=rows, row_count=len(rows))

    if isinstance(response, ResultSetsResponse):
        first = response.result_sets[0] if response.result_sets else []
        rows = _as_rows(first)
        return NormalizedResult(rows=rows, row_count=len(rows))

    if _is_nested(response):
        rows = _as_rows(response[0])
        return NormalizedResult(rows=rows, row_count=len(rows))

    rows = _as_rows(response)
    return NormalizedResult(rows=rows, row_count=len(rows))
