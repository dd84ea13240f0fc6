"""Abstract base class for relational backend adapters.

Point the query manager at another engine by implementing this interface.
Adapters answer with one of the response shapes below; the result
normalizer is the only consumer that looks inside them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Union

from query_manager.utils.binding import BoundStatement

Row = Mapping[str, Any]


@dataclass
class RowSetResponse:
    """Rows plus the row count reported by the driver (None/-1 if unreported)."""

    rows: list[Row] = field(default_factory=list)
    rowcount: int | None = None


@dataclass
class ResultSetsResponse:
    """One row array per executed statement."""

    result_sets: list[list[Row]] = field(default_factory=list)


BackendResponse = Union[RowSetResponse, ResultSetsResponse, Sequence[Row]]


class BackendAdapter(ABC):
    """Contract that any relational backend must satisfy."""

    @abstractmethod
    async def execute(self, statement: BoundStatement) -> BackendResponse:
        """Run a bound statement once.

        Raises ``BackendError`` with the backend's own message on failure.
        """

    @abstractmethod
    async def dispose(self) -> None:
        """Release pooled connections."""
