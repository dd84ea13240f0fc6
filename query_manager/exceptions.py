"""Exception hierarchy for the query manager.

Store errors (``QueryNotFoundError``, ``DuplicateNameError``) are terminal and
shown to the caller as-is. Errors raised while binding, executing or
normalizing a statement are caught by the execution engine, written to the
audit log and re-raised as ``ExecutionFailedError``. ``AuditWriteError`` never
leaves the audit recorder.
"""

from __future__ import annotations


class QueryManagerError(Exception):
    """Base exception for query manager operations."""


class QueryNotFoundError(QueryManagerError):
    """Raised when an identifier matches no active query template."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__("Query not found")


class DuplicateNameError(QueryManagerError):
    """Raised when a template name collides with an existing one."""

    def __init__(self, name: str):
        self.name = name
        super().__init__("A query with this name already exists")


class BindingError(QueryManagerError):
    """Raised when a parameter value cannot be bound to a statement."""


class BackendError(QueryManagerError):
    """Raised when the relational backend fails to execute a statement.

    The message is the backend's own error text.
    """


class ResultShapeError(QueryManagerError):
    """Raised when a backend response matches none of the known shapes."""


class AuditWriteError(QueryManagerError):
    """Raised when an execution log entry cannot be persisted."""


class ExecutionFailedError(QueryManagerError):
    """Raised by the execution engine after a failed run has been audited."""

    def __init__(self, message: str, execution_time_ms: int | None = None):
        self.message = message
        self.execution_time_ms = execution_time_ms
        super().__init__(message)
