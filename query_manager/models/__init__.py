from query_manager.models.query import SqlQuery
from query_manager.models.query_log import SqlQueryLog

__all__ = ["SqlQuery", "SqlQueryLog"]
