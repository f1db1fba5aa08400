"""Query execution for statsdb."""

from statsdb.query.executor import QueryExecutor

__all__ = ["QueryExecutor"]
