"""Database client for statsdb.

Wraps a SQLAlchemy ``AsyncEngine`` behind the small contract the query
executor relies on (see :class:`statsdb.protocols.DatabaseClient`).
"""

from statsdb.client.binding import bind_positional
from statsdb.client.sqlalchemy_client import (
    SQLAlchemyClient,
    log_query,
    split_prisma_options,
    to_async_url,
)
from statsdb.client.types import PreparedQuery, QueryEvent, QueryListener

__all__ = [
    "SQLAlchemyClient",
    "PreparedQuery",
    "QueryEvent",
    "QueryListener",
    "bind_positional",
    "log_query",
    "split_prisma_options",
    "to_async_url",
]
