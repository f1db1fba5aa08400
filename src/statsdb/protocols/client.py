"""Database client protocol definitions.

This module defines the contract the query executor consumes. Any object
providing these methods can back a :class:`statsdb.database.Database`,
which keeps tests free of real connections.
"""

from typing import TYPE_CHECKING, Any, Dict, List, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from statsdb.client.types import PreparedQuery, QueryListener


@runtime_checkable
class DatabaseClient(Protocol):
    """Protocol defining the interface for database clients."""

    async def query_raw(self, sql: str, *params: Any) -> List[Dict[str, Any]]:
        """Execute a raw SQL statement with positional parameters.

        Args:
            sql: Statement with positional markers
            *params: Values in marker order

        Returns:
            Result rows
        """
        ...

    async def transaction(self, operations: Sequence["PreparedQuery"]) -> List[List[Dict[str, Any]]]:
        """Execute prepared queries atomically.

        Args:
            operations: Queries to run, in order

        Returns:
            One list of rows per operation
        """
        ...

    def on_query(self, listener: "QueryListener") -> None:
        """Subscribe to executed-statement events."""
        ...
