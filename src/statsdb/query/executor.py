"""Raw query execution against the configured database client."""

import re
from typing import Any, Dict, List, Sequence, Union

from statsdb.client.types import PreparedQuery
from statsdb.constants import DatabaseType
from statsdb.dialect import coerce_dialect
from statsdb.logging import get_logger
from statsdb.protocols import DatabaseClient
from statsdb.telemetry import db_span_attributes
from statsdb.utils.decorators import traced

logger = get_logger(__name__)

_POSITIONAL_MARKER = re.compile(r"\$[0-9]+")


class QueryExecutor:
    """Runs raw SQL built from fragments through a database client.

    The executor is bound to one dialect. MySQL drivers take ``?`` markers,
    so every ``$N`` marker is rewritten before the statement is sent.
    The dialect is only checked when a call is awaited.

    Example:
        >>> executor = QueryExecutor(client, "mysql")
        >>> await executor.raw_query("select * from pageview where url = $1", ["/"])
    """

    def __init__(self, client: DatabaseClient, database_type: Union[DatabaseType, str, None]):
        self.client = client
        self.database_type = database_type

    def _dialect(self) -> DatabaseType:
        return coerce_dialect(self.database_type, message="Unknown database.")

    def prepare(self, sql: str) -> str:
        """Return ``sql`` in the placeholder style of the bound dialect."""
        if self._dialect() == DatabaseType.MYSQL:
            return _POSITIONAL_MARKER.sub("?", sql)
        return sql

    @traced(
        span_name="statsdb.query.raw_query",
        attribute_getter=lambda self, sql, params=(): db_span_attributes(
            "raw_query", system=self.database_type, statement=sql
        ),
    )
    async def raw_query(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        """Execute ``sql`` with positional ``params``.

        Args:
            sql: Statement using ``$N`` markers
            params: Values in marker order, usually ``builder.params.values``

        Returns:
            Rows returned by the client

        Raises:
            StatsDBError: DIALECT_NOT_SUPPORTED when the executor's dialect
                is not supported
        """
        statement = self.prepare(sql)
        logger.debug("Executing raw query", extra={"param_count": len(params)})
        return await self.client.query_raw(statement, *params)

    @traced(
        span_name="statsdb.query.transaction",
        attribute_getter=lambda self, operations: db_span_attributes(
            "transaction", system=self.database_type, batch_count=len(operations)
        ),
    )
    async def transaction(self, operations: Sequence[PreparedQuery]) -> List[List[Dict[str, Any]]]:
        """Hand ``operations`` to the client's transaction call unchanged."""
        return await self.client.transaction(operations)
