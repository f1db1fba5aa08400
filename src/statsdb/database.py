"""Process-wide database access.

:class:`Database` ties a client to a dialect: it hands out fragment builders
for that dialect and runs the resulting SQL through a :class:`QueryExecutor`.
The module-level instance is created on first use and must be closed
explicitly with :func:`close_database`.
"""

from typing import Any, Dict, List, Optional, Sequence, Union

from statsdb.client import PreparedQuery, SQLAlchemyClient
from statsdb.constants import DatabaseType
from statsdb.dialect import coerce_dialect
from statsdb.logging import get_logger
from statsdb.protocols import DatabaseClient
from statsdb.query import QueryExecutor
from statsdb.query_builder import BaseFragmentBuilder, FragmentBuilderFactory, QueryParams
from statsdb.settings import DatabaseSettings, get_settings

logger = get_logger(__name__)


class Database:
    """A database client bound to its SQL dialect.

    Example:
        >>> db = Database.from_settings(get_settings())
        >>> fragments = db.fragments()
        >>> where = fragments.get_filter_query("pageview", {"url": "/pricing"})
        >>> rows = await db.raw_query(f"select count(*) as n from pageview where 1 = 1 {where}",
        ...                           fragments.params.values)
        >>> await db.close()
    """

    def __init__(self, client: DatabaseClient, database_type: Union[DatabaseType, str]):
        self.client = client
        self.dialect = coerce_dialect(database_type)
        self.executor = QueryExecutor(client, self.dialect)

    @classmethod
    def from_settings(cls, settings: Optional[DatabaseSettings] = None) -> "Database":
        """Build a database backed by :class:`SQLAlchemyClient`."""
        settings = settings or get_settings()
        dialect = settings.dialect
        logger.info("Creating database", extra={"database_type": dialect.value})
        return cls(SQLAlchemyClient(settings), dialect)

    def fragments(self, params: Optional[QueryParams] = None) -> BaseFragmentBuilder:
        """Return a fragment builder for this database's dialect."""
        return FragmentBuilderFactory.create(self.dialect, params)

    def to_uuid(self) -> str:
        return self.fragments().to_uuid()

    async def raw_query(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        return await self.executor.raw_query(sql, params)

    async def transaction(self, operations: Sequence[PreparedQuery]) -> List[List[Dict[str, Any]]]:
        return await self.executor.transaction(operations)

    async def close(self) -> None:
        """Dispose the client's connections if it owns any."""
        dispose = getattr(self.client, "dispose", None)
        if dispose is not None:
            await dispose()
        logger.info("Database closed", extra={"database_type": self.dialect.value})


_database: Optional[Database] = None


def get_database() -> Database:
    """Get the process-wide database, creating it from settings once."""
    global _database

    if _database is None:
        _database = Database.from_settings(get_settings())

    return _database


def set_database(database: Optional[Database]) -> None:
    """Install ``database`` as the process-wide instance (tests, custom clients)."""
    global _database
    _database = database


async def close_database() -> None:
    """Close the process-wide database and reset the slot."""
    global _database

    if _database is not None:
        database, _database = _database, None
        await database.close()
