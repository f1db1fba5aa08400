"""SQLAlchemy async client.

This module provides the database client used by statsdb: a thin wrapper
around a SQLAlchemy ``AsyncEngine`` exposing a raw-SQL escape hatch, a
transaction call and query events.
"""

import time
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import event, text
from sqlalchemy.engine import URL, CursorResult, make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from statsdb.client.binding import bind_positional
from statsdb.client.types import PreparedQuery, QueryEvent, QueryListener
from statsdb.common.exceptions import ErrorCode, configuration_error, connection_error
from statsdb.logging import QUERY_LOGGER_NAME, get_logger
from statsdb.settings import DatabaseSettings
from statsdb.telemetry import db_span_attributes
from statsdb.utils.decorators import traced

logger = get_logger(__name__)
query_logger = get_logger(QUERY_LOGGER_NAME)

# Async drivers used when DATABASE_URL names none
_ASYNC_DRIVERS = {
    "postgres": "postgresql+asyncpg",
    "postgresql": "postgresql+asyncpg",
    "cockroachdb": "postgresql+asyncpg",
    "mysql": "mysql+aiomysql",
    "sqlite": "sqlite+aiosqlite",
}

_QUERY_START_ATTR = "_statsdb_query_start"

# Prisma connection string options with no driver counterpart
_PRISMA_ONLY_PARAMS = ("schema", "connection_limit", "pool_timeout", "pgbouncer", "socket_timeout")


def to_async_url(url: str) -> str:
    """Return ``url`` with an async driver in its scheme.

    Example:
        >>> to_async_url("postgres://user@localhost/analytics")
        'postgresql+asyncpg://user@localhost/analytics'
    """
    scheme, separator, rest = url.partition("://")
    if not separator or "+" in scheme:
        return url

    driver = _ASYNC_DRIVERS.get(scheme.lower())
    if driver is None:
        return url

    return f"{driver}://{rest}"


def split_prisma_options(url: str) -> Tuple[URL, Dict[str, Any]]:
    """Turn a Prisma-style connection string into an async URL and engine options.

    Prisma options have no driver counterpart and would be forwarded to the
    driver's ``connect()`` as unknown keyword arguments, so they are removed
    from the URL. ``schema`` becomes the asyncpg ``search_path``,
    ``connection_limit`` and ``pool_timeout`` become pool options and
    ``pgbouncer=true`` disables the asyncpg statement cache.

    Example:
        >>> url, options = split_prisma_options("postgresql://u@db/umami?schema=public")
        >>> url.render_as_string(hide_password=False)
        'postgresql+asyncpg://u@db/umami'
        >>> options
        {'connect_args': {'server_settings': {'search_path': 'public'}}}

    Raises:
        StatsDBError: CONFIG_INVALID for a non-numeric pool option
    """
    parsed = make_url(to_async_url(url))
    prisma: Dict[str, str] = {}
    for key in _PRISMA_ONLY_PARAMS:
        value = parsed.query.get(key)
        if value is not None:
            prisma[key] = value[-1] if isinstance(value, tuple) else value

    if not prisma:
        return parsed, {}

    parsed = parsed.difference_update_query(prisma)
    options: Dict[str, Any] = {}
    connect_args: Dict[str, Any] = {}
    is_asyncpg = parsed.get_driver_name() == "asyncpg"

    if prisma.get("schema") and is_asyncpg:
        connect_args["server_settings"] = {"search_path": prisma["schema"]}
    if prisma.get("pgbouncer", "").lower() == "true" and is_asyncpg:
        connect_args["statement_cache_size"] = 0

    for key, option in (("connection_limit", "pool_size"), ("pool_timeout", "pool_timeout")):
        if key not in prisma:
            continue
        try:
            options[option] = int(prisma[key])
        except ValueError:
            raise configuration_error(
                f"Invalid {key} in DATABASE_URL: {prisma[key]}",
                config_key="DATABASE_URL",
                error_code=ErrorCode.CONFIG_INVALID,
            )

    if connect_args:
        options["connect_args"] = connect_args
    return parsed, options


def log_query(query_event: QueryEvent) -> None:
    """Default query listener, enabled with ``LOG_QUERY``."""
    query_logger.debug(
        "Query executed",
        extra={
            "params": query_event.params,
            "query": query_event.query,
            "duration.ms": f"{query_event.duration_ms:.3f}",
        },
    )


def _rows(result: CursorResult) -> List[Dict[str, Any]]:
    if not result.returns_rows:
        return []
    return [dict(row) for row in result.mappings().all()]


class SQLAlchemyClient:
    """SQLAlchemy-based database client.

    Features:
        - Lazily created ``AsyncEngine`` with connection pooling
        - ``query_raw`` escape hatch taking positional ``$N`` / ``?`` markers
        - ``transaction`` running prepared queries atomically
        - ``on_query`` subscription fed by SQLAlchemy cursor events
        - Driver errors are logged and re-raised unchanged

    Example:
        >>> client = SQLAlchemyClient(get_settings())
        >>> rows = await client.query_raw("select count(*) as n from pageview where url = $1", "/")
        >>> await client.dispose()
    """

    def __init__(self, settings: DatabaseSettings, engine: Optional[AsyncEngine] = None):
        """Initialize the client.

        Args:
            settings: Database settings (URL, pool options, LOG_QUERY)
            engine: Pre-built engine to use instead of creating one
        """
        self.settings = settings
        self._engine: Optional[AsyncEngine] = None
        self._listeners: List[QueryListener] = []

        if engine is not None:
            self._set_engine(engine)

        if settings.log_query:
            self.on_query(log_query)

    @property
    def engine(self) -> AsyncEngine:
        """Get or create the SQLAlchemy engine with lazy initialization."""
        if self._engine is None:
            self._set_engine(self._create_engine())
        return self._engine

    def _create_engine(self) -> AsyncEngine:
        """Create the async engine from settings.

        Raises:
            StatsDBError: CONFIG_MISSING without DATABASE_URL, CONNECTION_ERROR
                if SQLAlchemy rejects the URL or options
        """
        if not self.settings.database_url:
            raise configuration_error(
                "DATABASE_URL is not set",
                config_key="DATABASE_URL",
                error_code=ErrorCode.CONFIG_MISSING,
            )

        try:
            url, url_options = split_prisma_options(self.settings.database_url)
        except ArgumentError as e:
            raise connection_error("Invalid DATABASE_URL", cause=e)

        options: Dict[str, Any] = {"pool_pre_ping": self.settings.database_pool_pre_ping}
        if url.get_backend_name() != "sqlite":
            options.update(
                pool_size=self.settings.database_pool_size,
                max_overflow=self.settings.database_max_overflow,
                pool_timeout=self.settings.database_pool_timeout,
            )
            options.update(url_options)

        try:
            engine = create_async_engine(url, **options)
        except Exception as e:
            raise connection_error(
                "Failed to create database engine",
                service=url.drivername,
                cause=e,
            )

        logger.info("Database client initialized", extra={"db.driver": engine.dialect.driver})
        return engine

    def _set_engine(self, engine: AsyncEngine) -> None:
        self._engine = engine
        event.listen(engine.sync_engine, "before_cursor_execute", self._before_cursor_execute)
        event.listen(engine.sync_engine, "after_cursor_execute", self._after_cursor_execute)

    def _before_cursor_execute(self, conn, cursor, statement, parameters, context, executemany) -> None:
        # Kept on the per-statement context; failed statements never reach the after hook
        if context is not None:
            setattr(context, _QUERY_START_ATTR, time.perf_counter())

    def _after_cursor_execute(self, conn, cursor, statement, parameters, context, executemany) -> None:
        started = getattr(context, _QUERY_START_ATTR, None)
        if started is None or not self._listeners:
            return

        query_event = QueryEvent(
            query=statement,
            params=parameters,
            duration_ms=(time.perf_counter() - started) * 1000,
        )
        for listener in list(self._listeners):
            listener(query_event)

    def on_query(self, listener: QueryListener) -> None:
        """Subscribe ``listener`` to every executed statement."""
        self._listeners.append(listener)

    def _span_attributes(self, sql: str, *, operation: str, batch_total: Optional[int] = None) -> Dict[str, Any]:
        """Build OpenTelemetry span attributes for SQL operations."""
        system = self._engine.dialect.name if self._engine is not None else None
        return db_span_attributes(operation, system=system, statement=sql, batch_count=batch_total)

    @traced(
        span_name="statsdb.client.query_raw",
        attribute_getter=lambda self, sql, *params: self._span_attributes(sql, operation="query_raw"),
    )
    async def query_raw(self, sql: str, *params: Any) -> List[Dict[str, Any]]:
        """Execute ``sql`` with positional ``params`` and return the rows.

        Args:
            sql: Statement with ``$N`` or ``?`` markers
            *params: Values in marker order

        Returns:
            Rows as dictionaries (empty for statements returning no rows)
        """
        statement, bound = bind_positional(sql, params)
        start_time = time.time()

        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(text(statement), bound)
                rows = _rows(result)
        except Exception as exc:
            logger.error(
                "SQL query failed",
                extra={"duration.seconds": f"{time.time() - start_time:.6f}", "error": str(exc)},
                exc_info=True,
            )
            raise

        logger.debug(
            "Results fetched",
            extra={"duration.seconds": f"{time.time() - start_time:.6f}", "row_count": len(rows)},
        )
        return rows

    @traced(
        span_name="statsdb.client.transaction",
        attribute_getter=lambda self, operations: self._span_attributes(
            operations[0].sql if operations else "",
            operation="transaction",
            batch_total=len(operations),
        ),
    )
    async def transaction(self, operations: Sequence[PreparedQuery]) -> List[List[Dict[str, Any]]]:
        """Run ``operations`` in order inside one transaction.

        Any failure rolls the whole transaction back and propagates.

        Returns:
            One list of rows per operation
        """
        start_time = time.time()
        results: List[List[Dict[str, Any]]] = []

        try:
            async with self.engine.begin() as conn:
                for operation in operations:
                    statement, bound = bind_positional(operation.sql, operation.params)
                    result = await conn.execute(text(statement), bound)
                    results.append(_rows(result))
        except Exception as exc:
            logger.error(
                "Transaction failed",
                extra={
                    "duration.seconds": f"{time.time() - start_time:.6f}",
                    "completed": len(results),
                    "error": str(exc),
                },
                exc_info=True,
            )
            raise

        logger.debug(
            "Transaction committed",
            extra={"duration.seconds": f"{time.time() - start_time:.6f}", "query_count": len(operations)},
        )
        return results

    async def dispose(self) -> None:
        """Close every pooled connection and drop the engine."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
