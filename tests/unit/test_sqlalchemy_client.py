"""Tests for the SQLAlchemy client, run against a SQLite file database."""

import asyncio
import logging

import pytest

from statsdb.client import (
    PreparedQuery,
    QueryEvent,
    SQLAlchemyClient,
    split_prisma_options,
    to_async_url,
)
from statsdb.common.exceptions import ErrorCode, StatsDBError
from statsdb.protocols import DatabaseClient
from statsdb.settings import DatabaseSettings


def _settings(url, **kwargs):
    return DatabaseSettings(_env_file=None, database_url=url, **kwargs)


@pytest.fixture
def sqlite_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'analytics.db'}"


async def _with_client(client, *steps):
    try:
        results = []
        for step in steps:
            results.append(await step(client))
        return results
    finally:
        await client.dispose()


class TestToAsyncUrl:
    """Test driver selection for plain connection strings."""

    @pytest.mark.parametrize(
        "url, expected",
        [
            ("postgresql://u@h/db", "postgresql+asyncpg://u@h/db"),
            ("postgres://u@h/db", "postgresql+asyncpg://u@h/db"),
            ("cockroachdb://u@h:26257/db", "postgresql+asyncpg://u@h:26257/db"),
            ("mysql://u@h/db", "mysql+aiomysql://u@h/db"),
            ("sqlite:///a.db", "sqlite+aiosqlite:///a.db"),
            ("postgresql+psycopg://u@h/db", "postgresql+psycopg://u@h/db"),
        ],
    )
    def test_async_driver(self, url, expected):
        assert to_async_url(url) == expected


class TestSplitPrismaOptions:
    """Test Prisma-style connection strings."""

    def test_schema_becomes_search_path(self):
        url, options = split_prisma_options("postgresql://u:p@localhost:5432/umami?schema=public")

        assert url.drivername == "postgresql+asyncpg"
        assert dict(url.query) == {}
        assert options == {"connect_args": {"server_settings": {"search_path": "public"}}}

    def test_pool_options_and_pgbouncer(self):
        url, options = split_prisma_options(
            "postgresql://u@localhost/umami?connection_limit=3&pool_timeout=20&pgbouncer=true&sslmode=require"
        )

        assert dict(url.query) == {"sslmode": "require"}
        assert options == {
            "pool_size": 3,
            "pool_timeout": 20,
            "connect_args": {"statement_cache_size": 0},
        }

    def test_mysql_drops_schema(self):
        url, options = split_prisma_options("mysql://u@localhost/umami?schema=umami")

        assert url.drivername == "mysql+aiomysql"
        assert "schema" not in url.query
        assert options == {}

    def test_plain_url_is_unchanged(self):
        url, options = split_prisma_options("postgresql+asyncpg://u@localhost/umami")

        assert url.render_as_string(hide_password=False) == "postgresql+asyncpg://u@localhost/umami"
        assert options == {}

    def test_invalid_connection_limit(self):
        with pytest.raises(StatsDBError) as exc_info:
            split_prisma_options("postgresql://u@localhost/umami?connection_limit=many")

        assert exc_info.value.error_code == ErrorCode.CONFIG_INVALID

    def test_driver_connect_arguments_exclude_prisma_options(self):
        pytest.importorskip("asyncpg")
        client = SQLAlchemyClient(_settings("postgresql://u:p@localhost:5432/umami?schema=public"))
        engine = client.engine

        _, connect_kwargs = engine.dialect.create_connect_args(engine.url)

        assert "schema" not in connect_kwargs
        assert connect_kwargs["database"] == "umami"
        asyncio.run(client.dispose())


class TestSQLAlchemyClient:
    """Test raw queries, transactions and query events."""

    def test_satisfies_client_protocol(self, sqlite_url):
        assert isinstance(SQLAlchemyClient(_settings(sqlite_url)), DatabaseClient)

    def test_missing_url(self):
        client = SQLAlchemyClient(_settings(None))

        with pytest.raises(StatsDBError) as exc_info:
            client.engine

        assert exc_info.value.error_code == ErrorCode.CONFIG_MISSING

    def test_query_raw_round_trip(self, sqlite_url):
        client = SQLAlchemyClient(_settings(sqlite_url))

        _, inserted, rows = asyncio.run(
            _with_client(
                client,
                lambda c: c.query_raw("create table pageview (url text, views integer)"),
                lambda c: c.query_raw(
                    "insert into pageview (url, views) values ($1, $2), ($3, $4)", "/", 3, "/pricing", 1
                ),
                lambda c: c.query_raw(
                    "select url, views from pageview where views >= ? order by url", 1
                ),
            )
        )

        assert inserted == []
        assert rows == [{"url": "/", "views": 3}, {"url": "/pricing", "views": 1}]

    def test_transaction_commits_all_operations(self, sqlite_url):
        client = SQLAlchemyClient(_settings(sqlite_url))

        results, rows = asyncio.run(
            _with_client(
                client,
                lambda c: c.transaction(
                    [
                        PreparedQuery("create table event (name text)"),
                        PreparedQuery("insert into event (name) values ($1)", ["signup"]),
                        PreparedQuery("select count(*) as n from event"),
                    ]
                ),
                lambda c: c.query_raw("select name from event"),
            )
        )

        assert results == [[], [], [{"n": 1}]]
        assert rows == [{"name": "signup"}]

    def test_transaction_rolls_back_on_failure(self, sqlite_url):
        client = SQLAlchemyClient(_settings(sqlite_url))

        async def scenario(c):
            await c.query_raw("create table event (name text)")
            with pytest.raises(Exception):
                await c.transaction(
                    [
                        PreparedQuery("insert into event (name) values ($1)", ["signup"]),
                        PreparedQuery("insert into missing_table values (1)"),
                    ]
                )
            return await c.query_raw("select count(*) as n from event")

        [rows] = asyncio.run(_with_client(client, scenario))

        assert rows == [{"n": 0}]

    def test_on_query_receives_events(self, sqlite_url):
        client = SQLAlchemyClient(_settings(sqlite_url))
        events = []
        client.on_query(events.append)

        asyncio.run(_with_client(client, lambda c: c.query_raw("select $1 as v", "x")))

        selects = [e for e in events if "as v" in e.query]
        assert len(selects) == 1
        assert isinstance(selects[0], QueryEvent)
        assert selects[0].query == "select ? as v"
        assert selects[0].duration_ms >= 0

    def test_log_query_setting_logs_statements(self, sqlite_url, caplog):
        caplog.set_level(logging.DEBUG, logger="statsdb.query")
        client = SQLAlchemyClient(_settings(sqlite_url, log_query=True))

        asyncio.run(_with_client(client, lambda c: c.query_raw("select 1 as v")))

        records = [
            r for r in caplog.records if r.name == "statsdb.query" and "as v" in r.query
        ]
        assert len(records) == 1
        assert records[0].getMessage() == "Query executed"
        assert records[0].query == "select 1 as v"

    def test_driver_errors_propagate(self, sqlite_url):
        client = SQLAlchemyClient(_settings(sqlite_url))

        async def scenario(c):
            await c.query_raw("select * from missing_table")

        with pytest.raises(Exception) as exc_info:
            asyncio.run(_with_client(client, scenario))

        assert not isinstance(exc_info.value, StatsDBError)

    def test_dispose_resets_engine(self, sqlite_url):
        client = SQLAlchemyClient(_settings(sqlite_url))
        client.engine

        asyncio.run(client.dispose())

        assert client._engine is None

    def test_failed_statements_leave_no_timing_state(self, sqlite_url):
        client = SQLAlchemyClient(_settings(sqlite_url))
        events = []
        client.on_query(events.append)

        async def scenario(c):
            for _ in range(5):
                with pytest.raises(Exception):
                    await c.query_raw("select * from missing_table")
            await c.query_raw("select $1 as v", "ok")
            async with c.engine.connect() as conn:
                raw = await conn.get_raw_connection()
                return dict(raw.info)

        [info] = asyncio.run(_with_client(client, scenario))

        assert not any(key.startswith("statsdb") for key in info)
        assert [e.query for e in events if "as v" in e.query] == ["select ? as v"]
