"""Unit tests for the Database facade and its process-wide instance."""

import asyncio
from unittest.mock import AsyncMock, Mock, patch

import pytest

import statsdb.database as database_module
from statsdb.common.exceptions import StatsDBError
from statsdb.constants import DatabaseType
from statsdb.database import Database, close_database, get_database, set_database
from statsdb.query_builder import MySQLFragmentBuilder, PostgreSQLFragmentBuilder, QueryParams
from statsdb.settings import DatabaseSettings


@pytest.fixture
def mock_client():
    client = Mock()
    client.query_raw = AsyncMock(return_value=[])
    client.transaction = AsyncMock(return_value=[])
    client.dispose = AsyncMock()
    return client


@pytest.fixture(autouse=True)
def reset_database():
    set_database(None)
    yield
    set_database(None)


class TestDatabase:
    """Test the client/dialect pairing."""

    def test_fragments_match_dialect(self, mock_client):
        db = Database(mock_client, "mysql")

        assert db.dialect == DatabaseType.MYSQL
        assert isinstance(db.fragments(), MySQLFragmentBuilder)
        assert db.to_uuid() == ""

    def test_fragments_share_params(self, mock_client):
        db = Database(mock_client, DatabaseType.POSTGRESQL)
        params = QueryParams()

        first = db.fragments(params)
        second = db.fragments(params)
        first.get_filter_query("pageview", {"url": "/"})
        where = second.get_filter_query("session", {"os": "Linux"})

        assert isinstance(first, PostgreSQLFragmentBuilder)
        assert where == "and session.os=$2"
        assert db.to_uuid() == "::uuid"

    def test_unsupported_dialect(self, mock_client):
        with pytest.raises(StatsDBError):
            Database(mock_client, "sqlite")

    def test_raw_query_goes_through_executor(self, mock_client):
        db = Database(mock_client, "mysql")

        asyncio.run(db.raw_query("select * from session where os = $1", ["Linux"]))

        mock_client.query_raw.assert_awaited_once_with("select * from session where os = ?", "Linux")

    def test_transaction(self, mock_client):
        db = Database(mock_client, "postgresql")

        asyncio.run(db.transaction([]))

        mock_client.transaction.assert_awaited_once_with([])

    def test_close_disposes_client(self, mock_client):
        asyncio.run(Database(mock_client, "postgresql").close())

        mock_client.dispose.assert_awaited_once()

    def test_from_settings(self):
        settings = DatabaseSettings(_env_file=None, database_url="postgres://u@localhost/analytics")

        db = Database.from_settings(settings)

        assert db.dialect == DatabaseType.POSTGRESQL
        assert db.client.settings is settings


class TestProcessWideDatabase:
    """Test the init-once lifecycle."""

    def test_get_database_is_created_once(self):
        settings = DatabaseSettings(_env_file=None, database_url="mysql://u@localhost/analytics")

        with patch.object(database_module, "get_settings", return_value=settings):
            first = get_database()
            second = get_database()

        assert first is second
        assert first.dialect == DatabaseType.MYSQL

    def test_close_database_resets_slot(self, mock_client):
        db = Database(mock_client, "postgresql")
        set_database(db)

        asyncio.run(close_database())

        mock_client.dispose.assert_awaited_once()
        assert database_module._database is None

    def test_close_without_database(self):
        asyncio.run(close_database())
