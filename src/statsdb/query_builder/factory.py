"""Fragment Builder Factory.

This module maps each supported :class:`DatabaseType` onto its fragment
builder class. Adding a dialect is a registry entry, not a change to every
builder operation.
"""

from typing import Dict, Optional, Type, Union

from statsdb.common.exceptions import unsupported_dialect_error
from statsdb.constants import DatabaseType
from statsdb.dialect import coerce_dialect
from statsdb.query_builder.base import BaseFragmentBuilder
from statsdb.query_builder.mysql.fragment_builder import MySQLFragmentBuilder
from statsdb.query_builder.params import QueryParams
from statsdb.query_builder.postgresql.cockroach_builder import CockroachDBFragmentBuilder
from statsdb.query_builder.postgresql.fragment_builder import PostgreSQLFragmentBuilder


class FragmentBuilderFactory:
    """Factory for creating dialect-specific fragment builders.

    Example:
        >>> builder = FragmentBuilderFactory.create(DatabaseType.POSTGRESQL)
        >>> builder.get_json_field("event_data", "amount", True)
        'CAST(event_data ->> $1 AS DECIMAL)'
    """

    _builders: Dict[DatabaseType, Type[BaseFragmentBuilder]] = {
        DatabaseType.MYSQL: MySQLFragmentBuilder,
        DatabaseType.POSTGRESQL: PostgreSQLFragmentBuilder,
        DatabaseType.COCKROACHDB: CockroachDBFragmentBuilder,
    }

    @classmethod
    def register(cls, database_type: DatabaseType, builder_class: Type[BaseFragmentBuilder]) -> None:
        """Register (or replace) the builder class used for ``database_type``."""
        cls._builders[database_type] = builder_class

    @classmethod
    def create(
        cls,
        database_type: Union[DatabaseType, str, None],
        params: Optional[QueryParams] = None,
    ) -> BaseFragmentBuilder:
        """Create the fragment builder for ``database_type``.

        Args:
            database_type: Dialect or dialect tag
            params: Optional parameter list to share with the new builder

        Returns:
            Builder bound to ``params`` (or a fresh parameter list)

        Raises:
            StatsDBError: DIALECT_NOT_SUPPORTED if no builder is registered
        """
        dialect = coerce_dialect(database_type)
        builder_class = cls._builders.get(dialect)
        if builder_class is None:
            raise unsupported_dialect_error(dialect)

        return builder_class(params)


def get_fragment_builder(
    database_type: Union[DatabaseType, str, None] = None,
    params: Optional[QueryParams] = None,
) -> BaseFragmentBuilder:
    """Get a fragment builder, defaulting to the configured dialect.

    Example:
        >>> from statsdb.query_builder import get_fragment_builder
        >>>
        >>> builder = get_fragment_builder()  # dialect from DATABASE_URL
        >>> builder.get_timestamp_interval("created_at")
    """
    if database_type is None:
        from statsdb.settings import get_settings

        database_type = get_settings().dialect

    return FragmentBuilderFactory.create(database_type, params)
