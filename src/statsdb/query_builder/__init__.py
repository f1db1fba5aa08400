"""Fragment builders for dialect-specific analytics SQL.

Builders generate SQL snippets (date bucketing, JSON accessors, filter
clauses, event-data aggregations) for concatenation into larger queries.
They do NOT execute anything; that is handled by
:class:`statsdb.query.QueryExecutor`.

Architecture:
    - base.py: Shared operations and the abstract dialect hooks
    - mysql/: MySQL / MariaDB builder
    - postgresql/: PostgreSQL and CockroachDB builders
    - factory.py: DatabaseType -> builder class lookup table
    - params.py: The builder-owned positional parameter list

Example:
    >>> from statsdb.query_builder import get_fragment_builder
    >>>
    >>> builder = get_fragment_builder("postgresql")
    >>> parsed = builder.parse_filters("pageview", {"url": "/pricing", "os": "Linux"})
    >>> parsed.join_session
    'inner join session on pageview.session_id = session.session_id'
    >>> builder.params.values
    ['/pricing', 'Linux']
"""

from statsdb.query_builder.base import BaseFragmentBuilder, get_sanitized_columns
from statsdb.query_builder.factory import FragmentBuilderFactory, get_fragment_builder
from statsdb.query_builder.mysql.fragment_builder import MySQLFragmentBuilder
from statsdb.query_builder.params import QueryParams
from statsdb.query_builder.postgresql.cockroach_builder import CockroachDBFragmentBuilder
from statsdb.query_builder.postgresql.fragment_builder import PostgreSQLFragmentBuilder
from statsdb.query_builder.types import Filters, ParsedFilters

__all__ = [
    "BaseFragmentBuilder",
    "FragmentBuilderFactory",
    "get_fragment_builder",
    "get_sanitized_columns",
    "MySQLFragmentBuilder",
    "PostgreSQLFragmentBuilder",
    "CockroachDBFragmentBuilder",
    "QueryParams",
    "Filters",
    "ParsedFilters",
]
