"""Postgres-family fragment builders.

PostgreSQL and CockroachDB share one implementation; CockroachDB only
overrides date formatting.
"""

from statsdb.query_builder.postgresql.cockroach_builder import CockroachDBFragmentBuilder
from statsdb.query_builder.postgresql.fragment_builder import PostgreSQLFragmentBuilder

__all__ = [
    "PostgreSQLFragmentBuilder",
    "CockroachDBFragmentBuilder",
]
