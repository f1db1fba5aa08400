"""Dialect detection for statsdb."""

from statsdb.dialect.resolver import coerce_dialect, get_database_type, resolve_dialect

__all__ = [
    "get_database_type",
    "coerce_dialect",
    "resolve_dialect",
]
