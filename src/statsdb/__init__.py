from statsdb.__version__ import __version__

from statsdb.constants import FILTER_IGNORED, DatabaseType, DateUnit

from statsdb.dialect import get_database_type, resolve_dialect

from statsdb.query_builder import (
    BaseFragmentBuilder,
    FragmentBuilderFactory,
    QueryParams,
    get_fragment_builder,
    get_sanitized_columns,
)

from statsdb.client import PreparedQuery, QueryEvent, SQLAlchemyClient
from statsdb.query import QueryExecutor
from statsdb.database import Database, close_database, get_database

from statsdb.common.exceptions import StatsDBError, ErrorCode

from statsdb.schema_files import copy_schema_files


__all__ = [
    "__version__",

    "DatabaseType",
    "DateUnit",
    "FILTER_IGNORED",

    "get_database_type",
    "resolve_dialect",

    # Fragment builders
    "BaseFragmentBuilder",
    "FragmentBuilderFactory",
    "QueryParams",
    "get_fragment_builder",
    "get_sanitized_columns",

    # Execution
    "SQLAlchemyClient",
    "PreparedQuery",
    "QueryEvent",
    "QueryExecutor",
    "Database",
    "get_database",
    "close_database",

    # Exceptions (public API)
    "StatsDBError",
    "ErrorCode",

    "copy_schema_files",
]
