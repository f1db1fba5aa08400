"""Constants module for statsdb.

This module contains all constant values and enumerations used throughout
the package. It has no dependencies on other statsdb modules.

Organization:
    - database: Supported dialects and connection string markers
    - filters: Filter keys, logical tables and the ignored sentinel
    - sql: Date formats and aggregation verbs
"""

from statsdb.constants.database import (
    COCKROACH_CLOUD_HOST,
    POSTGRES_SCHEME_ALIAS,
    SUPPORTED_DATABASE_TYPES,
    DatabaseType,
)
from statsdb.constants.filters import (
    DEFAULT_SESSION_KEY,
    EVENT_FILTER_KEYS,
    FILTER_IGNORED,
    PAGEVIEW_FILTER_KEYS,
    SESSION_FILTER_KEYS,
    FilterSentinel,
    FilterTable,
)
from statsdb.constants.sql import (
    MYSQL_DATE_FORMATS,
    NUMERIC_AGGREGATIONS,
    POSTGRESQL_DATE_FORMATS,
    UTC_OFFSET,
    AggregationVerb,
    DateUnit,
)

__all__ = [
    # Database
    "DatabaseType",
    "COCKROACH_CLOUD_HOST",
    "POSTGRES_SCHEME_ALIAS",
    "SUPPORTED_DATABASE_TYPES",
    # Filters
    "FILTER_IGNORED",
    "FilterSentinel",
    "FilterTable",
    "PAGEVIEW_FILTER_KEYS",
    "SESSION_FILTER_KEYS",
    "EVENT_FILTER_KEYS",
    "DEFAULT_SESSION_KEY",
    # SQL
    "DateUnit",
    "AggregationVerb",
    "NUMERIC_AGGREGATIONS",
    "MYSQL_DATE_FORMATS",
    "POSTGRESQL_DATE_FORMATS",
    "UTC_OFFSET",
]
