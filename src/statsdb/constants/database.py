"""Database-related constants and enumerations.

This module defines the supported SQL dialects and the connection string
markers used to detect them.
"""

from enum import Enum


class DatabaseType(str, Enum):
    """Type of database backing the analytics store.

    Values:
        MYSQL: MySQL / MariaDB row-store
            - ``?`` placeholders on the wire
            - ``date_format`` / ``convert_tz`` for date bucketing
            - ``->> '$.key'`` JSON path accessors

        POSTGRESQL: PostgreSQL
            - ``$N`` placeholders
            - ``to_char`` / ``date_trunc`` / ``AT TIME ZONE``
            - parameterized ``->>`` JSON accessors

        COCKROACHDB: CockroachDB (distributed Postgres wire protocol)
            - Same as POSTGRESQL except date formatting, which goes
              through ``experimental_strftime``
    """

    MYSQL = "mysql"
    POSTGRESQL = "postgresql"
    COCKROACHDB = "cockroachdb"

    @property
    def is_postgres_family(self) -> bool:
        """True for dialects speaking the Postgres SQL flavour."""
        return self in (DatabaseType.POSTGRESQL, DatabaseType.COCKROACHDB)


# Scheme alias accepted in connection strings
POSTGRES_SCHEME_ALIAS = "postgres"

# Host marker of CockroachDB serverless / dedicated clusters
COCKROACH_CLOUD_HOST = "cockroachlabs.cloud"

SUPPORTED_DATABASE_TYPES = frozenset(db_type.value for db_type in DatabaseType)
