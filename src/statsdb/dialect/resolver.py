"""Resolve the SQL dialect from a connection string.

The dialect is derived from the scheme of the connection string, with an
optional explicit override. CockroachDB clusters are reached through a
``postgresql://`` URL, so they are recognised by their cloud host name.
"""

from typing import Optional, Union

from statsdb.common.exceptions import unsupported_dialect_error
from statsdb.constants import (
    COCKROACH_CLOUD_HOST,
    POSTGRES_SCHEME_ALIAS,
    SUPPORTED_DATABASE_TYPES,
    DatabaseType,
)
from statsdb.logging import get_logger

logger = get_logger(__name__)


def get_database_type(url: Optional[str] = None, override: Optional[str] = None) -> Optional[str]:
    """Return the database type tag for ``url``.

    Args:
        url: Connection string such as ``postgresql+asyncpg://host/db``.
        override: Explicit type (``DATABASE_TYPE``) taking precedence over
            the URL scheme.

    Returns:
        ``mysql``, ``postgresql`` or ``cockroachdb`` for supported databases,
        the bare scheme for anything else, or None if neither argument
        carries a type.

    Example:
        >>> get_database_type("postgres://localhost/analytics")
        'postgresql'
        >>> get_database_type("postgresql://u@free-tier.cockroachlabs.cloud:26257/db")
        'cockroachdb'
    """
    db_type = override or (url.split(":", 1)[0] if url else None)
    if not db_type:
        return None

    # SQLAlchemy URLs carry the driver after a plus sign
    db_type = db_type.strip().lower().split("+", 1)[0]

    if db_type == DatabaseType.COCKROACHDB.value or (
        db_type in (POSTGRES_SCHEME_ALIAS, DatabaseType.POSTGRESQL.value)
        and url
        and COCKROACH_CLOUD_HOST in url
    ):
        return DatabaseType.COCKROACHDB.value

    if db_type == POSTGRES_SCHEME_ALIAS:
        return DatabaseType.POSTGRESQL.value

    return db_type


def coerce_dialect(
    database_type: Union[DatabaseType, str, None],
    message: Optional[str] = None,
) -> DatabaseType:
    """Turn a type tag into a :class:`DatabaseType`.

    ``message`` replaces the default error message.

    Raises:
        StatsDBError: DIALECT_NOT_SUPPORTED for None or unknown tags.
    """
    if isinstance(database_type, DatabaseType):
        return database_type

    if database_type in SUPPORTED_DATABASE_TYPES:
        return DatabaseType(database_type)

    raise unsupported_dialect_error(database_type, message=message)


def resolve_dialect(url: Optional[str] = None, override: Optional[str] = None) -> DatabaseType:
    """Resolve the dialect for a connection string, failing loudly.

    An unresolvable dialect is a fatal configuration error: the caller must
    not fall back to some default SQL flavour.

    Raises:
        StatsDBError: DIALECT_NOT_SUPPORTED if the URL is missing or its
            scheme is not a supported database.
    """
    db_type = get_database_type(url, override)
    dialect = coerce_dialect(db_type)
    logger.debug("Database type detected", extra={"database_type": dialect.value})
    return dialect
