"""MySQL fragment builder implementation."""

from typing import Optional

from statsdb.constants import MYSQL_DATE_FORMATS, UTC_OFFSET, DatabaseType, DateUnit
from statsdb.query_builder.base import BaseFragmentBuilder
from statsdb.utils.datetime import get_utc_offset


class MySQLFragmentBuilder(BaseFragmentBuilder):
    """Fragment builder for MySQL and MariaDB.

    Differences from Postgres:
        - Timestamps are stored in UTC and shifted with ``convert_tz`` using
          the zone's current offset (the named-zone tables are often not
          loaded on managed MySQL).
        - JSON property keys are inlined into a ``$.key`` path, so JSON
          accessors never touch the parameter list. Keys must come from a
          trusted, sanitized source (see ``get_sanitized_columns``).
        - No UUID cast is needed.
    """

    database_type = DatabaseType.MYSQL

    def to_uuid(self) -> str:
        return ""

    def _build_date_query(self, field: str, unit: DateUnit, timezone: Optional[str]) -> str:
        date_format = MYSQL_DATE_FORMATS[unit]

        if timezone:
            offset = get_utc_offset(timezone)
            return f"date_format(convert_tz({field},'{UTC_OFFSET}','{offset}'), '{date_format}')"

        return f"date_format({field}, '{date_format}')"

    def get_timestamp_interval(self, field: str) -> str:
        return f"floor(unix_timestamp(max({field})) - unix_timestamp(min({field})))"

    def get_json_field(self, column: str, property: str, is_number: bool = False) -> str:
        return f"{column} ->> '$.{property}'"
