"""CockroachDB fragment builder implementation."""

from typing import Dict

from statsdb.constants import MYSQL_DATE_FORMATS, DatabaseType, DateUnit
from statsdb.query_builder.postgresql.fragment_builder import PostgreSQLFragmentBuilder


class CockroachDBFragmentBuilder(PostgreSQLFragmentBuilder):
    """Fragment builder for CockroachDB.

    CockroachDB speaks the Postgres dialect, but its ``to_char`` does not
    support the templates used for date bucketing. Dates are formatted with
    ``experimental_strftime`` and strftime-style (MySQL) format strings
    instead; everything else is inherited unchanged.
    """

    database_type = DatabaseType.COCKROACHDB

    date_format_function: str = "experimental_strftime"
    date_formats: Dict[DateUnit, str] = MYSQL_DATE_FORMATS
