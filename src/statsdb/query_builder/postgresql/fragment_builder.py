"""PostgreSQL fragment builder implementation."""

from typing import Dict, Optional

from statsdb.constants import POSTGRESQL_DATE_FORMATS, DatabaseType, DateUnit
from statsdb.query_builder.base import BaseFragmentBuilder


class PostgreSQLFragmentBuilder(BaseFragmentBuilder):
    """Fragment builder for PostgreSQL.

    Key Features:
        - ``date_trunc`` bucketing, shifted with ``AT TIME ZONE``
        - ``to_char`` formatting
        - JSON property keys are bound parameters (``->> $N``)
        - ``::uuid`` casts for session and website ids
    """

    database_type = DatabaseType.POSTGRESQL

    date_format_function: str = "to_char"
    date_formats: Dict[DateUnit, str] = POSTGRESQL_DATE_FORMATS

    def to_uuid(self) -> str:
        return "::uuid"

    def _build_date_query(self, field: str, unit: DateUnit, timezone: Optional[str]) -> str:
        date_format = self.date_formats[unit]
        source = f"{field} at time zone '{timezone}'" if timezone else field

        return f"{self.date_format_function}(date_trunc('{unit.value}', {source}), '{date_format}')"

    def get_timestamp_interval(self, field: str) -> str:
        return f"floor(extract(epoch from max({field}) - min({field})))"

    def get_json_field(self, column: str, property: str, is_number: bool = False) -> str:
        accessor = f"{column} ->> {self.params.add(property)}"

        if is_number:
            accessor = f"CAST({accessor} AS DECIMAL)"

        return accessor
