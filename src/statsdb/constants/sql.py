"""SQL fragment constants.

Date bucketing formats per dialect family and the aggregation verbs accepted
for event-data columns.
"""

from enum import Enum


class DateUnit(str, Enum):
    """Granularity a timestamp can be truncated to."""

    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    MONTH = "month"
    YEAR = "year"


class AggregationVerb(str, Enum):
    """Aggregate functions allowed on event-data properties."""

    SUM = "sum"
    AVG = "avg"
    MIN = "min"
    MAX = "max"
    COUNT = "count"


NUMERIC_AGGREGATIONS = frozenset(
    {AggregationVerb.SUM, AggregationVerb.AVG, AggregationVerb.MIN, AggregationVerb.MAX}
)

# strftime-style formats understood by MySQL date_format and
# CockroachDB experimental_strftime
MYSQL_DATE_FORMATS = {
    DateUnit.MINUTE: "%Y-%m-%d %H:%i:00",
    DateUnit.HOUR: "%Y-%m-%d %H:00:00",
    DateUnit.DAY: "%Y-%m-%d",
    DateUnit.MONTH: "%Y-%m-01",
    DateUnit.YEAR: "%Y-01-01",
}

# to_char templates
POSTGRESQL_DATE_FORMATS = {
    DateUnit.MINUTE: "YYYY-MM-DD HH24:MI:00",
    DateUnit.HOUR: "YYYY-MM-DD HH24:00:00",
    DateUnit.DAY: "YYYY-MM-DD",
    DateUnit.MONTH: "YYYY-MM-01",
    DateUnit.YEAR: "YYYY-01-01",
}

UTC_OFFSET = "+00:00"
