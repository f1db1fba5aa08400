"""MySQL fragment builder.

Example:
    from statsdb.constants import DatabaseType
    from statsdb.query_builder import get_fragment_builder

    builder = get_fragment_builder(DatabaseType.MYSQL)
    builder.get_date_query("created_at", "day", "Europe/Berlin")
    # date_format(convert_tz(created_at,'+00:00','+01:00'), '%Y-%m-%d')
"""

from statsdb.query_builder.mysql.fragment_builder import MySQLFragmentBuilder

__all__ = [
    "MySQLFragmentBuilder"
]
