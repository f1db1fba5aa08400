import re
from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar, Dict, List, Mapping, Optional, Union
from urllib.parse import unquote

from statsdb.common.exceptions import validation_error
from statsdb.constants import (
    DEFAULT_SESSION_KEY,
    EVENT_FILTER_KEYS,
    FILTER_IGNORED,
    NUMERIC_AGGREGATIONS,
    PAGEVIEW_FILTER_KEYS,
    SESSION_FILTER_KEYS,
    AggregationVerb,
    DatabaseType,
    DateUnit,
    FilterTable,
)
from statsdb.query_builder.params import QueryParams
from statsdb.query_builder.types import ParsedFilters
from statsdb.utils.datetime import get_timezone

# ASCII word characters; any Unicode whitespace is kept
_NON_WORD_PATTERN = re.compile(r"[^A-Za-z0-9_\s]")

# Logical tables each filter key may be applied to
_FILTER_TABLES: Dict[str, frozenset] = {
    "url": frozenset({FilterTable.PAGEVIEW.value, FilterTable.EVENT.value}),
    "referrer": frozenset({FilterTable.PAGEVIEW.value, FilterTable.EVENT.value}),
    "domain": frozenset({FilterTable.PAGEVIEW.value}),
    "query": frozenset({FilterTable.PAGEVIEW.value}),
    "os": frozenset({FilterTable.SESSION.value}),
    "browser": frozenset({FilterTable.SESSION.value}),
    "device": frozenset({FilterTable.SESSION.value}),
    "country": frozenset({FilterTable.SESSION.value}),
    "event_name": frozenset({FilterTable.EVENT.value}),
}


def _table_name(table: Union[FilterTable, str]) -> str:
    return table.value if isinstance(table, FilterTable) else str(table)


def _is_number(value: Any) -> bool:
    """Non-zero ints and floats; booleans are not numbers here."""
    return isinstance(value, (int, float)) and not isinstance(value, bool) and bool(value)


class BaseFragmentBuilder(ABC):
    """Base interface for dialect-specific SQL fragment builders.

    A fragment builder turns analytics intent (date bucketing, JSON property
    access, filters) into SQL snippets meant to be concatenated into a larger
    query. Each supported dialect has one concrete builder; the factory maps
    a :class:`DatabaseType` onto its builder class.

    Every builder owns a :class:`QueryParams`. Operations that need a bound
    value append it there and embed the ``$N`` placeholder it returns, so the
    SQL text and the parameter list always stay aligned. Pass an existing
    ``QueryParams`` to let several builders (or hand-written SQL) share one
    list.

    Only dialect-dependent pieces are abstract: UUID casts, date truncation,
    timestamp intervals and JSON accessors. Filter clauses and event-data
    aggregations are composed from those and are shared.
    """

    database_type: ClassVar[DatabaseType]

    def __init__(self, params: Optional[QueryParams] = None):
        self.params = params if params is not None else QueryParams()

    @abstractmethod
    def to_uuid(self) -> str:
        """Return the suffix casting a bound parameter to a UUID."""
        pass

    @abstractmethod
    def _build_date_query(self, field: str, unit: DateUnit, timezone: Optional[str]) -> str:
        """Build the date truncation expression.

        Args:
            field: Column reference
            unit: Validated truncation unit
            timezone: Validated IANA timezone name or None

        Returns:
            Platform-specific expression producing a normalized timestamp string
        """
        pass

    @abstractmethod
    def get_timestamp_interval(self, field: str) -> str:
        """Return SQL computing whole seconds between max and min of ``field``."""
        pass

    @abstractmethod
    def get_json_field(self, column: str, property: str, is_number: bool = False) -> str:
        """Return an accessor for ``property`` of JSON column ``column``.

        Args:
            column: JSON column reference
            property: Property key
            is_number: Cast the extracted value to a decimal where supported

        Returns:
            Accessor expression
        """
        pass

    def get_date_query(
        self,
        field: str,
        unit: Union[DateUnit, str],
        timezone: Optional[str] = None,
    ) -> str:
        """Return SQL truncating ``field`` to ``unit`` and formatting it.

        Args:
            field: Timestamp column reference
            unit: One of minute, hour, day, month, year
            timezone: Optional IANA timezone name the bucket is computed in

        Returns:
            Expression producing e.g. ``2024-03-01 13:00:00`` for ``hour``

        Raises:
            StatsDBError: VALIDATION_ERROR for an unknown unit or timezone
        """
        try:
            date_unit = DateUnit(unit)
        except ValueError:
            raise validation_error(
                f"Unsupported date unit: {unit}. Use one of: "
                f"{', '.join(u.value for u in DateUnit)}",
                field="unit",
                value=unit,
            )

        if timezone:
            # Timezone names end up inlined in the SQL text
            get_timezone(timezone)

        return self._build_date_query(field, date_unit, timezone or None)

    def get_event_data_columns_query(
        self,
        column: str,
        columns: Mapping[str, Optional[Union[AggregationVerb, str]]],
    ) -> str:
        """Return one aggregate expression per event-data property.

        Each expression is aliased with the zero-based position of its entry
        in ``columns`` (not the property name). Entries set to None and
        unknown verbs are skipped without shifting later aliases.

        Example:
            ``{"amount": "sum", "sku": "count"}`` renders, for Postgres::

                sum(CAST(event_data ->> $1 AS DECIMAL)) as "0",
                count(event_data ->> $2) as "1"
        """
        expressions: List[str] = []

        for index, (key, verb) in enumerate(columns.items()):
            if verb is None:
                continue

            try:
                aggregation = AggregationVerb(verb)
            except ValueError:
                continue

            is_number = aggregation in NUMERIC_AGGREGATIONS
            accessor = self.get_json_field(column, key, is_number)
            expressions.append(f'{aggregation.value}({accessor}) as "{index}"')

        return ",\n".join(expressions)

    def get_event_data_filter_query(self, column: str, filters: Mapping[str, Any]) -> str:
        """Return equality predicates on event-data properties.

        Numeric values compare against a numeric accessor. Every value is
        bound through the parameter list.
        """
        predicates: List[str] = []

        for key, value in filters.items():
            if value is None:
                continue

            accessor = self.get_json_field(column, key, _is_number(value))
            predicates.append(f"{accessor} = {self.params.add(value)}")

        return "\nand ".join(predicates)

    def get_filter_query(
        self,
        table: Union[FilterTable, str],
        filters: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Return ``and``-prefixed predicates for the filters valid on ``table``.

        Keys that do not apply to ``table`` and unknown keys contribute
        nothing. None values and :data:`FILTER_IGNORED` are always dropped.

        Args:
            table: Logical table (pageview, session or event)
            filters: Filter mapping

        Returns:
            Newline-joined predicates, or an empty string
        """
        table_name = _table_name(table)
        renderers: Dict[str, Callable[[str, str, Any], List[str]]] = {
            "url": self._build_equals_filter,
            "os": self._build_equals_filter,
            "browser": self._build_equals_filter,
            "device": self._build_equals_filter,
            "country": self._build_equals_filter,
            "event_name": self._build_equals_filter,
            "referrer": self._build_referrer_filter,
            "domain": self._build_domain_filter,
            "query": self._build_query_filter,
        }

        predicates: List[str] = []

        for key, value in (filters or {}).items():
            if value is None or value is FILTER_IGNORED:
                continue

            renderer = renderers.get(key)
            if renderer is None or table_name not in _FILTER_TABLES[key]:
                continue

            predicates.extend(renderer(table_name, key, value))

        return "\n".join(predicates)

    def _build_equals_filter(self, table: str, key: str, value: Any) -> List[str]:
        return [f"and {table}.{key}={self.params.add(unquote(str(value)))}"]

    def _build_referrer_filter(self, table: str, key: str, value: Any) -> List[str]:
        return [f"and {table}.referrer like {self.params.add(f'%{unquote(str(value))}%')}"]

    def _build_domain_filter(self, table: str, key: str, value: Any) -> List[str]:
        # Excludes self-referrals: absolute URLs on the domain and relative paths
        return [
            f"and {table}.referrer not like {self.params.add(f'%://{value}/%')}",
            f"and {table}.referrer not like '/%'",
        ]

    def _build_query_filter(self, table: str, key: str, value: Any) -> List[str]:
        return [f"and {table}.url like '%?%'"]

    def parse_filters(
        self,
        table: Union[FilterTable, str],
        filters: Optional[Mapping[str, Any]] = None,
        session_key: str = DEFAULT_SESSION_KEY,
    ) -> ParsedFilters:
        """Split a combined filter mapping by scope and render each part.

        Args:
            table: Table the outer query selects from, used in the session join
            filters: Combined filter mapping
            session_key: Column shared by ``table`` and ``session``

        Returns:
            ParsedFilters with sub-filters, the session join and the rendered
            pageview, session and event queries (bound in that order)
        """
        filters = filters or {}
        table_name = _table_name(table)

        pageview_filters = {key: filters.get(key) for key in PAGEVIEW_FILTER_KEYS}
        session_filters = {key: filters.get(key) for key in SESSION_FILTER_KEYS}
        event_filters = {column: filters.get(key) for key, column in EVENT_FILTER_KEYS.items()}

        join_session = ""
        if any(session_filters.values()):
            join_session = (
                f"inner join session on {table_name}.{session_key} = session.{session_key}"
            )

        return ParsedFilters(
            pageview_filters=pageview_filters,
            session_filters=session_filters,
            event_filters=event_filters,
            event={"event_name": filters.get("event_name")},
            join_session=join_session,
            pageview_query=self.get_filter_query(FilterTable.PAGEVIEW, pageview_filters),
            session_query=self.get_filter_query(FilterTable.SESSION, session_filters),
            event_query=self.get_filter_query(FilterTable.EVENT, event_filters),
        )

    @staticmethod
    def get_sanitized_columns(columns: Mapping[str, Any]) -> Dict[str, Any]:
        """Strip non-word characters from the keys of ``columns``."""
        return {_NON_WORD_PATTERN.sub("", key): value for key, value in columns.items()}


def get_sanitized_columns(columns: Mapping[str, Any]) -> Dict[str, Any]:
    """Strip non-word characters from the keys of ``columns``.

    Example:
        >>> get_sanitized_columns({"price ($)": "sum"})
        {'price ': 'sum'}
    """
    return BaseFragmentBuilder.get_sanitized_columns(columns)
