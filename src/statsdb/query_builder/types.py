"""Public data structures used by the fragment builders."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, TypedDict, Union

from statsdb.constants import FilterSentinel

__all__ = ["FilterValue", "Filters", "ParsedFilters"]

FilterValue = Union[str, int, float, FilterSentinel, None]


class Filters(TypedDict, total=False):
    """Typed mapping of the analytics filters understood by the builders."""

    url: FilterValue
    domain: FilterValue
    referrer: FilterValue
    query: FilterValue
    os: FilterValue
    browser: FilterValue
    device: FilterValue
    country: FilterValue
    event_name: FilterValue
    event_url: FilterValue


@dataclass
class ParsedFilters:
    """A combined filter mapping split by the table each key applies to.

    ``pageview_query``, ``session_query`` and ``event_query`` are rendered
    against the builder's parameter list in that order. ``join_session`` is
    empty unless a session-scoped filter is present.
    """

    pageview_filters: Dict[str, Any] = field(default_factory=dict)
    session_filters: Dict[str, Any] = field(default_factory=dict)
    event_filters: Dict[str, Any] = field(default_factory=dict)
    event: Dict[str, Optional[Any]] = field(default_factory=dict)
    join_session: str = ""
    pageview_query: str = ""
    session_query: str = ""
    event_query: str = ""
