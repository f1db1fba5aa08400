"""Filter keys, logical tables and the ignored-filter sentinel."""

from enum import Enum


class FilterSentinel(Enum):
    """Reserved filter values.

    ``IGNORED`` means the caller supplied the filter key on purpose but it
    must not contribute a predicate.
    """

    IGNORED = "filter-ignored"

    def __repr__(self) -> str:
        return "FILTER_IGNORED"


FILTER_IGNORED = FilterSentinel.IGNORED


class FilterTable(str, Enum):
    """Logical tables a filter clause can be rendered against."""

    PAGEVIEW = "pageview"
    SESSION = "session"
    EVENT = "event"


# Key groups used when decomposing a combined filter mapping
PAGEVIEW_FILTER_KEYS = ("domain", "url", "referrer", "query")
SESSION_FILTER_KEYS = ("os", "browser", "device", "country")
# Combined filter key -> column on the event table
EVENT_FILTER_KEYS = {"event_url": "url", "event_name": "event_name"}

DEFAULT_SESSION_KEY = "session_id"
