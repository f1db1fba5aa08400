"""Unit tests for filter clauses, parsed filters and event-data fragments."""

import pytest

from statsdb.constants import EVENT_FILTER_KEYS, FILTER_IGNORED, FilterTable
from statsdb.query_builder import (
    MySQLFragmentBuilder,
    PostgreSQLFragmentBuilder,
    QueryParams,
    get_sanitized_columns,
)


@pytest.fixture
def builder():
    return PostgreSQLFragmentBuilder()


class TestQueryParams:
    """Test the positional parameter list."""

    def test_add_returns_position_marker(self):
        params = QueryParams()

        assert params.add("a") == "$1"
        assert params.add(None) == "$2"
        assert len(params) == 2

    def test_starts_after_existing_values(self):
        params = QueryParams(["website-id"])

        assert params.add("/") == "$2"
        assert list(params) == ["website-id", "/"]

    def test_values_is_a_copy(self):
        params = QueryParams(["a"])
        params.values.append("b")

        assert params.values == ["a"]


class TestGetFilterQuery:
    """Test rendering of filter predicates per table."""

    def test_domain_excludes_self_referrals(self, builder):
        query = builder.get_filter_query("pageview", {"domain": "example.com"})

        assert query == (
            "and pageview.referrer not like $1\n"
            "and pageview.referrer not like '/%'"
        )
        assert builder.params.values == ["%://example.com/%"]

    def test_session_key_on_pageview_is_ignored(self, builder):
        assert builder.get_filter_query("pageview", {"os": "Linux"}) == ""
        assert len(builder.params) == 0

    def test_ignored_sentinel_contributes_nothing(self, builder):
        assert builder.get_filter_query("event", {"event_name": FILTER_IGNORED}) == ""
        assert len(builder.params) == 0

    def test_none_values_contribute_nothing(self, builder):
        assert builder.get_filter_query("session", {"os": None, "browser": None}) == ""

    def test_url_is_decoded(self, builder):
        query = builder.get_filter_query(FilterTable.PAGEVIEW, {"url": "/blog%2Fpost%20one"})

        assert query == "and pageview.url=$1"
        assert builder.params.values == ["/blog/post one"]

    def test_referrer_is_substring_match(self, builder):
        query = builder.get_filter_query("pageview", {"referrer": "google.com"})

        assert query == "and pageview.referrer like $1"
        assert builder.params.values == ["%google.com%"]

    def test_query_filter_matches_any_query_string(self, builder):
        assert builder.get_filter_query("pageview", {"query": "1"}) == "and pageview.url like '%?%'"
        assert len(builder.params) == 0

    def test_session_filters_in_insertion_order(self, builder):
        query = builder.get_filter_query(
            "session",
            {"country": "DE", "browser": "firefox", "url": "/ignored"},
        )

        assert query == "and session.country=$1\nand session.browser=$2"
        assert builder.params.values == ["DE", "firefox"]

    def test_event_filters(self, builder):
        query = builder.get_filter_query("event", {"url": "/checkout", "event_name": "purchase"})

        assert query == "and event.url=$1\nand event.event_name=$2"

    def test_unknown_keys_are_ignored(self, builder):
        assert builder.get_filter_query("pageview", {"title": "Home"}) == ""

    def test_empty_filters(self, builder):
        assert builder.get_filter_query("pageview") == ""
        assert builder.get_filter_query("pageview", {}) == ""

    def test_mysql_uses_same_dollar_markers(self):
        builder = MySQLFragmentBuilder()

        assert builder.get_filter_query("session", {"device": "mobile"}) == "and session.device=$1"


class TestParseFilters:
    """Test splitting combined filters by scope."""

    def test_session_filter_adds_join(self, builder):
        parsed = builder.parse_filters("pageview", {"os": "Linux", "url": "/"})

        assert parsed.join_session == (
            "inner join session on pageview.session_id = session.session_id"
        )
        assert parsed.pageview_query == "and pageview.url=$1"
        assert parsed.session_query == "and session.os=$2"
        assert builder.params.values == ["/", "Linux"]

    def test_no_session_filter_means_no_join(self, builder):
        parsed = builder.parse_filters("pageview", {"url": "/"})

        assert parsed.join_session == ""
        assert parsed.session_query == ""

    def test_custom_session_key(self, builder):
        parsed = builder.parse_filters("event", {"country": "FR"}, session_key="visit_id")

        assert parsed.join_session == "inner join session on event.visit_id = session.visit_id"

    def test_event_filters_map_event_url(self, builder):
        parsed = builder.parse_filters(
            "event",
            {"event_url": "/cart", "event_name": "add-to-cart", "url": "/home"},
        )

        assert parsed.event_filters == {"url": "/cart", "event_name": "add-to-cart"}
        assert parsed.event == {"event_name": "add-to-cart"}
        assert parsed.pageview_filters["url"] == "/home"
        assert parsed.event_query == "and event.url=$2\nand event.event_name=$3"

    def test_event_keys_follow_constants(self, builder):
        parsed = builder.parse_filters("event", {"event_url": "/cart"})

        assert set(parsed.event_filters) == set(EVENT_FILTER_KEYS.values())
        assert parsed.event_query == "and event.url=$1"

    def test_empty_filters(self, builder):
        parsed = builder.parse_filters("pageview")

        assert parsed.pageview_query == parsed.session_query == parsed.event_query == ""
        assert parsed.session_filters == {"os": None, "browser": None, "device": None, "country": None}


class TestEventDataFragments:
    """Test event-data aggregations and predicates."""

    def test_columns_are_aliased_by_position(self, builder):
        query = builder.get_event_data_columns_query(
            "event_data",
            {"amount": "sum", "ignored": None, "sku": "count"},
        )

        assert query == (
            'sum(CAST(event_data ->> $1 AS DECIMAL)) as "0",\n'
            'count(event_data ->> $2) as "2"'
        )
        assert builder.params.values == ["amount", "sku"]

    def test_unknown_verbs_are_skipped(self, builder):
        assert builder.get_event_data_columns_query("event_data", {"amount": "median"}) == ""

    def test_mysql_columns(self):
        query = MySQLFragmentBuilder().get_event_data_columns_query(
            "event_data",
            {"amount": "avg"},
        )

        assert query == "avg(event_data ->> '$.amount') as \"0\""

    def test_filter_predicates(self, builder):
        query = builder.get_event_data_filter_query(
            "event_data",
            {"plan": "pro", "seats": 5, "skip": None},
        )

        assert query == (
            "event_data ->> $1 = $2\n"
            "and CAST(event_data ->> $3 AS DECIMAL) = $4"
        )
        assert builder.params.values == ["plan", "pro", "seats", 5]

    def test_zero_and_booleans_compare_as_text(self, builder):
        query = builder.get_event_data_filter_query("event_data", {"count": 0, "flag": True})

        assert query == "event_data ->> $1 = $2\nand event_data ->> $3 = $4"


class TestSanitizedColumns:
    """Test column key sanitizing."""

    def test_strips_non_word_characters(self):
        assert get_sanitized_columns({"price ($)": "sum", "sku-id": "count", "a_b": None}) == {
            "price ": "sum",
            "skuid": "count",
            "a_b": None,
        }

    def test_strips_non_ascii(self):
        assert get_sanitized_columns({"größe": "max"}) == {"gre": "max"}

    def test_keeps_unicode_whitespace(self):
        assert get_sanitized_columns({"order\u00a0total!": "sum"}) == {"order\u00a0total": "sum"}
