"""Tests for get_query_modifier / QueryModifier."""

from __future__ import annotations

import math
from types import SimpleNamespace
from typing import Any

import pytest

from query_modifier import (
    OPERATORS_ATTRIBUTE,
    InvalidOperatorError,
    ModifierOptions,
    QueryModifier,
    get_query_modifier,
    identity,
)

# -- No-op paths -------------------------------------------------------------


def test_none_params_returns_identity() -> None:
    modifier = get_query_modifier(None)
    assert modifier is identity
    builder = SimpleNamespace()
    assert modifier(builder) is builder
    assert not hasattr(builder, OPERATORS_ATTRIBUTE)


def test_no_operators_is_a_no_op() -> None:
    params = {"something": "here"}
    modifier = get_query_modifier(params)

    # A builder without methods fails if any step runs.
    builder = SimpleNamespace()
    assert modifier(builder) is builder
    assert params == {"something": "here"}
    assert all(v is None for v in builder.operators.values())


class SlottedQuery:
    """Builder that cannot take new attributes."""

    __slots__ = ("limits",)

    def __init__(self) -> None:
        self.limits: list[Any] = []

    def limit(self, value: Any) -> SlottedQuery:
        self.limits.append(value)
        return self


@pytest.mark.parametrize("builder", [object(), {}, (), "plain"])
def test_no_operators_on_builder_rejecting_attributes(builder: Any) -> None:
    modifier = get_query_modifier({"something": "here"})
    assert modifier(builder) is builder


def test_operators_applied_to_slotted_builder() -> None:
    query = SlottedQuery()
    result = get_query_modifier({"$limit": 5})(query)

    assert result is query
    assert query.limits == [5]
    assert not hasattr(query, OPERATORS_ATTRIBUTE)


# -- Built-in operators ------------------------------------------------------


def test_limit(make_query: Any) -> None:
    params: dict[str, Any] = {"$limit": 10}
    modifier = get_query_modifier(params)
    query = make_query("limit")
    modifier(query)

    assert query.calls == [("limit", 10)]
    assert "$limit" not in params


def test_limit_string_is_coerced(query: Any) -> None:
    get_query_modifier({"$limit": "25"})(query)
    assert query.calls == [("limit", 25)]


def test_non_numeric_limit_passes_nan(query: Any) -> None:
    get_query_modifier({"$limit": "lots"})(query)
    (value,) = query.called("limit")
    assert math.isnan(value)


def test_page_defaults_limit_to_20(make_query: Any) -> None:
    params: dict[str, Any] = {"$page": 2}
    modifier = get_query_modifier(params)
    query = make_query("skip", "limit")
    modifier(query)

    assert query.calls == [("skip", 40), ("limit", 20)]
    assert params == {}


def test_page_uses_explicit_limit(query: Any) -> None:
    get_query_modifier({"$page": "3", "$limit": "5"})(query)
    assert query.calls == [("skip", 15), ("limit", 5)]


def test_page_overrides_skip_by_default(query: Any) -> None:
    get_query_modifier({"$page": 1, "$skip": 7, "$limit": 10})(query)
    assert query.calls == [("skip", 7), ("skip", 10), ("limit", 10)]


def test_page_can_yield_to_explicit_skip(query: Any) -> None:
    options = ModifierOptions(page_overrides_skip=False)
    get_query_modifier({"$page": 1, "$skip": 7}, options)(query)
    assert query.calls == [("skip", 7), ("limit", 20)]


def test_default_limit_is_configurable(query: Any) -> None:
    get_query_modifier({"$page": 2}, {"default_limit": 50})(query)
    assert query.calls == [("skip", 100), ("limit", 50)]


def test_select_string(make_query: Any) -> None:
    params: dict[str, Any] = {"$select": "something"}
    query = make_query("select")
    get_query_modifier(params)(query)
    assert query.calls == [("select", "something")]
    assert params == {}


def test_select_list_is_joined(make_query: Any) -> None:
    query = make_query("select")
    get_query_modifier({"$select": ["here", "we", "are"]})(query)
    assert query.calls == [("select", "here we are")]
    assert query.operators["$select"] == "here we are"


def test_select_list_renders_none_as_empty(make_query: Any) -> None:
    query = make_query("select")
    get_query_modifier({"$select": ["a", None, "b"]})(query)
    assert query.calls == [("select", "a  b")]


def test_single_item_list_limit_is_coerced(make_query: Any) -> None:
    query = make_query("limit")
    get_query_modifier({"$limit": ["5"]})(query)
    assert query.calls == [("limit", 5)]


def test_populate_string(make_query: Any) -> None:
    query = make_query("populate")
    get_query_modifier({"$populate": "something"})(query)
    assert query.calls == [("populate", "something")]


def test_populate_list_calls_once_per_item(make_query: Any) -> None:
    query = make_query("populate")
    get_query_modifier({"$populate": ["here", "we", "are"]})(query)
    assert query.called("populate") == ["here", "we", "are"]


def test_sort_list_calls_once_per_item(make_query: Any) -> None:
    query = make_query("sort")
    get_query_modifier({"$sort": ["-age", "name"]})(query)
    assert query.calls == [("sort", "-age"), ("sort", "name")]


def test_sort_scalar_passed_whole(make_query: Any) -> None:
    query = make_query("sort")
    get_query_modifier({"$sort": {"age": -1}})(query)
    assert query.calls == [("sort", {"age": -1})]


def test_application_order(query: Any) -> None:
    params = {
        "$populate": "owner",
        "$select": "a b",
        "$limit": "5",
        "$skip": "2",
        "$sort": "name",
    }
    get_query_modifier(params)(query)
    assert [name for name, _ in query.calls] == [
        "sort",
        "skip",
        "limit",
        "select",
        "populate",
    ]


def test_falsy_values_are_not_applied(query: Any) -> None:
    get_query_modifier({"$limit": 0, "$skip": "", "$sort": None})(query)
    assert query.calls == []


# -- Chaining ----------------------------------------------------------------


class ImmutableQuery:
    """Builder returning a new instance from every call."""

    def __init__(self, calls: tuple[tuple[str, Any], ...] = ()) -> None:
        self.calls = calls

    def _with(self, name: str, value: Any) -> ImmutableQuery:
        return ImmutableQuery((*self.calls, (name, value)))

    def sort(self, value: Any) -> ImmutableQuery:
        return self._with("sort", value)

    def limit(self, value: Any) -> ImmutableQuery:
        return self._with("limit", value)

    def hint(self, value: Any) -> ImmutableQuery:
        return self._with("hint", value)


def test_builder_return_values_are_chained() -> None:
    start = ImmutableQuery()
    params = {"$sort": ["a", "b"], "$limit": 3, "$hint": "idx"}
    result = get_query_modifier(params, {"allow": ["$hint"]})(start)

    assert result is not start
    assert start.calls == ()
    assert result.calls == (
        ("sort", "a"),
        ("sort", "b"),
        ("limit", 3),
        ("hint", "idx"),
    )


def test_custom_method_returning_none_keeps_builder(make_query: Any) -> None:
    query = make_query("limit")
    seen: list[Any] = []
    query.custom = seen.append  # returns None

    result = get_query_modifier({"$custom": "v"}, {"allow": ["$custom"]})(query)
    assert result is query
    assert seen == ["v"]


# -- Custom operators --------------------------------------------------------


def test_allowed_custom_operator(make_query: Any) -> None:
    params: dict[str, Any] = {"$custom": "muhahah", "$limit": 10}
    modifier = get_query_modifier(params, {"allow": ["$custom"]})
    assert params == {}

    query = make_query("custom", "limit")
    modifier(query)
    assert query.called("limit") == [10]
    assert query.called("custom") == ["muhahah"]


def test_missing_custom_method_raises(make_query: Any) -> None:
    modifier = get_query_modifier({"$custom": "v"}, {"allow": ["$custom"]})
    with pytest.raises(InvalidOperatorError) as exc_info:
        modifier(make_query("limit"))
    assert exc_info.value.operator == "$custom"
    assert str(exc_info.value) == "Invalid operator $custom"


def test_falsy_custom_value_skips_method_lookup(make_query: Any) -> None:
    modifier = get_query_modifier({"$custom": ""}, {"allow": ["$custom"]})
    query = make_query()
    assert modifier(query) is query


def test_allowing_a_builtin_does_not_apply_it_twice(query: Any) -> None:
    get_query_modifier({"$limit": 5}, {"allow": ["$limit"]})(query)
    assert query.calls == [("limit", 5)]


# -- Ignore / delete_ignored -------------------------------------------------


def test_ignored_operator_is_never_applied(make_query: Any) -> None:
    params: dict[str, Any] = {"$select": "+something -here", "$skip": 10}
    modifier = get_query_modifier(params, {"ignore": {"$select": True}})
    assert params == {"$select": "+something -here"}

    query = make_query("skip")  # no select method: would fail if applied
    modifier(query)
    assert query.calls == [("skip", 10)]


def test_delete_ignored(query: Any) -> None:
    params: dict[str, Any] = {"$skip": 10, "$limit": 10}
    modifier = get_query_modifier(
        params, {"ignore": {"$limit": True}, "deleteIgnored": True}
    )
    assert params == {}
    modifier(query)
    assert query.calls == [("skip", 10)]


# -- Introspection -----------------------------------------------------------


def test_operators_attached_to_builder(query: Any) -> None:
    get_query_modifier({"$page": 2})(query)
    assert query.operators["$page"] == 2
    assert query.operators["$limit"] == 20


def test_modifier_is_reusable_and_keeps_captured_operators(make_query: Any) -> None:
    modifier = get_query_modifier({"$page": 1, "$select": ["a", "b"]})
    assert isinstance(modifier, QueryModifier)

    first = make_query("skip", "limit", "select")
    second = make_query("skip", "limit", "select")
    modifier(first)
    modifier(second)

    assert first.calls == second.calls
    assert modifier.operators["$limit"] is None
    assert modifier.operators["$select"] == ["a", "b"]


def test_operators_view_is_read_only() -> None:
    modifier = get_query_modifier({"$limit": 1})
    assert isinstance(modifier, QueryModifier)
    with pytest.raises(TypeError):
        modifier.operators["$limit"] = 2  # type: ignore[index]


def test_repr_lists_present_operators() -> None:
    modifier = get_query_modifier({"$limit": 1})
    assert repr(modifier) == "QueryModifier({'$limit': 1})"
