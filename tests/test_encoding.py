"""Tests for query-string encoding, parsing and form flattening."""

import pytest

from filterable.models import Ordering
from filterable.query.encoding import (
    encode_component,
    encode_form,
    parameter_pairs,
    parse_query_string,
    render_value,
)


def test_encode_component_keeps_uri_component_safe_set():
    assert encode_component("AZaz09-_.!~*'()") == "AZaz09-_.!~*'()"
    assert encode_component("a b&c=d[e]") == "a%20b%26c%3Dd%5Be%5D"
    assert encode_component("über") == "%C3%BCber"


@pytest.mark.parametrize(
    "value,expected",
    [
        (True, "true"),
        (False, "false"),
        (None, "null"),
        (15, "15"),
        (20.0, "20"),
        (2.5, "2.5"),
        ({"b", "a"}, "a,b"),
        (["a", 1, True], "a,1,true"),
        ({"a": 1}, '{"a":1}'),
        (Ordering(attribute="id"), '{"attribute":"id","direction":"asc"}'),
    ],
)
def test_render_value(value, expected):
    assert render_value(value) == expected


def test_parameter_pairs_by_shape():
    assert parameter_pairs("limit", 15) == [("limit", "15")]
    assert parameter_pairs("tags", ("a", "b")) == [("tags[]", "a"), ("tags[]", "b")]
    assert parameter_pairs("range", {"min": 1}) == [("range[min]", "1")]
    assert parameter_pairs("tags", []) == []


def test_parameter_pairs_encode_names_and_keys():
    assert parameter_pairs("my tags", {"a b": "c"}) == [("my%20tags[a%20b]", "c")]


def test_parse_round_trip_reconstructs_query_state(query):
    """Parsing a serialized builder gives back its constraints and parameters."""
    query.where("status", "active").where("name", "Ada Lovelace")
    query.append("tags", ["a", "b"])
    query.append("range", {"min": 1, "max": 5})
    query.set_page(3)

    parsed = parse_query_string(query.to_query_string())

    assert parsed.filters == {"status": ["active"], "name": ["Ada Lovelace"]}
    assert parsed.params == {
        "limit": "15",
        "page": "3",
        "tags": ["a", "b"],
        "range": {"min": "1", "max": "5"},
    }


def test_parse_empty_query_string():
    parsed = parse_query_string("")

    assert parsed.filters == {}
    assert parsed.params == {}


def test_parse_accepts_missing_question_mark():
    parsed = parse_query_string("limit=15&page=1")

    assert parsed.params == {"limit": "15", "page": "1"}


def test_parse_rejects_deep_nesting():
    with pytest.raises(ValueError, match="Unsupported nesting"):
        parse_query_string("?a[b][c]=1")


def test_encode_form_flattens_nested_attributes():
    attributes = {
        "name": "Ada",
        "active": True,
        "nickname": None,
        "roles": ["admin", "dev"],
        "address": {"city": "London", "zip": "N1"},
        "links": [{"rel": "self"}],
    }

    assert encode_form(attributes) == [
        ("name", "Ada"),
        ("active", "true"),
        ("nickname", ""),
        ("roles[]", "admin"),
        ("roles[]", "dev"),
        ("address[city]", "London"),
        ("address[zip]", "N1"),
        ("links[0][rel]", "self"),
    ]


def test_encode_form_rejects_non_mapping():
    with pytest.raises(TypeError):
        encode_form(["a", "b"])

    assert encode_form(None) == []


def test_encode_form_flattens_sets_in_sorted_order():
    assert encode_form({"roles": {"dev", "admin"}}) == [("roles[]", "admin"), ("roles[]", "dev")]
