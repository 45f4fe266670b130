"""Tests for the parameter store."""

import pytest

from filterable.errors import DuplicateVariableError, FilterableError, UnknownVariableError
from filterable.query.parameters import DEFAULT_LIMIT, DEFAULT_PAGE, ParameterStore


def test_store_is_seeded_with_limit_then_page():
    store = ParameterStore()

    assert [(p.name, p.value) for p in store] == [("limit", DEFAULT_LIMIT), ("page", DEFAULT_PAGE)]
    assert DEFAULT_LIMIT == 15
    assert DEFAULT_PAGE == 1


def test_append_duplicate_name_raises():
    store = ParameterStore()
    store.append("tags", ["a"])

    with pytest.raises(DuplicateVariableError, match='Variable "tags" has already been appended!'):
        store.append("tags", ["b"])

    assert store.get("tags").value == ["a"]


def test_append_default_name_raises():
    store = ParameterStore()

    with pytest.raises(DuplicateVariableError):
        store.append("limit", 50)


def test_update_unknown_name_raises():
    store = ParameterStore()

    with pytest.raises(UnknownVariableError, match='Cannot update unknown variable with name "tags"!'):
        store.update("tags", ["a"])

    assert store.has("tags") is False


def test_update_existing_name_changes_value_in_place():
    store = ParameterStore()
    store.append("tags", ["a"])
    store.update("tags", ["b", "c"])

    assert store.get("tags").value == ["b", "c"]
    assert [p.name for p in store] == ["limit", "page", "tags"]


def test_store_errors_share_base_class():
    """Both store errors can be caught as FilterableError or KeyError."""
    store = ParameterStore()

    with pytest.raises(FilterableError):
        store.update("missing", 1)
    with pytest.raises(KeyError):
        store.append("page", 2)


def test_non_string_names_use_store_errors():
    """Non-string names are keyed by their text and hit the normal duplicate/unknown checks."""
    store = ParameterStore()
    store.append(2024, "x")

    assert store.has("2024")
    assert store.get(2024).name == "2024"

    with pytest.raises(DuplicateVariableError):
        store.append("2024", "y")
    with pytest.raises(UnknownVariableError):
        store.update(7, "z")
