"""Tests for the recursive structural diff."""

import pytest

from change_detector.drift_analyzer.differ import (
    StructuralDiffer,
    arrays_equal,
    diff_documents,
    json_type,
)
from change_detector.models import Category


def _summary(changes):
    return [(c.kind, c.path) for c in changes]


@pytest.mark.parametrize("value", [
    {},
    {"a": 1, "b": {"c": [1, 2, {"d": None}]}, "e": "x"},
    [3, 1, 2],
    "text",
    None,
    0,
    False,
])
def test_identical_values_produce_no_changes(value):
    assert diff_documents(value, value) == []


def test_added_and_removed_are_symmetric():
    old = {"keep": 1, "gone": {"x": 1}}
    new = {"keep": 1, "fresh": [1]}

    forward = diff_documents(old, new, "doc")
    backward = diff_documents(new, old, "doc")

    assert _summary(forward) == [("removed", "doc.gone"), ("added", "doc.fresh")]
    assert forward[0].value == {"x": 1}
    assert forward[1].value == [1]
    assert sorted(_summary(backward)) == [("added", "doc.gone"), ("removed", "doc.fresh")]
    by_path = {c.path: c for c in backward}
    assert by_path["doc.gone"].value == {"x": 1}
    assert by_path["doc.fresh"].value == [1]


def test_type_change_is_a_single_modification():
    changes = diff_documents({"a": 1}, {"a": "1"})

    assert len(changes) == 1
    assert changes[0].kind == "modified"
    assert changes[0].path == "a"
    assert changes[0].old_value == 1
    assert changes[0].new_value == "1"


def test_booleans_are_not_numbers():
    changes = diff_documents({"flag": 1}, {"flag": True})
    assert _summary(changes) == [("modified", "flag")]


def test_null_is_distinct_from_missing_key():
    assert _summary(diff_documents({}, {"a": None})) == [("added", "a")]
    assert _summary(diff_documents({"a": None}, {"a": 0})) == [("modified", "a")]


def test_nested_objects_report_leaves_only():
    old = {"outer": {"inner": {"x": 1, "y": 2}}}
    new = {"outer": {"inner": {"x": 1, "y": 3}}}

    changes = diff_documents(old, new, "createUser")

    assert _summary(changes) == [("modified", "createUser.outer.inner.y")]


def test_key_order_is_irrelevant():
    assert diff_documents({"a": 1, "b": {"c": 1, "d": 2}}, {"b": {"d": 2, "c": 1}, "a": 1}) == []


def test_reordered_arrays_are_equal():
    assert diff_documents({"scopes": ["read", "write"]}, {"scopes": ["write", "read"]}) == []
    assert diff_documents(
        {"fields": [{"key": "a", "type": "string"}, {"key": "b"}]},
        {"fields": [{"key": "b"}, {"type": "string", "key": "a"}]},
    ) == []


def test_changed_array_is_one_modification_with_original_order():
    old = {"scopes": ["write", "read"]}
    new = {"scopes": ["read", "admin"]}

    changes = diff_documents(old, new)

    assert _summary(changes) == [("modified", "scopes")]
    assert changes[0].old_value == ["write", "read"]
    assert changes[0].new_value == ["read", "admin"]
    assert old["scopes"] == ["write", "read"]


def test_mixed_type_arrays_compare_without_error():
    assert arrays_equal([1, "1", None, {"a": 1}], [{"a": 1}, None, "1", 1])
    assert not arrays_equal([1, "1"], [1, 1])
    assert not arrays_equal([1, 1, 2], [1, 2, 2])


def test_paths_never_contain_array_indices():
    changes = diff_documents({"items": [{"a": 1}]}, {"items": [{"a": 2}]}, "doc")
    assert _summary(changes) == [("modified", "doc.items")]


def test_non_object_roots_compare_as_one_value():
    changes = StructuralDiffer(Category.META, "list.json").diff([1, 2], {"a": 1}, "list")
    assert _summary(changes) == [("modified", "list")]
    assert changes[0].key == ""


def test_changes_carry_category_and_file():
    differ = StructuralDiffer(Category.ACTIONS, "createUser.json")
    change = differ.diff({"endpoint": "/v1"}, {"endpoint": "/v2"}, "createUser")[0]

    assert change.category is Category.ACTIONS
    assert change.file_name == "createUser.json"
    assert change.path == "createUser.endpoint"
    assert change.key == "endpoint"
    assert change.location == "actions/createUser.endpoint"
    assert change.severity is None


def test_json_type_names():
    assert [json_type(v) for v in (None, True, 1, 1.5, "s", [], {})] == [
        "null", "boolean", "number", "number", "string", "array", "object",
    ]


def test_integral_floats_match_ints_inside_arrays():
    assert diff_documents({"a": 1}, {"a": 1.0}) == []
    assert diff_documents({"a": [1]}, {"a": [1.0]}) == []
    assert diff_documents({"a": [{"n": [2, 3]}]}, {"a": [{"n": [3.0, 2.0]}]}) == []
    assert _summary(diff_documents({"a": [1]}, {"a": [1.5]})) == [("modified", "a")]
