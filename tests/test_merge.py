"""Tests for the deep merge used by the stepmap and formatter registries."""

from stepsetup.merge import deep_merge


def test_nested_objects_merge_and_override_wins():
    base = {"a": 1, "b": {"x": 1, "y": 2}}
    overlay = {"b": {"y": 3, "z": 4}}

    assert deep_merge(base, overlay) == {"a": 1, "b": {"x": 1, "y": 3, "z": 4}}


def test_lists_are_replaced_not_merged():
    base = {"items": [1, 2, 3], "keep": True}
    overlay = {"items": [9]}

    assert deep_merge(base, overlay) == {"items": [9], "keep": True}


def test_scalar_replaces_object_and_object_replaces_scalar():
    assert deep_merge({"a": {"x": 1}}, {"a": 5}) == {"a": 5}
    assert deep_merge({"a": 5}, {"a": {"x": 1}}) == {"a": {"x": 1}}


def test_inputs_are_not_mutated():
    base = {"b": {"x": 1}}
    overlay = {"b": {"y": 2}, "c": {"z": 3}}

    merged = deep_merge(base, overlay)
    merged["c"]["z"] = 99

    assert base == {"b": {"x": 1}}
    assert overlay == {"b": {"y": 2}, "c": {"z": 3}}
