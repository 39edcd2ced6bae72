import pytest

from i18n_recreate.exceptions import UnsupportedValueError
from i18n_recreate.translation.tree import (
    MISSING,
    ValueKind,
    iter_string_leaves,
    join_pointer,
    kind_of,
    needs_translation,
    resolve_pointer,
    same_shape,
    split_pointer,
)


@pytest.mark.parametrize("value, kind", [
    ("text", ValueKind.STRING),
    ({}, ValueKind.MAPPING),
    ([], ValueKind.SEQUENCE),
    (True, ValueKind.BOOLEAN),
    (False, ValueKind.BOOLEAN),
    (0, ValueKind.NUMBER),
    (2.5, ValueKind.NUMBER),
    (None, ValueKind.NULL),
])
def test_kind_of(value, kind):
    assert kind_of(value) is kind


def test_kind_of_rejects_other_values():
    with pytest.raises(UnsupportedValueError) as excinfo:
        kind_of({1, 2}, "/tags")
    assert excinfo.value.details == {"pointer": "/tags", "type": "set"}


def test_pointer_escaping():
    assert join_pointer("", "menu") == "/menu"
    assert join_pointer("/menu", "a/b") == "/menu/a~1b"
    assert join_pointer("/menu", "~x") == "/menu/~0x"
    assert join_pointer("/items", 3) == "/items/3"
    assert split_pointer("/menu/a~1b/~01") == ["menu", "a/b", "~1"]
    assert split_pointer("") == []


def test_split_pointer_requires_leading_slash():
    with pytest.raises(ValueError):
        split_pointer("menu")


def test_resolve_pointer():
    tree = {"menu": {"a/b": ["x", "y"]}}

    assert resolve_pointer(tree, "/menu/a~1b/1") == "y"
    assert resolve_pointer(tree, "") is tree
    assert resolve_pointer(tree, "/menu/missing") is MISSING
    assert resolve_pointer(tree, "/menu/a~1b/5") is MISSING
    assert resolve_pointer(tree, "/menu/a~1b/-") is MISSING
    assert resolve_pointer(tree, "/menu/a~1b/0/deeper") is MISSING


def test_iter_string_leaves_in_document_order(sample_tree):
    assert list(iter_string_leaves(sample_tree)) == [
        ("/title", "Welcome"),
        ("/menu/file", "File"),
        ("/menu/edit", "Edit"),
        ("/items/0", "One"),
        ("/items/1", "Two"),
        ("/items/3/1", "Nested"),
    ]


def test_needs_translation():
    assert needs_translation("Hi")
    assert not needs_translation("")
    assert not needs_translation(" \n\t")


def test_same_shape():
    assert same_shape({"a": ["x", 1]}, {"a": ["y", 2]})
    assert not same_shape({"a": 1, "b": 2}, {"b": 2, "a": 1})
    assert not same_shape({"a": ["x"]}, {"a": ["x", "y"]})
    assert not same_shape({"a": "1"}, {"a": 1})
    assert not same_shape({"a": True}, {"a": 1})
