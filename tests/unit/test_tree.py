import pytest

from json_model import FormatError, IndentStyle
from json_tree import build_tree, child_path

DOC = '{"name": "x", "tags": ["a", "b"], "meta": {"ok": true, "odd key": null}}'


def test_blank_input_has_no_tree():
    assert build_tree("") is None
    assert build_tree("  \n ") is None


def test_invalid_input_raises():
    with pytest.raises(FormatError):
        build_tree("{oops}")


def test_root_node():
    root = build_tree(DOC)
    assert root.key is None
    assert root.path == "$"
    assert root.kind == "object"
    assert root.is_expandable
    assert root.child_count == 3
    assert root.parent_kind is None


def test_children_follow_sorted_key_order():
    root = build_tree(DOC)
    assert [c.key for c in root.children] == ["meta", "name", "tags"]
    assert root.children[-1].is_last_child
    assert not root.children[0].is_last_child


def test_paths_and_kinds():
    root = build_tree(DOC)
    nodes = {node.path: node for node in root.walk()}
    assert set(nodes) == {
        "$", "$.meta", '$.meta["odd key"]', "$.meta.ok",
        "$.name", "$.tags", "$.tags[0]", "$.tags[1]",
    }
    assert nodes["$.tags[1]"].key == "1"
    assert nodes["$.tags[1]"].parent_kind == "array"
    assert nodes['$.meta["odd key"]'].kind == "null"
    assert nodes["$.meta.ok"].kind == "boolean"
    assert nodes["$.meta.ok"].depth == 2


def test_walk_is_pre_order():
    root = build_tree('[[1, 2], 3]')
    assert [n.path for n in root.walk()] == ["$", "$[0]", "$[0][0]", "$[0][1]", "$[1]"]
    assert root.node_count() == 5


def test_node_serializes_canonically():
    root = build_tree(DOC)
    meta = root.children[0]
    assert meta.to_json(IndentStyle.spaces(2)) == '{\n  "odd key": null,\n  "ok": true\n}'
    assert root.children[1].to_json() == '"x"'


def test_child_path_escapes_keys():
    assert child_path("$", 'quote"d') == '$["quote\\"d"]'
    assert child_path("$", "_id") == "$._id"
    assert child_path("$", "1st") == '$["1st"]'
