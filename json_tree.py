# json_tree.py
# Navigable outline of a JSON document, as shown by a tree viewer.

import re
from typing import Iterator, List, Optional

from json_formatter import encode_string, render_pretty
from json_model import DEFAULT_INDENT, IndentStyle, kind_of
from json_parser import DEPTH_LIMIT_DEFAULT, parse

_IDENTIFIER_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*\Z")


def child_path(parent_path: str, key) -> str:
    """JSON path of a child: ``[i]`` for indices, ``.key`` or ``["key"]`` for keys."""
    if isinstance(key, int):
        return f"{parent_path}[{key}]"
    if _IDENTIFIER_RE.match(key):
        return f"{parent_path}.{key}"
    return f"{parent_path}[{encode_string(key)}]"


class TreeNode:
    """One value in the outline. ``key`` is None for the root."""

    def __init__(self, key: Optional[str], value, path: str,
                 parent: Optional["TreeNode"] = None):
        self.key = key
        self.value = value
        self.kind = kind_of(value)
        self.path = path
        self.parent = parent
        self.depth = parent.depth + 1 if parent is not None else 0
        self.children: List["TreeNode"] = []

    @property
    def parent_kind(self) -> Optional[str]:
        return self.parent.kind if self.parent is not None else None

    @property
    def child_count(self) -> int:
        return len(self.children)

    @property
    def is_expandable(self) -> bool:
        return self.kind in ("object", "array")

    @property
    def is_last_child(self) -> bool:
        if self.parent is None:
            return True
        return self.parent.children[-1] is self

    def walk(self) -> Iterator["TreeNode"]:
        """Pre-order traversal, this node first."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def node_count(self) -> int:
        return sum(1 for _ in self.walk())

    def to_json(self, indent: IndentStyle = DEFAULT_INDENT) -> str:
        return render_pretty(self.value, indent)

    def __repr__(self):
        return f"TreeNode({self.path!r}, {self.kind}, children={self.child_count})"


def _load(node: TreeNode) -> None:
    value = node.value
    if isinstance(value, dict):
        for key in sorted(value):
            child = TreeNode(key, value[key], child_path(node.path, key), node)
            node.children.append(child)
            _load(child)
    elif isinstance(value, list):
        for i, item in enumerate(value):
            child = TreeNode(str(i), item, child_path(node.path, i), node)
            node.children.append(child)
            _load(child)


def build_tree(text: str, *, max_depth: int = DEPTH_LIMIT_DEFAULT) -> Optional[TreeNode]:
    """
    Parse ``text`` into an outline rooted at ``$``.

    Blank input gives None. Malformed input raises FormatError.
    """
    if not text.strip():
        return None
    root = TreeNode(None, parse(text, max_depth=max_depth), "$")
    _load(root)
    return root
