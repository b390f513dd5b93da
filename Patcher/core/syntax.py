# core/syntax.py
"""
Tree-sitter front end for Go sources.

Parses Go files with the `tree_sitter` core library together with
`tree_sitter_go`, and provides the few node helpers the matcher and the
rewriters share. Comments are part of the concrete syntax tree, so nothing
is lost between parsing and rendering.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

import tree_sitter_go as tsgo
from tree_sitter import Language, Node, Parser, Tree

# local imports
from Common import GoParseError


# Build the Go language object once per process.
GO_LANGUAGE = Language(tsgo.language())


@dataclass
class SourceTree:
    """
    One parsed Go file.

    Attributes:
        source: the exact bytes that were parsed
        tree:   the tree-sitter tree for `source`
        path:   file name used in error messages
    """
    source: bytes
    tree: Tree
    path: str = "<source>"

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text(self, node: Node) -> str:
        return node_text(node, self.source)


def node_text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def named_children(node: Node) -> List[Node]:
    """Named children without comments."""
    return [child for child in node.named_children if child.type != "comment"]


def first_error(root: Node) -> Optional[Tuple[int, int, str]]:
    """
    Locate the first ERROR or MISSING node, as (line, column, detail) with
    1-based coordinates; None when the tree is clean.
    """
    if not root.has_error:
        return None
    for node in walk_all(root):
        if node.is_error or node.is_missing:
            row, col = node.start_point
            detail = f"missing {node.type}" if node.is_missing else "syntax error"
            return row + 1, col + 1, detail
    row, col = root.start_point
    return row + 1, col + 1, "syntax error"


def walk_all(node: Node) -> Iterator[Node]:
    """Pre-order walk including anonymous nodes (MISSING tokens are anonymous)."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def parse_source(source: bytes, path: str = "<source>") -> SourceTree:
    """
    Parse Go source bytes.

    Raises:
        GoParseError if the tree contains ERROR or MISSING nodes.
    """
    parser = Parser(GO_LANGUAGE)
    tree = parser.parse(source)
    error = first_error(tree.root_node)
    if error is not None:
        line, column, detail = error
        raise GoParseError(path, line, column, detail)
    return SourceTree(source=source, tree=tree, path=path)


def string_literal_value(node: Node, source: bytes) -> Optional[str]:
    """
    Unquoted value of a Go string literal node (interpreted or raw).

    Escapes are not interpreted; import paths never carry any.
    """
    if node.type not in ("interpreted_string_literal", "raw_string_literal"):
        return None
    text = node_text(node, source)
    if len(text) < 2:
        return None
    return text[1:-1]


__all__ = [
    "GO_LANGUAGE",
    "SourceTree",
    "node_text",
    "named_children",
    "walk_all",
    "first_error",
    "parse_source",
    "string_literal_value",
]
