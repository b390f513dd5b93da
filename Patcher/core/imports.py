# core/imports.py
"""
Import declaration helpers: lookup, insertion and path substitution.

Both producers return TextEdits against the parsed source, like the call
rewrite, so every change to a file goes through apply_edits.
"""

from __future__ import annotations

from typing import List, Optional

from tree_sitter import Node

# local imports
from .syntax import SourceTree, named_children, string_literal_value
from .types import TextEdit


def import_specs(tree: SourceTree) -> List[Node]:
    """All import_spec nodes of the file, in source order."""
    specs: List[Node] = []
    for decl in named_children(tree.root):
        if decl.type != "import_declaration":
            continue
        for child in named_children(decl):
            if child.type == "import_spec":
                specs.append(child)
            elif child.type == "import_spec_list":
                specs.extend(c for c in named_children(child) if c.type == "import_spec")
    return specs


def import_path(spec: Node, source: bytes) -> Optional[str]:
    path = spec.child_by_field_name("path")
    return string_literal_value(path, source) if path is not None else None


def has_import(tree: SourceTree, path: str) -> bool:
    """True when `path` is imported under its own package name."""
    package_name = path.rsplit("/", 1)[-1]
    for spec in import_specs(tree):
        if import_path(spec, tree.source) != path:
            continue
        name = spec.child_by_field_name("name")
        if name is None or tree.text(name) == package_name:
            return True
    return False


def add_import_edits(tree: SourceTree, path: str) -> List[TextEdit]:
    """
    Edits that add `import "path"`; empty when it is already imported.

    Placement: inside the first parenthesized import block, in sorted
    position; otherwise after the last single import; otherwise right after
    the package clause.
    """
    if has_import(tree, path):
        return []

    literal = f'"{path}"'
    decls = [d for d in named_children(tree.root) if d.type == "import_declaration"]

    for decl in decls:
        spec_list = next((c for c in named_children(decl) if c.type == "import_spec_list"), None)
        if spec_list is None:
            continue
        anchor = _open_paren_end(spec_list)
        for spec in (c for c in named_children(spec_list) if c.type == "import_spec"):
            if (import_path(spec, tree.source) or "") > path:
                break
            anchor = spec.end_byte
        return [TextEdit(anchor, anchor, f"\n\t{literal}")]

    if decls:
        end = decls[-1].end_byte
        return [TextEdit(end, end, f"\nimport {literal}")]

    package = next((c for c in named_children(tree.root) if c.type == "package_clause"), None)
    end = package.end_byte if package is not None else 0
    return [TextEdit(end, end, f"\n\nimport {literal}")]


def _open_paren_end(spec_list: Node) -> int:
    for child in spec_list.children:
        if child.type == "(":
            return child.end_byte
    return spec_list.start_byte


def rewrite_import_edits(tree: SourceTree, old: str, new: str) -> List[TextEdit]:
    """Edits replacing every import path equal to `old` with `new`."""
    edits: List[TextEdit] = []
    for spec in import_specs(tree):
        if import_path(spec, tree.source) == old:
            path = spec.child_by_field_name("path")
            edits.append(TextEdit(path.start_byte, path.end_byte, f'"{new}"'))
    return edits


__all__ = [
    "import_specs",
    "import_path",
    "has_import",
    "add_import_edits",
    "rewrite_import_edits",
]
