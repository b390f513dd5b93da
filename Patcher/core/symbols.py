# core/symbols.py
"""
Scope stack used to resolve an identifier to its nearest declaration.

This is not a type checker: only *declared* types are recorded, and only in
the shape the call pattern needs (is it `*Name`, and which Name). Names
introduced by local `var`/`const`/`:=` declarations are recorded as opaque
"local" declarations so that they shadow outer receivers and parameters the
way Go scoping does.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from tree_sitter import Node

# local imports
from .syntax import named_children, node_text
from .types import Declaration

# Nodes that open a function scope holding receiver/parameter/result names
FUNCTION_NODES = frozenset({
    "function_declaration",
    "method_declaration",
    "func_literal",
})

# Nodes that open an implicit or explicit block scope
BLOCK_NODES = frozenset({
    "block",
    "if_statement",
    "for_statement",
    "expression_switch_statement",
    "type_switch_statement",
    "select_statement",
    "expression_case",
    "type_case",
    "communication_case",
    "default_case",
})


class ScopeStack:
    """
    Stack of name -> Declaration maps, innermost last.

    The bottom scope stands for the package; it is always present.
    """

    def __init__(self) -> None:
        self._scopes: List[Dict[str, Declaration]] = [{}]

    def push(self) -> None:
        self._scopes.append({})

    def pop(self) -> None:
        if len(self._scopes) == 1:
            raise RuntimeError("cannot pop the package scope")
        self._scopes.pop()

    def declare(self, decl: Declaration, redeclare: bool = True) -> None:
        """
        Add `decl` to the innermost scope.

        With redeclare=False an existing name in the same scope is kept,
        matching `:=` which reuses variables already declared there.
        """
        scope = self._scopes[-1]
        if not redeclare and decl.name in scope:
            return
        scope[decl.name] = decl

    def resolve(self, name: str) -> Optional[Declaration]:
        for scope in reversed(self._scopes):
            decl = scope.get(name)
            if decl is not None:
                return decl
        return None


# ================== Declared types ==================
def pointer_element(type_node: Optional[Node], source: bytes) -> Optional[str]:
    """
    For a declared type `*Name` return "Name"; None for any other shape.

    Parenthesized types are unwrapped on both sides of the star.
    """
    node = _unparen(type_node)
    if node is None or node.type != "pointer_type":
        return None
    children = named_children(node)
    if not children:
        return None
    elem = _unparen(children[0])
    if elem is None or elem.type != "type_identifier":
        return None
    return node_text(elem, source)


def _unparen(node: Optional[Node]) -> Optional[Node]:
    while node is not None and node.type == "parenthesized_type":
        children = named_children(node)
        node = children[0] if children else None
    return node


# ================== Declaration extraction ==================
def parameter_declarations(params: Optional[Node], kind: str, source: bytes) -> List[Declaration]:
    """Declarations introduced by one parameter_list (receiver, params or results)."""
    if params is None or params.type != "parameter_list":
        return []
    decls: List[Declaration] = []
    for child in named_children(params):
        if child.type == "parameter_declaration":
            pointee = pointer_element(child.child_by_field_name("type"), source)
            for name in child.children_by_field_name("name"):
                decls.append(Declaration(
                    name=node_text(name, source),
                    kind=kind,
                    pointer_to=pointee,
                    line=name.start_point[0] + 1,
                ))
        elif child.type == "variadic_parameter_declaration":
            name = child.child_by_field_name("name")
            if name is not None:
                decls.append(Declaration(
                    name=node_text(name, source),
                    kind="variadic",
                    line=name.start_point[0] + 1,
                ))
    return decls


def function_declarations(func: Node, source: bytes) -> List[Declaration]:
    """Receiver, parameter and named-result declarations of a function node."""
    decls: List[Declaration] = []
    decls.extend(parameter_declarations(func.child_by_field_name("receiver"), "receiver", source))
    decls.extend(parameter_declarations(func.child_by_field_name("parameters"), "parameter", source))
    decls.extend(parameter_declarations(func.child_by_field_name("result"), "result", source))
    return decls


def local_names(node: Node) -> Iterable[Node]:
    """
    Identifier nodes declared by a local declaration statement, or nothing
    when `node` declares no names.
    """
    if node.type in ("var_spec", "const_spec"):
        return [n for n in node.children_by_field_name("name") if n.type == "identifier"]
    if node.type == "short_var_declaration":
        return _identifiers(node.child_by_field_name("left"))
    if node.type == "range_clause" and _has_token(node, ":="):
        return _identifiers(node.child_by_field_name("left"))
    return ()


def alias_names(node: Node) -> List[Node]:
    """Names bound by a type switch guard (`switch v := x.(type)`)."""
    if node.type != "type_switch_statement":
        return []
    return _identifiers(node.child_by_field_name("alias"))


def _identifiers(node: Optional[Node]) -> List[Node]:
    if node is None:
        return []
    if node.type == "identifier":
        return [node]
    return [child for child in named_children(node) if child.type == "identifier"]


def _has_token(node: Node, token: str) -> bool:
    return any(not child.is_named and child.type == token for child in node.children)


__all__ = [
    "FUNCTION_NODES",
    "BLOCK_NODES",
    "ScopeStack",
    "pointer_element",
    "parameter_declarations",
    "function_declarations",
    "local_names",
    "alias_names",
]
