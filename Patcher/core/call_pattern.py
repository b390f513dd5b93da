# core/call_pattern.py
"""
Semantic call matcher.

A CallPattern accepts `recv.member(arg, ...)` when `recv` is an identifier
whose nearest declaration is a receiver/parameter/result of an enclosing
function, declared as `*ReceiverType`. Anything that cannot be resolved that
way is a non-match, never an error: upstream files drift between releases
and an unexpected shape must not stop a batch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from tree_sitter import Node

# local imports
from ..config import TARGET_MEMBER, RECEIVER_TYPE
from .symbols import (
    BLOCK_NODES,
    FUNCTION_NODES,
    ScopeStack,
    alias_names,
    function_declarations,
    local_names,
)
from .syntax import SourceTree, named_children, node_text
from .types import Declaration, Match

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CallPattern:
    """
    Attributes:
        member:        method name being called (e.g. "error")
        receiver_type: named type the receiver must point to (e.g. "encodeState")
    """
    member: str = TARGET_MEMBER
    receiver_type: str = RECEIVER_TYPE

    def match(self, call: Node, scopes: ScopeStack, source: bytes) -> Optional[Match]:
        """Evaluate the pattern on one call_expression node."""
        if call.type != "call_expression":
            return None

        func = call.child_by_field_name("function")
        if func is None or func.type != "selector_expression":
            return None

        member = func.child_by_field_name("field")
        if member is None or node_text(member, source) != self.member:
            return None

        operand = func.child_by_field_name("operand")
        if operand is None or operand.type != "identifier":
            return None

        receiver = node_text(operand, source)
        line, column = call.start_point[0] + 1, call.start_point[1] + 1
        decl = scopes.resolve(receiver)
        if not self._accepts(decl):
            logger.debug(
                "line %d: %s.%s(...) not matched (declaration: %s)",
                line, receiver, self.member, decl,
            )
            return None

        args = call.child_by_field_name("arguments")
        arguments = named_children(args) if args is not None else []
        if not arguments:
            logger.debug("line %d: %s.%s() has no argument to wrap", line, receiver, self.member)
            return None
        first = arguments[0]

        return Match(
            receiver=receiver,
            line=line,
            column=column,
            call_start=call.start_byte,
            call_end=call.end_byte,
            member_start=member.start_byte,
            member_end=member.end_byte,
            argument_start=first.start_byte,
            argument_end=first.end_byte,
        )

    def _accepts(self, decl: Optional[Declaration]) -> bool:
        return decl is not None and decl.is_field and decl.pointer_to == self.receiver_type


# ================== Traversal ==================
def _opens_scope(node: Node) -> bool:
    if node.type in FUNCTION_NODES:
        return True
    if node.type not in BLOCK_NODES:
        return False
    # A function body shares the scope of its parameters.
    parent = node.parent
    return not (node.type == "block" and parent is not None and parent.type in FUNCTION_NODES)


def _enter(node: Node, scopes: ScopeStack, source: bytes) -> None:
    if _opens_scope(node):
        scopes.push()
    if node.type in FUNCTION_NODES:
        for decl in function_declarations(node, source):
            scopes.declare(decl)
    for name in alias_names(node):
        scopes.declare(_local(name, source))


def _leave(node: Node, scopes: ScopeStack, source: bytes) -> None:
    # Locals come into scope at the end of their declaring statement.
    redeclare = node.type != "short_var_declaration"
    for name in local_names(node):
        scopes.declare(_local(name, source), redeclare=redeclare)
    if _opens_scope(node):
        scopes.pop()


def _local(name: Node, source: bytes) -> Declaration:
    return Declaration(name=node_text(name, source), kind="local", line=name.start_point[0] + 1)


def find_matches(tree: SourceTree, pattern: CallPattern = CallPattern()) -> List[Match]:
    """
    One full pre-order traversal of `tree`, returning every call accepted by
    `pattern` in source order.
    """
    source = tree.source
    scopes = ScopeStack()
    matches: List[Match] = []

    # (node, leaving) pairs; the leave marker is pushed below the children.
    stack = [(tree.root, False)]
    while stack:
        node, leaving = stack.pop()
        if leaving:
            _leave(node, scopes, source)
            continue

        _enter(node, scopes, source)
        if node.type == "call_expression":
            found = pattern.match(node, scopes, source)
            if found is not None:
                matches.append(found)

        stack.append((node, True))
        stack.extend((child, False) for child in reversed(node.named_children))

    return matches


__all__ = [
    "CallPattern",
    "find_matches",
]
