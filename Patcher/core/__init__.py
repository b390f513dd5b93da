# Patcher/core/__init__.py
"""
Core package for the Go patch engine.

This package contains:
- types.py        : plain values (Declaration, Match, TextEdit, PatchResult)
- syntax.py       : tree-sitter Go parsing and node helpers
- symbols.py      : scope stack for declared-type resolution
- call_pattern.py : the semantic call matcher and the matching traversal
- rewrite.py      : rewrite rule and single-pass edit application
- imports.py      : import lookup, insertion and path substitution
"""

from .types import (
    Declaration,
    Match,
    TextEdit,
    PatchResult,
)
from .syntax import (
    SourceTree,
    parse_source,
)
from .symbols import ScopeStack
from .call_pattern import (
    CallPattern,
    find_matches,
)
from .rewrite import (
    RewriteRule,
    build_edits,
    apply_edits,
)
from .imports import (
    has_import,
    add_import_edits,
    rewrite_import_edits,
)

__all__ = [
    "Declaration",
    "Match",
    "TextEdit",
    "PatchResult",
    "SourceTree",
    "parse_source",
    "ScopeStack",
    "CallPattern",
    "find_matches",
    "RewriteRule",
    "build_edits",
    "apply_edits",
    "has_import",
    "add_import_edits",
    "rewrite_import_edits",
]
