# Patcher/__init__.py
"""
Entry point package for the Go patch engine
"""

from .core import (
    CallPattern,
    RewriteRule,
    Match,
    TextEdit,
    PatchResult,
)
from .patcher import (
    patch_source,
    substitute_imports,
    apply_patch,
    rewrite_imports,
    rewrite_import,
    patch_tree,
)

__all__ = [
    "CallPattern",
    "RewriteRule",
    "Match",
    "TextEdit",
    "PatchResult",
    "patch_source",
    "substitute_imports",
    "apply_patch",
    "rewrite_imports",
    "rewrite_import",
    "patch_tree",
]
