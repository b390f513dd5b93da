# core/types.py
"""
Core type definitions for the patch engine.

Everything here is a plain value: matches and edits carry byte offsets into
the source buffer they were computed from, never tree-sitter nodes, so they
stay valid after the tree is discarded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


# ================== Symbol table ==================
@dataclass(frozen=True)
class Declaration:
    """
    One declared name as seen by the symbol-table walk.

    Attributes:
        name:       identifier
        kind:       "receiver", "parameter", "result", "variadic" or "local"
        pointer_to: element type name when the declared type is `*Name`,
                    otherwise None
        line:       1-based declaration line
    """
    name: str
    kind: str
    pointer_to: Optional[str] = None
    line: int = 0

    @property
    def is_field(self) -> bool:
        """True for names declared in a receiver/parameter/result list."""
        return self.kind in ("receiver", "parameter", "result")


# ================== Matching ==================
@dataclass(frozen=True)
class Match:
    """
    A call expression accepted by a CallPattern.

    Byte ranges (end exclusive):
        call_*:     the whole call expression
        member_*:   the selector's field identifier (e.g. `error`)
        argument_*: the first argument
    """
    receiver: str
    line: int
    column: int
    call_start: int
    call_end: int
    member_start: int
    member_end: int
    argument_start: int
    argument_end: int


# ================== Rewriting ==================
@dataclass(frozen=True)
class TextEdit:
    """Replace source[start:end] with `text` (start == end inserts)."""
    start: int
    end: int
    text: str

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid edit range [{self.start}, {self.end})")


@dataclass
class PatchResult:
    """Outcome of patching one file."""
    path: Path
    matches: List[Match] = field(default_factory=list)
    changed: bool = False

    @property
    def match_count(self) -> int:
        return len(self.matches)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": str(self.path),
            "matches": [m.line for m in self.matches],
            "changed": self.changed,
        }


__all__ = [
    "Declaration",
    "Match",
    "TextEdit",
    "PatchResult",
]
