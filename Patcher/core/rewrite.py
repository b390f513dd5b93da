# core/rewrite.py
"""
Rewrite rule and edit application.

The rule never touches the tree. It turns one Match into a handful of
TextEdits that rename the member and wrap the first argument:

    e.error(ARG)  ->  e.WriteString(fmt.Sprintf("\"%s\"", (ARG).Error()))

The edits only cover the member identifier and the two boundaries of the
argument, so nested matches (`e.error(e.error(x))`) compose without
overlapping.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

# local imports
from Common import PatchError
from ..config import (
    REPLACEMENT_MEMBER,
    FORMAT_FUNC,
    QUOTED_FORMAT,
    DESCRIBE_METHOD,
)
from .types import Match, TextEdit


@dataclass(frozen=True)
class RewriteRule:
    """
    Attributes:
        replacement: new member name
        formatter:   qualified formatting function wrapped around the argument
        template:    Go string literal passed as the format
        describe:    method called on the argument to describe it
    """
    replacement: str = REPLACEMENT_MEMBER
    formatter: str = FORMAT_FUNC
    template: str = QUOTED_FORMAT
    describe: str = DESCRIBE_METHOD

    @property
    def required_import(self) -> str:
        """Package path the rewritten call depends on ("fmt")."""
        return self.formatter.split(".", 1)[0]

    def rewrite(self, match: Match) -> List[TextEdit]:
        return [
            TextEdit(match.member_start, match.member_end, self.replacement),
            TextEdit(match.argument_start, match.argument_start, f"{self.formatter}({self.template}, ("),
            TextEdit(match.argument_end, match.argument_end, f").{self.describe}())"),
        ]


def build_edits(matches: Iterable[Match], rule: RewriteRule = RewriteRule()) -> List[TextEdit]:
    edits: List[TextEdit] = []
    for match in matches:
        edits.extend(rule.rewrite(match))
    return edits


def apply_edits(source: bytes, edits: Sequence[TextEdit]) -> bytes:
    """
    Apply `edits` to `source` in one pass and return the new buffer.

    Edits are ordered by position; insertions at the same offset keep the
    order they were given in. Overlapping replacements are rejected.
    """
    ordered = sorted(enumerate(edits), key=lambda item: (item[1].start, item[1].end, item[0]))
    pieces: List[bytes] = []
    cursor = 0
    for _, edit in ordered:
        if edit.end > len(source):
            raise PatchError(f"edit [{edit.start}, {edit.end}) past end of source ({len(source)} bytes)")
        if edit.start < cursor:
            raise PatchError(f"overlapping edits at byte {edit.start}")
        pieces.append(source[cursor:edit.start])
        pieces.append(edit.text.encode("utf-8"))
        cursor = edit.end
    pieces.append(source[cursor:])
    return b"".join(pieces)


__all__ = [
    "RewriteRule",
    "build_edits",
    "apply_edits",
]
