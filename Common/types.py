# Common/types.py
"""
Value types passed between the catalog, the fetcher and the pipeline.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import total_ordering
from typing import Optional, Tuple

_LEADING_NON_DIGITS = re.compile(r"^[^0-9]*")
_DIGIT_RUNS = re.compile(r"[0-9]+")


@total_ordering
@dataclass(frozen=True)
class ReleaseIdentifier:
    """
    A single upstream release tag, e.g. "go1.21".

    Equality is by exact tag; ordering is by release recency, comparing the
    numeric components as integers (go1.9 < go1.10).
    """
    tag: str

    @property
    def number(self) -> str:
        """Tag with its leading non-numeric prefix stripped ("go1.21" -> "1.21")."""
        return _LEADING_NON_DIGITS.sub("", self.tag)

    @property
    def sort_key(self) -> Tuple[int, ...]:
        return tuple(int(part) for part in _DIGIT_RUNS.findall(self.tag))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ReleaseIdentifier):
            return NotImplemented
        return (self.sort_key, self.tag) < (other.sort_key, other.tag)

    def __str__(self) -> str:
        return self.tag


@dataclass(frozen=True)
class PathFilter:
    """
    Archive path-prefix filter.

    Attributes:
        prefix: entries whose path starts with this are selected.
        strip:  leading part removed to build the output path
                (defaults to `prefix`).
    """
    prefix: str
    strip: Optional[str] = field(default=None)

    def output_path(self, entry_name: str) -> Optional[str]:
        """
        Return the stripped output path for `entry_name`, or None when the
        filter does not select it.
        """
        if not entry_name.startswith(self.prefix):
            return None
        strip = self.prefix if self.strip is None else self.strip
        return entry_name[len(strip):]


__all__ = [
    "ReleaseIdentifier",
    "PathFilter",
]
