# Common/errors.py
"""
Error hierarchy shared by every stage of the generator.

Leaf components raise these unchanged in kind; only the run orchestrator
decides whether a failure aborts the whole run (DiscoveryError) or just the
current version (everything else).
"""

from __future__ import annotations

from typing import Optional


class GenerationError(Exception):
    """Base class for all generator failures."""


# ================== Discovery ==================
class DiscoveryError(GenerationError):
    """Release registry unreachable or returned a malformed response."""


# ================== Fetch / extract ==================
class FetchError(GenerationError):
    """Source archive unreachable or undecodable."""


class ExtractionError(GenerationError):
    """Archive entry could not be materialized on disk."""


class UnsupportedEntryError(ExtractionError):
    """Archive entry is neither a directory nor a regular file."""

    def __init__(self, name: str, kind: str) -> None:
        super().__init__(f"unsupported entry type {kind!r} in {name}")
        self.name = name
        self.kind = kind


class CleanupError(GenerationError):
    """
    The temporary archive could not be removed.

    When cleanup fails after another error, both messages are kept: the
    cleanup message comes first, the primary one is appended and also
    available as `primary` (and as `__cause__` when raised with `from`).
    """

    def __init__(self, message: str, primary: Optional[BaseException] = None) -> None:
        if primary is not None:
            message = f"{message}: {primary}"
        super().__init__(message)
        self.primary = primary


# ================== Patch engine ==================
class PatchError(GenerationError):
    """The patch engine could not produce valid output."""


class GoParseError(PatchError):
    """Source file does not parse as valid Go."""

    def __init__(self, path: str, line: int, column: int, detail: str = "syntax error") -> None:
        super().__init__(f"{path}:{line}:{column}: {detail}")
        self.path = path
        self.line = line
        self.column = column


class WriteError(PatchError):
    """The rendered file could not be written back."""


__all__ = [
    "GenerationError",
    "DiscoveryError",
    "FetchError",
    "ExtractionError",
    "UnsupportedEntryError",
    "CleanupError",
    "PatchError",
    "GoParseError",
    "WriteError",
]
