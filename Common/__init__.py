# Common/__init__.py
"""
Shared error hierarchy and value types.
"""

from .errors import (
    GenerationError,
    DiscoveryError,
    FetchError,
    ExtractionError,
    UnsupportedEntryError,
    CleanupError,
    PatchError,
    GoParseError,
    WriteError,
)
from .types import (
    ReleaseIdentifier,
    PathFilter,
)

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
    "ReleaseIdentifier",
    "PathFilter",
]
