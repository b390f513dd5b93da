# Patcher/utils/__init__.py
from .gofmt import (
    resolve_gofmt,
    format_source,
)

__all__ = [
    "resolve_gofmt",
    "format_source",
]
