# Catalog/__init__.py
"""
Entry point package for release discovery
"""

from .catalog import (
    is_release_tag,
    filter_releases,
    fetch_tag_page,
    list_releases,
)

__all__ = [
    "is_release_tag",
    "filter_releases",
    "fetch_tag_page",
    "list_releases",
]
