# Fetcher/__init__.py
"""
Entry point package for archive download and extraction
"""

from .fetcher import (
    ExtractionSummary,
    archive_url,
    download_archive,
    extract_archive,
    fetch_and_extract,
)

__all__ = [
    "ExtractionSummary",
    "archive_url",
    "download_archive",
    "extract_archive",
    "fetch_and_extract",
]
