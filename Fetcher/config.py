# Fetcher/config.py
from typing import List

from Common import PathFilter

# Source archive location, templated with the exact release tag
ARCHIVE_URL_TEMPLATE = "https://go.dev/dl/{version}.src.tar.gz"

# Temporary archive name inside the version directory (removed after extraction)
ARCHIVE_FILENAME = "_gosrc.tar.gz"

CHUNK_SIZE = 1 << 16

# encoding/json lands at the version root, internal/testenv keeps its path
PATH_FILTERS: List[PathFilter] = [
    PathFilter("go/src/encoding/json/"),
    PathFilter("go/src/internal/testenv/", strip="go/src/"),
]
