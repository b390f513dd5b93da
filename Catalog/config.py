# Catalog/config.py
from typing import List

# GitHub tag registry for the upstream toolchain
TAGS_URL = "https://api.github.com/repos/golang/go/tags"
PER_PAGE = 100

# Release tags only: "go1", "go1.21" (no patch, beta or rc tags)
RELEASE_TAG_PATTERN = r"^go[0-9]+(\.[0-9]+)?$"

# Obsolete releases, compared against the tag number ("go1.2" -> "1.2")
OBSOLETE_VERSIONS: List[str] = [
    "1", "1.1", "1.2", "1.3",
]

# Environment variable holding the optional bearer token
TOKEN_ENV_VAR = "GITHUB_TOKEN"
