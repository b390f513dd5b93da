# Catalog/catalog.py
"""
Version discovery against the upstream tag registry.

The registry is paginated; pages are requested until one comes back empty.
Tags that do not look like a release ("go1", "go1.21") are dropped silently,
then the obsolete denylist is applied against the tag number.
"""

from __future__ import annotations

import logging
import re
from os import getenv
from typing import Any, Dict, Iterable, List, Optional, Sequence

import requests

# local imports
from Common import DiscoveryError, ReleaseIdentifier
from .config import (
    TAGS_URL,
    PER_PAGE,
    RELEASE_TAG_PATTERN,
    OBSOLETE_VERSIONS,
    TOKEN_ENV_VAR,
)

logger = logging.getLogger(__name__)

_RELEASE_TAG = re.compile(RELEASE_TAG_PATTERN)


# ================== Helpers ==================
def is_release_tag(name: str) -> bool:
    return bool(_RELEASE_TAG.match(name))


def filter_releases(
    names: Iterable[str],
    denylist: Sequence[str] = OBSOLETE_VERSIONS,
) -> List[ReleaseIdentifier]:
    """
    Keep release-shaped tags, drop duplicates and denylisted numbers.

    Order of first appearance is preserved.
    """
    denied = set(denylist)
    seen = set()
    releases: List[ReleaseIdentifier] = []
    for name in names:
        if not is_release_tag(name) or name in seen:
            continue
        seen.add(name)
        release = ReleaseIdentifier(name)
        if release.number in denied:
            logger.debug("skipping obsolete release %s", name)
            continue
        releases.append(release)
    return releases


def _auth_headers(token: Optional[str]) -> Dict[str, str]:
    headers = {"Accept": "application/vnd.github+json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def fetch_tag_page(
    session: Any,
    page: int,
    token: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Fetch one page of the tag listing.

    Raises:
        DiscoveryError on transport failure, non-2xx status, or a body that
        is not a JSON array of objects carrying a string `name`.
    """
    params = {"per_page": PER_PAGE, "page": page}
    try:
        resp = session.get(TAGS_URL, params=params, headers=_auth_headers(token))
    except requests.RequestException as exc:
        raise DiscoveryError(f"tag registry unreachable: {exc}") from exc

    try:
        if resp.status_code >= 400:
            raise DiscoveryError(
                f"tag registry returned HTTP {resp.status_code} for page {page}: {resp.text[:200]}"
            )
        try:
            payload = resp.json()
        except ValueError as exc:
            raise DiscoveryError(f"tag registry page {page} is not JSON: {exc}") from exc
    finally:
        resp.close()

    if not isinstance(payload, list):
        raise DiscoveryError(f"tag registry page {page} is not a JSON array")
    for item in payload:
        if not isinstance(item, dict) or not isinstance(item.get("name"), str):
            raise DiscoveryError(f"tag registry page {page} has an entry without a name")
    return payload


# ================== Main ==================
def list_releases(
    token: Optional[str] = None,
    session: Any = None,
    denylist: Sequence[str] = OBSOLETE_VERSIONS,
) -> List[ReleaseIdentifier]:
    """
    Walk every page of the tag registry and return the retained releases.

    Args:
        token:    optional bearer token; falls back to $GITHUB_TOKEN.
        session:  requests-compatible session (a fresh one when omitted).
        denylist: obsolete tag numbers to exclude.
    """
    if token is None:
        token = getenv(TOKEN_ENV_VAR) or None
    if token is None:
        logger.info("no %s set; registry calls are unauthenticated", TOKEN_ENV_VAR)

    own_session = session is None
    if own_session:
        session = requests.Session()

    names: List[str] = []
    try:
        page = 1
        while True:
            entries = fetch_tag_page(session, page, token)
            if not entries:
                break
            names.extend(entry["name"] for entry in entries)
            page += 1
    finally:
        if own_session:
            session.close()

    releases = filter_releases(names, denylist)
    logger.info("discovered %d tags, %d releases retained", len(names), len(releases))
    return releases


__all__ = [
    "is_release_tag",
    "filter_releases",
    "fetch_tag_page",
    "list_releases",
]
