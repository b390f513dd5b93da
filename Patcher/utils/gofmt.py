# Patcher/utils/gofmt.py
"""
Canonical formatting through the toolchain's own `gofmt`.

gofmt is required: every file the patcher writes goes through it, so a
missing binary is a PatchError rather than a silent pass-through.
"""

import logging
import shutil
import subprocess
from functools import lru_cache
from os import getenv
from typing import Optional

# local imports
from Common import PatchError
from ..config import GOFMT_BIN, GOFMT_ENV_VAR

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def _which(binary: str) -> Optional[str]:
    return shutil.which(binary)


def resolve_gofmt() -> Optional[str]:
    """Path to gofmt ($GOFMT first, then PATH), or None if unavailable."""
    return _which(getenv(GOFMT_ENV_VAR) or GOFMT_BIN)


def format_source(source: bytes, path: str = "<source>") -> bytes:
    """
    Run `source` through gofmt and return the canonical text.

    Raises:
        PatchError if gofmt cannot be found or rejects the input.
    """
    gofmt = resolve_gofmt()
    if gofmt is None:
        raise PatchError(
            f"gofmt not found (set ${GOFMT_ENV_VAR} or add it to PATH); cannot format {path}"
        )

    logger.debug("formatting %s with %s", path, gofmt)
    proc = subprocess.run([gofmt], input=source, capture_output=True, check=False)
    if proc.returncode != 0:
        detail = proc.stderr.decode("utf-8", errors="replace").strip()
        raise PatchError(f"gofmt failed on {path}: {detail}")
    return proc.stdout
