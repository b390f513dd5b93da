# Fetcher/fetcher.py
"""
Source archive download and filtered extraction.

The archive is streamed to a temporary file inside the version directory,
then read back as a gzip'd tar stream one entry at a time. Only entries that
match one of the configured path filters are written; the filter decides the
output path by stripping its prefix. The temporary archive is always removed
afterwards.
"""

from __future__ import annotations

import gzip
import logging
import shutil
import tarfile
import zlib
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any, Optional, Sequence, Tuple, Union

import requests

# local imports
from Common import (
    CleanupError,
    ExtractionError,
    FetchError,
    PathFilter,
    ReleaseIdentifier,
    UnsupportedEntryError,
)
from .config import (
    ARCHIVE_URL_TEMPLATE,
    ARCHIVE_FILENAME,
    CHUNK_SIZE,
    PATH_FILTERS,
)

logger = logging.getLogger(__name__)

# Errors raised while decoding the gzip/tar stream (as opposed to writing files)
_DECODE_ERRORS: Tuple[type, ...] = (tarfile.TarError, EOFError, zlib.error, gzip.BadGzipFile)


@dataclass
class ExtractionSummary:
    """Counts of what one extraction wrote and skipped."""
    files: int = 0
    directories: int = 0
    skipped: int = 0


# ================== Helpers ==================
def archive_url(version: Union[str, ReleaseIdentifier]) -> str:
    return ARCHIVE_URL_TEMPLATE.format(version=str(version))


def _select(name: str, path_filters: Sequence[PathFilter]) -> Optional[str]:
    """First matching filter decides the output path; None means skip."""
    for path_filter in path_filters:
        out = path_filter.output_path(name)
        if out is not None:
            return out
    return None


def _safe_relative(name: str, out: str) -> PurePosixPath:
    """
    Validate a stripped output path: relative, no '..' components.

    Raises:
        ExtractionError if the entry would land outside the destination.
    """
    rel = PurePosixPath(out)
    if rel.is_absolute() or ".." in rel.parts:
        raise ExtractionError(f"entry {name!r} escapes the extraction root")
    return rel


def _remove_archive(archive_path: Path, primary: Optional[BaseException]) -> None:
    if not archive_path.exists():
        return
    try:
        archive_path.unlink()
    except OSError as exc:
        raise CleanupError(f"failed to remove {archive_path}: {exc}", primary) from (primary or exc)


# ================== Download ==================
def download_archive(url: str, target: Path, session: Any = None) -> Path:
    """
    Stream `url` into `target` chunk by chunk.

    Raises:
        FetchError      on transport failure or a non-2xx response.
        ExtractionError if the local file cannot be written.
    """
    target = Path(target)
    own_session = session is None
    if own_session:
        session = requests.Session()

    logger.info("downloading %s", url)
    try:
        try:
            resp = session.get(url, stream=True)
        except requests.RequestException as exc:
            raise FetchError(f"archive unreachable: {url}: {exc}") from exc

        try:
            if resp.status_code >= 400:
                raise FetchError(f"archive download returned HTTP {resp.status_code}: {url}")
            with target.open("wb") as fh:
                for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        fh.write(chunk)
        except requests.RequestException as exc:
            raise FetchError(f"archive download interrupted: {url}: {exc}") from exc
        except OSError as exc:
            raise ExtractionError(f"cannot write archive {target}: {exc}") from exc
        finally:
            resp.close()
    finally:
        if own_session:
            session.close()

    return target


# ================== Extraction ==================
def extract_archive(
    archive_path: Path,
    destination: Path,
    path_filters: Sequence[PathFilter] = PATH_FILTERS,
) -> ExtractionSummary:
    """
    Extract the entries of a .tar.gz selected by `path_filters` into
    `destination`.

    The archive is read in streaming mode; the decompressed stream is never
    held in memory as a whole.

    Raises:
        FetchError            if the archive is not a readable gzip'd tar.
        UnsupportedEntryError on a selected entry that is not a dir or file.
        ExtractionError       on filesystem failures or unsafe paths.
    """
    destination = Path(destination)
    summary = ExtractionSummary()

    try:
        with tarfile.open(archive_path, mode="r|gz") as tar:
            for member in tar:
                out = _select(member.name, path_filters)
                if out is None:
                    summary.skipped += 1
                    continue
                out = out.strip("/")
                if not out:
                    continue

                target = destination.joinpath(*_safe_relative(member.name, out).parts)

                if member.isdir():
                    try:
                        target.mkdir(parents=True, exist_ok=True)
                    except OSError as exc:
                        raise ExtractionError(f"cannot create directory {target}: {exc}") from exc
                    summary.directories += 1
                elif member.isreg():
                    src = tar.extractfile(member)
                    try:
                        target.parent.mkdir(parents=True, exist_ok=True)
                        with target.open("wb") as fh:
                            shutil.copyfileobj(src, fh)
                    except _DECODE_ERRORS:
                        raise
                    except OSError as exc:
                        raise ExtractionError(f"cannot write {target}: {exc}") from exc
                    summary.files += 1
                else:
                    raise UnsupportedEntryError(member.name, _entry_kind(member))
    except _DECODE_ERRORS as exc:
        raise FetchError(f"cannot decode archive {archive_path}: {exc}") from exc
    except FileNotFoundError as exc:
        raise FetchError(f"archive missing: {archive_path}") from exc

    logger.info(
        "extracted %d files, %d directories into %s",
        summary.files, summary.directories, destination,
    )
    return summary


def _entry_kind(member: tarfile.TarInfo) -> str:
    if member.issym():
        return "symlink"
    if member.islnk():
        return "hardlink"
    if member.ischr() or member.isblk():
        return "device"
    if member.isfifo():
        return "fifo"
    return repr(member.type)


# ================== Main ==================
def fetch_and_extract(
    version: Union[str, ReleaseIdentifier],
    destination: Path,
    path_filters: Sequence[PathFilter] = PATH_FILTERS,
    session: Any = None,
) -> ExtractionSummary:
    """
    Download the source archive of `version` into `destination`, extract the
    filtered entries there and delete the archive.

    A failure to delete the archive is raised as CleanupError, carrying the
    primary error (if any) so neither message is lost.
    """
    destination = Path(destination)
    archive_path = destination / ARCHIVE_FILENAME

    primary: Optional[BaseException] = None
    try:
        download_archive(archive_url(version), archive_path, session=session)
        return extract_archive(archive_path, destination, path_filters)
    except Exception as exc:
        primary = exc
        raise
    finally:
        _remove_archive(archive_path, primary)


__all__ = [
    "ExtractionSummary",
    "archive_url",
    "download_archive",
    "extract_archive",
    "fetch_and_extract",
]
