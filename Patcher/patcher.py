# Patcher/patcher.py
"""
The Patcher module rewrites one extracted copy of encoding/json so that it
can live outside the standard library.

The module handles:
- Matching `e.error(...)` calls whose receiver is declared `*encodeState`
- Rewriting each match into `e.WriteString(fmt.Sprintf("\"%s\"", (ARG).Error()))`
- Adding the `fmt` import when a rewrite needs it
- Substituting internal import paths in the companion test file
- Re-rendering through gofmt and overwriting the file in place

`patch_source()` is the pure entrypoint (bytes in, bytes out); `apply_patch()`
and `rewrite_imports()` wrap it with file I/O. Each call rereads its file and
keeps no state between files or versions.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Tuple, Union

# local imports
from Common import GoParseError, PatchError, WriteError
from .config import (
    TARGET_FILE,
    IMPORT_FILE,
    IMPORT_REWRITES,
)
from .core import (
    CallPattern,
    Match,
    PatchResult,
    RewriteRule,
    add_import_edits,
    apply_edits,
    build_edits,
    find_matches,
    parse_source,
    rewrite_import_edits,
)
from .utils import format_source

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

DEFAULT_PATTERN = CallPattern()
DEFAULT_RULE = RewriteRule()


# ================== Helpers ==================
def _read(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise PatchError(f"cannot read {path}: {exc}") from exc


def _write(path: Path, data: bytes) -> None:
    try:
        path.write_bytes(data)
    except OSError as exc:
        raise WriteError(f"cannot write {path}: {exc}") from exc


def _check_parses(source: bytes, path: str) -> None:
    try:
        parse_source(source, path)
    except GoParseError as exc:
        raise PatchError(f"rewritten source no longer parses: {exc}") from exc


# ================== Pure transform ==================
def patch_source(
    source: bytes,
    pattern: CallPattern = DEFAULT_PATTERN,
    rule: RewriteRule = DEFAULT_RULE,
    path: str = "<source>",
) -> Tuple[bytes, List[Match]]:
    """
    Rewrite every call accepted by `pattern` in `source`.

    Returns:
        (patched_source, matches). With no matches the source comes back
        unchanged.

    Raises:
        GoParseError if `source` does not parse.
        PatchError   if the rewritten buffer does not parse.
    """
    tree = parse_source(source, path)
    matches = find_matches(tree, pattern)
    if not matches:
        return source, matches

    edits = build_edits(matches, rule)
    edits.extend(add_import_edits(tree, rule.required_import))
    patched = apply_edits(source, edits)
    _check_parses(patched, path)
    return patched, matches


def substitute_imports(
    source: bytes,
    rewrites: Dict[str, str],
    path: str = "<source>",
) -> Tuple[bytes, int]:
    """Replace import paths per `rewrites` (old -> new); returns (source, count)."""
    tree = parse_source(source, path)
    edits = []
    for old, new in rewrites.items():
        edits.extend(rewrite_import_edits(tree, old, new))
    if not edits:
        return source, 0
    patched = apply_edits(source, edits)
    _check_parses(patched, path)
    return patched, len(edits)


# ================== File operations ==================
def apply_patch(
    source_file: PathLike,
    pattern: CallPattern = DEFAULT_PATTERN,
    rule: RewriteRule = DEFAULT_RULE,
) -> PatchResult:
    """
    Patch `source_file` in place and return what was done.

    Zero matches is not an error: the file is only reformatted and a warning
    is logged, since it usually means upstream changed shape.

    Raises:
        GoParseError if the file does not parse.
        PatchError   if the rewrite breaks the file or gofmt is unavailable
                     or rejects it; the file is left untouched.
        WriteError   if the result cannot be written back.
    """
    path = Path(source_file)
    source = _read(path)

    patched, matches = patch_source(source, pattern, rule, str(path))
    if matches:
        logger.info(
            "%s: rewrote %d %s.%s call(s) at lines %s",
            path.name, len(matches), pattern.receiver_type, pattern.member,
            ", ".join(str(m.line) for m in matches),
        )
    else:
        logger.warning(
            "%s: no %s(...) calls on *%s found; file only reformatted",
            path, pattern.member, pattern.receiver_type,
        )

    rendered = format_source(patched, str(path))
    _write(path, rendered)
    return PatchResult(path=path, matches=matches, changed=rendered != source)


def rewrite_imports(source_file: PathLike, rewrites: Dict[str, str] = IMPORT_REWRITES) -> int:
    """Apply import path substitutions to `source_file` in place; returns the count."""
    path = Path(source_file)
    source = _read(path)

    patched, count = substitute_imports(source, rewrites, str(path))
    rendered = format_source(patched, str(path))
    _write(path, rendered)
    logger.info("%s: rewrote %d import path(s)", path.name, count)
    return count


def rewrite_import(source_file: PathLike, old: str, new: str) -> int:
    return rewrite_imports(source_file, {old: new})


def patch_tree(directory: PathLike) -> Dict[str, object]:
    """
    Run both patch steps on an extracted version directory.

    The companion import rewrite is skipped when its file is absent.
    """
    directory = Path(directory)
    result = apply_patch(directory / TARGET_FILE)

    imports = 0
    import_file = directory / IMPORT_FILE
    if import_file.exists():
        imports = rewrite_imports(import_file)
    else:
        logger.info("%s not present in %s; skipping import rewrite", IMPORT_FILE, directory)

    return {"patch": result.to_dict(), "imports": imports}


__all__ = [
    "DEFAULT_PATTERN",
    "DEFAULT_RULE",
    "patch_source",
    "substitute_imports",
    "apply_patch",
    "rewrite_imports",
    "rewrite_import",
    "patch_tree",
]
