"""
The main module for the fjson generator.

Regenerates the patched encoding/json fork for every retained Go release:
discovers release tags, downloads each source archive, extracts the package
and rewrites encode.go so errors are written as quoted strings instead of
panicking.

Children modules:
- Catalog/*:  release discovery
- Fetcher/*:  archive download and filtered extraction
- Patcher/*:  tree-sitter based Go patch engine
- Pipeline/*: per-version LangGraph workflow and run loop
"""
import argparse
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

# config modules read the environment at import time
load_dotenv()

# local imports
from Common import DiscoveryError, GenerationError
from Patcher import patch_tree
from Patcher.utils import resolve_gofmt
from Pipeline import logger as pipeline_logger, pipeline_main
from Pipeline.config import DEFAULT_OUTPUT_DIR, DEFAULT_LOG_LEVEL

logger = logging.getLogger(__name__)


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate the patched encoding/json fork per Go release")
    parser.add_argument(
        "-o",
        "--output-dir",
        default=DEFAULT_OUTPUT_DIR,
        help="Directory receiving one sub-directory per version (default: %(default)s)",
    )
    parser.add_argument(
        "-v",
        "--versions",
        nargs="+",
        metavar="TAG",
        help="Process these release tags (e.g. go1.21) instead of discovering them",
    )
    parser.add_argument(
        "--patch-only",
        metavar="DIR",
        help="Only run the patch steps on an already extracted version directory",
    )
    parser.add_argument(
        "--log-level",
        default=DEFAULT_LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging verbosity (default: %(default)s)",
    )
    return parser.parse_args(argv)


# ====== Execute generator =====
def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)

    logging.basicConfig(level=args.log_level)
    pipeline_logger.setLevel(args.log_level)

    # every written file goes through gofmt; fail before any download
    if resolve_gofmt() is None:
        logger.error("gofmt not found - set $GOFMT or add the Go toolchain to PATH")
        return 1

    if args.patch_only:
        try:
            summary = patch_tree(args.patch_only)
        except GenerationError as exc:
            logger.error(f"patch failed - {exc}")
            return 1
        logger.info(f"patched {args.patch_only}: {summary}")
        return 0

    try:
        report = pipeline_main(versions=args.versions, output_dir=args.output_dir)
    except DiscoveryError as exc:
        logger.error(f"version discovery failed - {exc}")
        return 1

    for tag, reason in report.failed.items():
        logger.warning(f"{tag} failed: {reason}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
