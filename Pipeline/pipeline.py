# Pipeline/pipeline.py
"""
Run orchestration for the fjson generator.

Discovery runs once; every retained release then goes through the same
LangGraph workflow:

    prepare -> fetch -> patch -> imports

Each node receives the version's target directory through the state; the
process working directory is never changed. A failing version is logged and
skipped. Only a discovery failure aborts the run.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, TypedDict, Union

from langgraph.graph import StateGraph, END, START

# local imports
from . import logger
from .config import DEFAULT_OUTPUT_DIR, TOOL_VERSION
from Catalog import filter_releases, list_releases
from Common import GenerationError, ReleaseIdentifier
from Fetcher import fetch_and_extract
from Patcher import apply_patch, rewrite_imports
from Patcher.config import TARGET_FILE, IMPORT_FILE


class VersionState(TypedDict, total=False):
    release: ReleaseIdentifier
    output_dir: str
    target_dir: Optional[str]             # ex: <output_dir>/1.21
    extraction: Optional[Dict[str, int]]
    patch_result: Optional[Dict[str, Any]]
    import_count: Optional[int]


@dataclass
class RunReport:
    """Per-version outcome of one run."""
    succeeded: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)


def _build_workflow(session: Any = None) -> Any:
    def _fetch(state: VersionState) -> VersionState:
        return _fetch_node(state, session)

    graph = StateGraph(VersionState)
    graph.add_node("prepare", _prepare_node)
    graph.add_node("fetch", _fetch)
    graph.add_node("patch", _patch_node)
    graph.add_node("imports", _imports_node)

    # linear edges
    graph.add_edge(START, "prepare")
    graph.add_edge("prepare", "fetch")
    graph.add_edge("fetch", "patch")
    graph.add_edge("patch", "imports")
    graph.add_edge("imports", END)

    workflow = graph.compile()
    return workflow


# ================== Nodes ==================
def _prepare_node(state: VersionState) -> VersionState:
    release = state["release"]
    target = Path(state["output_dir"]) / release.number
    logger.debug(f"Node - prepare {target}")

    # Each version directory is recreated from scratch.
    if target.exists():
        shutil.rmtree(target)
    target.mkdir(parents=True)

    state["target_dir"] = str(target)
    return state


def _fetch_node(state: VersionState, session: Any = None) -> VersionState:
    logger.debug(f"Node - fetch {state['release']}")

    summary = fetch_and_extract(state["release"], Path(state["target_dir"]), session=session)
    state["extraction"] = {"files": summary.files, "directories": summary.directories}
    return state


def _patch_node(state: VersionState) -> VersionState:
    logger.debug(f"Node - patch {TARGET_FILE}")

    result = apply_patch(Path(state["target_dir"]) / TARGET_FILE)
    state["patch_result"] = result.to_dict()
    return state


def _imports_node(state: VersionState) -> VersionState:
    logger.debug(f"Node - imports {IMPORT_FILE}")

    import_file = Path(state["target_dir"]) / IMPORT_FILE
    if not import_file.exists():
        logger.info(f"{IMPORT_FILE} missing for {state['release']}; import rewrite skipped")
        state["import_count"] = 0
        return state

    state["import_count"] = rewrite_imports(import_file)
    return state


# ================== Run ==================
def process_version(
    release: ReleaseIdentifier,
    output_dir: Union[str, Path] = DEFAULT_OUTPUT_DIR,
    session: Any = None,
    workflow: Any = None,
) -> VersionState:
    """Run the whole per-version workflow for one release; errors propagate."""
    if workflow is None:
        workflow = _build_workflow(session)
    initial_state: VersionState = {
        "release": release,
        "output_dir": str(output_dir),
    }
    return workflow.invoke(initial_state)


def pipeline_main(
    versions: Optional[Sequence[str]] = None,
    output_dir: Union[str, Path] = DEFAULT_OUTPUT_DIR,
    token: Optional[str] = None,
    session: Any = None,
) -> RunReport:
    """
    Generate every retained version under `output_dir`.

    Args:
        versions: explicit tags to process instead of discovering them;
                  still subject to the release-shape filter and the denylist.
        token:    bearer token for the tag registry.
        session:  requests-compatible session shared by all HTTP calls.

    Raises:
        DiscoveryError when the release list cannot be retrieved.
    """
    logger.info(f"generate... ({TOOL_VERSION})")

    if versions is None:
        releases = list_releases(token=token, session=session)
    else:
        releases = filter_releases(versions)

    workflow = _build_workflow(session)
    report = RunReport()

    for idx, release in enumerate(releases, start=1):
        logger.info(f"{idx}/{len(releases)} - {release}")
        try:
            final_state = process_version(release, output_dir, workflow=workflow)
        except (GenerationError, OSError) as exc:
            logger.error(f"generate failed - {release}: {exc}")
            report.failed[release.tag] = str(exc)
            continue

        patch = final_state.get("patch_result") or {}
        logger.info(
            f"{release} done - {len(patch.get('matches', []))} call(s) rewritten, "
            f"{final_state.get('import_count', 0)} import(s) rewritten"
        )
        report.succeeded.append(release.tag)

    logger.info(f"generated {len(report.succeeded)}/{report.total} versions")
    return report


__all__ = [
    "VersionState",
    "RunReport",
    "process_version",
    "pipeline_main",
]
