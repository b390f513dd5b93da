import pytest

import main as cli
from Catalog.config import TAGS_URL
from Common import DiscoveryError, ReleaseIdentifier
from Fetcher import archive_url
from Fetcher.config import ARCHIVE_FILENAME
from Pipeline import pipeline_main, process_version

from conftest import BROKEN_GO, FakeResponse, FakeSession, go_source_archive


@pytest.fixture(autouse=True)
def gofmt(passthrough_gofmt):
    return passthrough_gofmt


@pytest.fixture
def releases_session():
    """Serves archives for go1.21 and go1.20; go1.19 is unpatchable, go1.18 missing."""
    return FakeSession({
        archive_url("go1.21"): FakeResponse(content=go_source_archive()),
        archive_url("go1.20"): FakeResponse(content=go_source_archive()),
        archive_url("go1.19"): FakeResponse(content=go_source_archive(encode_go=BROKEN_GO)),
    })


# --- Single version ---


def test_process_version_produces_patched_tree(tmp_path, releases_session):
    state = process_version(ReleaseIdentifier("go1.21"), tmp_path, session=releases_session)

    target = tmp_path / "1.21"
    assert state["target_dir"] == str(target)
    assert state["extraction"]["files"] == 4
    assert len(state["patch_result"]["matches"]) == 2
    assert state["import_count"] == 1

    encode = (target / "encode.go").read_text(encoding="utf-8")
    assert encode.count("e.WriteString(fmt.Sprintf(") == 2
    assert (target / "internal" / "testenv" / "testenv.go").exists()
    assert '"testenv"' in (target / "bench_test.go").read_text(encoding="utf-8")
    assert not (target / ARCHIVE_FILENAME).exists()


def test_process_version_recreates_directory(tmp_path, releases_session):
    stale = tmp_path / "1.21" / "stale.go"
    stale.parent.mkdir()
    stale.write_text("package stale\n")

    process_version(ReleaseIdentifier("go1.21"), tmp_path, session=releases_session)

    assert not stale.exists()


# --- Whole run ---


def test_pipeline_isolates_failing_versions(tmp_path, releases_session):
    report = pipeline_main(
        versions=["go1.21", "go1.2", "go1.22rc1", "go1.20", "go1.19", "go1.18"],
        output_dir=tmp_path,
        session=releases_session,
    )

    assert report.succeeded == ["go1.21", "go1.20"]
    assert set(report.failed) == {"go1.19", "go1.18"}
    assert report.total == 4
    # the unpatched tree of a parse failure stays on disk
    assert (tmp_path / "1.19" / "encode.go").read_text(encoding="utf-8") == BROKEN_GO
    assert not (tmp_path / "1.2").exists()


def test_pipeline_discovers_versions(tmp_path, releases_session):
    releases_session.routes[TAGS_URL] = lambda params: FakeResponse(
        payload=[{"name": "go1.21", "commit": {}}] if params["page"] == 1 else []
    )

    report = pipeline_main(output_dir=tmp_path, token="", session=releases_session)

    assert report.succeeded == ["go1.21"]


def test_pipeline_discovery_failure_is_fatal(tmp_path):
    session = FakeSession({TAGS_URL: FakeResponse(status_code=500, content=b"boom")})

    with pytest.raises(DiscoveryError):
        pipeline_main(output_dir=tmp_path, token="", session=session)


# --- CLI ---


def test_main_exit_status_on_discovery_failure(monkeypatch, tmp_path):
    def _fail(**kwargs):
        raise DiscoveryError("registry unreachable")

    monkeypatch.setattr(cli, "pipeline_main", _fail)
    assert cli.main(["--output-dir", str(tmp_path)]) == 1


def test_main_exit_status_with_failed_versions(monkeypatch, tmp_path):
    from Pipeline import RunReport

    monkeypatch.setattr(
        cli, "pipeline_main",
        lambda **kwargs: RunReport(succeeded=["go1.21"], failed={"go1.20": "HTTP 404"}),
    )
    assert cli.main(["--versions", "go1.21", "go1.20"]) == 0


def test_main_patch_only(tmp_path):
    (tmp_path / "encode.go").write_text(BROKEN_GO, encoding="utf-8")
    assert cli.main(["--patch-only", str(tmp_path)]) == 1


def test_main_stops_without_gofmt(monkeypatch, tmp_path, missing_gofmt):
    def _unreachable(**kwargs):
        raise AssertionError("no version may be processed without gofmt")

    monkeypatch.setattr(cli, "pipeline_main", _unreachable)
    assert cli.main(["--output-dir", str(tmp_path)]) == 1


def test_pipeline_fails_versions_without_gofmt(tmp_path, releases_session, missing_gofmt):
    report = pipeline_main(versions=["go1.21"], output_dir=tmp_path, session=releases_session)

    assert report.succeeded == []
    assert "gofmt not found" in report.failed["go1.21"]
