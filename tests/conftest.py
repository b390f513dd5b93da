import io
import json
import shutil
import tarfile

import pytest


# --- Go sources ---

ENCODE_GO = """\
// Copyright 2010 The Go Authors. All rights reserved.

// Package json implements encoding and decoding of JSON.
package json

import (
    "bytes"
    "reflect"
    "strconv"
)

type encodeState struct {
    bytes.Buffer // accumulated output
}

type jsonError struct{ error }

// error aborts the encoding by panicking with err wrapped in jsonError.
func (e *encodeState) error(err error) {
    panic(jsonError{err})
}

func (e *encodeState) marshal(v any) (err error) {
    if v == nil {
        // nil values are rejected
        e.error(&UnsupportedValueError{Str: "nil"})
    }
    return nil
}

type UnsupportedValueError struct {
    Str string
}

func (e *UnsupportedValueError) Error() string {
    return "json: unsupported value: " + e.Str
}

func floatEncoder(e *encodeState, v reflect.Value, bits int) {
    f := v.Float()
    if f != f {
        e.error(&UnsupportedValueError{strconv.FormatFloat(f, 'g', -1, bits)})
    }
    e.WriteString("0")
}
"""

MINIMAL_GO = """\
package json

import "fmt"

type encodeState struct{}

func (e *encodeState) WriteString(s string) (int, error) { return len(s), nil }

func (e *encodeState) error(err error) { panic(err) }

func marshal(e *encodeState, err error) {
    e.error(err)
}

var _ = fmt.Sprint
"""

NO_MATCH_GO = """\
package json

// decodeState has its own error method; it must be left alone.
type decodeState struct{}

func (d *decodeState) error(err error) { panic(err) }

func (d *decodeState) value(err error) {
    d.error(err)
}

func byValue(e encodeState, err error) {
    e.error(err)
}

func shadowed(e *encodeState, err error) {
    {
        e := &decodeState{}
        e.error(err)
    }
}

var global *encodeState

func usesGlobal(err error) {
    global.error(err)
}

func closureShadow(err error) {
    f := func(e *decodeState) { e.error(err) }
    _ = f
}

func undeclared(err error) {
    e.error(err)
}

func selectorReceiver(s struct{ e *encodeState }, err error) {
    s.e.error(err)
}

func noArgument(e *encodeState) {
    e.error()
}
"""

SCOPED_MATCH_GO = """\
package json

import (
    "errors"
    "fmt"
)

type encodeState struct{}

func (e *encodeState) closure(err error) {
    func() {
        e.error(err)
    }()
}

func redeclared(e *encodeState, err error) {
    e, ok := e, true
    _ = ok
    e.error(err)
}

func ifInit(e *encodeState) {
    if err := errors.New("x"); err != nil {
        e.error(err)
    }
}

func shadowEnds(e *encodeState, err error) {
    if true {
        e := 1
        _ = e
    }
    e.error(err)
}

var _ = fmt.Sprint
"""

BENCH_TEST_GO = """\
package json

import (
    "bytes"
    "internal/testenv"
    "testing"
)

func BenchmarkCodeEncoder(b *testing.B) {
    testenv.SkipIfShortAndSlow(b)
    var buf bytes.Buffer
    _ = buf
}
"""

TESTENV_GO = """\
package testenv

import "testing"

func SkipIfShortAndSlow(t testing.TB) {}
"""

BROKEN_GO = """\
package json

func broken( {
"""


@pytest.fixture
def go_file(tmp_path):
    """Writes a Go source under tmp_path and returns its path."""

    def _write(source: str, name: str = "encode.go"):
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return path

    return _write


# --- Archives ---


def make_tar_gz(entries):
    """
    Build an in-memory .tar.gz.

    entries: iterable of (name, kind, data) with kind in {"dir", "file", "symlink"}.
    """
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name, kind, data in entries:
            info = tarfile.TarInfo(name)
            if kind == "dir":
                info.type = tarfile.DIRTYPE
                info.mode = 0o755
                tar.addfile(info)
            elif kind == "symlink":
                info.type = tarfile.SYMTYPE
                info.linkname = data
                tar.addfile(info)
            else:
                payload = data.encode("utf-8") if isinstance(data, str) else data
                info.size = len(payload)
                info.mode = 0o644
                tar.addfile(info, io.BytesIO(payload))
    return buf.getvalue()


def go_source_archive(encode_go=ENCODE_GO):
    """A trimmed-down Go source archive with the entries the fetcher cares about."""
    return make_tar_gz([
        ("go/", "dir", None),
        ("go/src/", "dir", None),
        ("go/src/encoding/json/", "dir", None),
        ("go/src/encoding/json/encode.go", "file", encode_go),
        ("go/src/encoding/json/bench_test.go", "file", BENCH_TEST_GO),
        ("go/src/encoding/json/testdata/", "dir", None),
        ("go/src/encoding/json/testdata/code.json.gz", "file", b"\x1f\x8b"),
        ("go/src/internal/testenv/", "dir", None),
        ("go/src/internal/testenv/testenv.go", "file", TESTENV_GO),
        ("go/src/net/http/server.go", "file", "package http\n"),
    ])


# --- Fake HTTP ---


class FakeResponse:
    def __init__(self, status_code=200, payload=None, content=b""):
        self.status_code = status_code
        self._payload = payload
        self.content = content if payload is None else json.dumps(payload).encode("utf-8")
        self.closed = False

    @property
    def text(self):
        return self.content.decode("utf-8", errors="replace")

    def json(self):
        return json.loads(self.content.decode("utf-8"))

    def iter_content(self, chunk_size=1):
        for i in range(0, len(self.content), chunk_size):
            yield self.content[i : i + chunk_size]

    def close(self):
        self.closed = True


class FakeSession:
    """
    Routes GET requests to canned responses.

    routes: url -> FakeResponse, or url -> callable(params) -> FakeResponse.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []

    def get(self, url, params=None, headers=None, stream=False):
        self.calls.append({"url": url, "params": params, "headers": headers, "stream": stream})
        route = self.routes.get(url)
        if route is None:
            return FakeResponse(status_code=404, content=b"not found")
        if callable(route):
            return route(params or {})
        return route

    def close(self):
        pass


@pytest.fixture
def fake_session():
    return FakeSession()


requires_gofmt = pytest.mark.skipif(shutil.which("gofmt") is None, reason="gofmt not installed")


# --- gofmt stand-ins ---


def _gofmt_script(tmp_path_factory, body):
    script = tmp_path_factory.mktemp("bin") / "gofmt"
    script.write_text("#!/bin/sh\n" + body + "\n")
    script.chmod(0o755)
    return script


@pytest.fixture
def passthrough_gofmt(tmp_path_factory, monkeypatch):
    """A gofmt that echoes its input, so written output is byte-predictable."""
    script = _gofmt_script(tmp_path_factory, "exec cat")
    monkeypatch.setenv("GOFMT", str(script))
    return script


@pytest.fixture
def failing_gofmt(tmp_path_factory, monkeypatch):
    script = _gofmt_script(tmp_path_factory, "echo '<standard input>:1:1: expected package' >&2\nexit 2")
    monkeypatch.setenv("GOFMT", str(script))
    return script


@pytest.fixture
def missing_gofmt(monkeypatch):
    monkeypatch.setenv("GOFMT", "fjson-gen-missing-gofmt")
