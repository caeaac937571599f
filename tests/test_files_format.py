import logging
import os
import stat

import pytest

from resgen.api import render
from resgen.config import RenderConfig
from resgen.errors import E_SINK_IO, SinkError
from resgen.formats.files import safe_child
from resgen.model import Directory, Failure, Leaf


def _files(roots, out_dir):
    render(roots, RenderConfig(format="files", output_dir=out_dir))


def test_reproduces_tree_byte_for_byte(tmp_path):
    out = tmp_path / "out"
    roots = [
        Directory("assets", [Leaf("a.txt", b"hello\n"), Directory("bin", [Leaf("b", bytes(range(256)))])]),
        Leaf("top.json", b"{}"),
    ]
    _files(roots, out)
    assert (out / "assets" / "a.txt").read_bytes() == b"hello\n"
    assert (out / "assets" / "bin" / "b").read_bytes() == bytes(range(256))
    # Sub-formats do not apply to reproduced files.
    assert (out / "top.json").read_bytes() == b"{}"


@pytest.mark.skipif(os.name != "posix", reason="POSIX permissions")
def test_creates_missing_base_directory_with_restricted_mode(tmp_path):
    out = tmp_path / "deep" / "out"
    old = os.umask(0)
    try:
        _files([Directory("d")], out)
    finally:
        os.umask(old)
    assert out.is_dir()
    assert stat.S_IMODE((out / "d").stat().st_mode) == 0o750


def test_existing_directories_are_reused(tmp_path):
    (tmp_path / "d").mkdir()
    (tmp_path / "d" / "keep").write_bytes(b"k")
    _files([Directory("d", [Leaf("new", b"n")])], tmp_path)
    assert (tmp_path / "d" / "keep").read_bytes() == b"k"
    assert (tmp_path / "d" / "new").read_bytes() == b"n"


def test_failures_are_logged_and_skipped(tmp_path, caplog):
    with caplog.at_level(logging.ERROR, logger="resgen"):
        _files([Failure("cannot read x"), Leaf("y", b"1")], tmp_path)
    assert "cannot read x" in caplog.text
    assert (tmp_path / "y").read_bytes() == b"1"


@pytest.mark.parametrize("name", ["", ".", "..", "a/b", "a\\b"])
def test_unsafe_names_are_refused(tmp_path, name):
    with pytest.raises(SinkError) as ei:
        safe_child(tmp_path, name)
    assert ei.value.code == E_SINK_IO


def test_write_errors_become_sink_errors(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_bytes(b"")
    with pytest.raises(SinkError) as ei:
        _files([Leaf("x", b"1")], blocker)
    assert ei.value.code == E_SINK_IO
