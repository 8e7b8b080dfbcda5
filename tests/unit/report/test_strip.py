"""Tests for report/strip.py."""

import os
import subprocess
from pathlib import Path
from types import SimpleNamespace

import pytest

from footprint.report.strip import BinaryStripper
from tests.factories import make_file


def fake_strip(stripped_size: int):
    """subprocess.run replacement writing a stripped copy of stripped_size bytes."""
    calls = []

    def run(cmd, **kwargs):
        calls.append(cmd)
        Path(cmd[-1]).write_bytes(b"\0" * stripped_size)
        return SimpleNamespace(returncode=0, stdout="", stderr="")

    run.calls = calls
    return run


class TestBinaryStripper:
    """Tests for BinaryStripper."""

    def test_strips_into_output_dir(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        lib = make_file(tmp_path / "libfoo.so", 1000)
        run = fake_strip(400)
        monkeypatch.setattr(subprocess, "run", run)

        stripper = BinaryStripper("strip", output_dir=str(tmp_path / "out"))
        os.makedirs(stripper.output_dir)
        out = stripper.strip(lib)

        assert out == str(tmp_path / "out" / "libfoo.so")
        assert os.path.getsize(out) == 400
        assert os.path.getsize(lib) == 1000
        assert run.calls == [["strip", "-g", lib, "-o", out]]

    def test_failure_measures_original(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        script = make_file(tmp_path / "script.sh", 10)
        monkeypatch.setattr(subprocess, "run", lambda cmd, **kw: SimpleNamespace(
            returncode=1, stdout="", stderr="file format not recognized"))

        with BinaryStripper() as stripper:
            assert stripper.strip(script) == script

    def test_missing_tool(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        lib = make_file(tmp_path / "libfoo.so", 10)

        def run(cmd, **kwargs):
            raise FileNotFoundError(cmd[0])

        monkeypatch.setattr(subprocess, "run", run)
        with BinaryStripper("no-such-strip") as stripper:
            assert stripper.strip(lib) == lib

    def test_owned_directory_removed(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        lib = make_file(tmp_path / "libfoo.so", 10)
        monkeypatch.setattr(subprocess, "run", fake_strip(5))

        with BinaryStripper() as stripper:
            out = stripper.strip(lib)
            scratch = stripper.output_dir
            assert os.path.isfile(out)
        assert not os.path.exists(scratch)

    def test_given_directory_kept(self, tmp_path: Path) -> None:
        out_dir = tmp_path / "keep"
        out_dir.mkdir()
        with BinaryStripper(output_dir=str(out_dir)):
            pass
        assert out_dir.is_dir()
