"""Tests for discovery/linker.py."""

import shutil
import subprocess
from pathlib import Path
from types import SimpleNamespace

import pytest

from footprint.core.exceptions import MissingNativeLibraryError
from footprint.discovery.linker import LddInspector, LinkGraphWalker, parse_ldd_line, parse_ldd_output
from footprint.discovery.models import ClassifiedFiles, FileCategory
from tests.factories import FakeInspector, ldd_output, make_file


class TestParseLddLine:
    """Tests for parse_ldd_line."""

    @pytest.mark.parametrize("line, expected", [
        ("\tlibm.so.6 => /lib/x86_64-linux-gnu/libm.so.6 (0x00007f1e2a000000)",
         "/lib/x86_64-linux-gnu/libm.so.6"),
        ("\t/lib64/ld-linux-x86-64.so.2 (0x00007f1e2a400000)", "/lib64/ld-linux-x86-64.so.2"),
        ("\tlinux-vdso.so.1 (0x00007ffd5c9f2000)", "linux-vdso.so.1"),
        ("\tlibfoo.so => not found", None),
        ("\tstatically linked", None),
        ("", None),
    ])
    def test_lines(self, line: str, expected: str) -> None:
        assert parse_ldd_line(line) == expected

    def test_output_order(self) -> None:
        output = ldd_output("/lib/libb.so", "/lib/liba.so")
        assert parse_ldd_output(output) == ["linux-vdso.so.1", "/lib/libb.so", "/lib/liba.so"]


class TestLddInspector:
    """Tests for LddInspector over subprocess.run."""

    def test_success(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls = []

        def fake_run(cmd, **kwargs):
            calls.append(cmd)
            return SimpleNamespace(returncode=0, stdout="\tlibc.so.6 => /lib/libc.so.6 (0x1)\n", stderr="")

        monkeypatch.setattr(subprocess, "run", fake_run)
        result = LddInspector("ldd").inspect("/usr/bin/app")
        assert calls == [["ldd", "/usr/bin/app"]]
        assert result.ok
        assert "/lib/libc.so.6" in result.stdout

    def test_rejected_file(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(subprocess, "run", lambda cmd, **kw: SimpleNamespace(
            returncode=1, stdout="", stderr="not a dynamic executable"))
        assert not LddInspector().inspect("/etc/passwd").ok

    def test_missing_tool(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def fake_run(cmd, **kwargs):
            raise FileNotFoundError(cmd[0])

        monkeypatch.setattr(subprocess, "run", fake_run)
        result = LddInspector("no-such-ldd").inspect("/usr/bin/app")
        assert result.returncode == 127
        assert not result.ok

    def test_is_available(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(shutil, "which", lambda cmd: "/usr/bin/ldd" if cmd == "ldd" else None)
        assert LddInspector("ldd").is_available()
        assert not LddInspector("no-such-ldd").is_available()


class TestLinkGraphWalker:
    """Tests for LinkGraphWalker."""

    def test_visit_registers_closure(self, tmp_path: Path) -> None:
        app = make_file(tmp_path / "app")
        liba = make_file(tmp_path / "lib" / "liba.so")
        libb = make_file(tmp_path / "lib" / "libb.so")
        files = ClassifiedFiles()
        inspector = FakeInspector({app: [liba], liba: [libb], libb: []})

        assert LinkGraphWalker(files, inspector).visit(app) is True
        assert files.native == [app, liba, libb]

    def test_rejected_file_not_native(self, tmp_path: Path) -> None:
        data = make_file(tmp_path / "data.txt")
        files = ClassifiedFiles()
        assert LinkGraphWalker(files, FakeInspector()).visit(data) is False
        assert data not in files

    def test_each_file_inspected_once(self, tmp_path: Path) -> None:
        a = make_file(tmp_path / "a")
        b = make_file(tmp_path / "b")
        libc = make_file(tmp_path / "libc.so")
        inspector = FakeInspector({a: [libc], b: [libc], libc: []})
        walker = LinkGraphWalker(ClassifiedFiles(), inspector)

        walker.visit(a)
        walker.visit(b)
        walker.visit(a)
        assert sorted(inspector.calls) == sorted([a, b, libc])

    def test_cycle_terminates(self, tmp_path: Path) -> None:
        liba = make_file(tmp_path / "liba.so")
        libb = make_file(tmp_path / "libb.so")
        files = ClassifiedFiles()
        inspector = FakeInspector({liba: [libb], libb: [liba]})

        LinkGraphWalker(files, inspector).visit(liba)
        assert files.native == [liba, libb]
        assert inspector.calls == [liba, libb]

    def test_depth_first_order(self, tmp_path: Path) -> None:
        app = make_file(tmp_path / "app")
        liba = make_file(tmp_path / "liba.so")
        libb = make_file(tmp_path / "libb.so")
        libc = make_file(tmp_path / "libc.so")
        files = ClassifiedFiles()
        inspector = FakeInspector({app: [liba, libc], liba: [libb], libb: [], libc: []})

        LinkGraphWalker(files, inspector).visit(app)
        assert files.native == [app, liba, libb, libc]

    def test_register_walks_dependencies(self, tmp_path: Path) -> None:
        libfoo = make_file(tmp_path / "libfoo.so")
        libbar = make_file(tmp_path / "libbar.so")
        files = ClassifiedFiles()
        inspector = FakeInspector({libfoo: [libbar], libbar: []})

        assert LinkGraphWalker(files, inspector).register(libfoo) is True
        assert files.native == [libfoo, libbar]

    def test_register_rejected_file_stays_native(self, tmp_path: Path) -> None:
        script = make_file(tmp_path / "libscript.so")
        files = ClassifiedFiles()
        LinkGraphWalker(files, FakeInspector()).register(script)
        assert files.native == [script]

    def test_register_twice(self, tmp_path: Path) -> None:
        libfoo = make_file(tmp_path / "libfoo.so")
        files = ClassifiedFiles()
        inspector = FakeInspector({libfoo: []})
        walker = LinkGraphWalker(files, inspector)

        assert walker.register(libfoo) is True
        assert walker.register(libfoo) is False
        assert inspector.calls == [libfoo]

    @pytest.mark.parametrize("path", ["", "libfoo.so", "relative/libfoo.so"])
    def test_register_skips_non_absolute(self, path: str) -> None:
        files = ClassifiedFiles()
        assert LinkGraphWalker(files, FakeInspector()).register(path) is False
        assert len(files) == 0

    def test_register_missing_file(self, tmp_path: Path) -> None:
        walker = LinkGraphWalker(ClassifiedFiles(), FakeInspector())
        with pytest.raises(MissingNativeLibraryError) as exc_info:
            walker.register(str(tmp_path / "libgone.so"))
        assert exc_info.value.file_path == str(tmp_path / "libgone.so")

    def test_missing_dependency_fails(self, tmp_path: Path) -> None:
        app = make_file(tmp_path / "app")
        inspector = FakeInspector({app: [str(tmp_path / "libgone.so")]})
        with pytest.raises(MissingNativeLibraryError):
            LinkGraphWalker(ClassifiedFiles(), inspector).visit(app)

    def test_dependency_already_classified_elsewhere(self, tmp_path: Path) -> None:
        app = make_file(tmp_path / "app")
        blob = make_file(tmp_path / "blob.so")
        files = ClassifiedFiles()
        files.add(FileCategory.MISC, blob)
        inspector = FakeInspector({app: [blob], blob: []})

        LinkGraphWalker(files, inspector).visit(app)
        assert files.category_of(blob) is FileCategory.MISC
        assert files.native == [app]

    def test_shared_visited_set(self, tmp_path: Path) -> None:
        app = make_file(tmp_path / "app")
        visited = {app}
        inspector = FakeInspector({app: []})
        LinkGraphWalker(ClassifiedFiles(), inspector, visited).visit(app)
        assert inspector.calls == []
