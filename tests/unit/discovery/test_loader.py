"""Tests for discovery/loader.py."""

from pathlib import Path

import pytest

from footprint.core.exceptions import AssemblyResolutionError
from footprint.discovery.assembly import AssemblyResolver
from footprint.discovery.dllmap import DllMapResolver
from footprint.discovery.linker import LinkGraphWalker
from footprint.discovery.loader import AssemblyLoader
from footprint.discovery.models import ClassifiedFiles
from tests.factories import FakeAssemblyReader, FakeInspector, make_file, make_identity


class LoaderScenario:
    """An application directory, a native library directory and a loader over them."""

    def __init__(self, root: Path, inspector: FakeInspector = None):
        self.app_dir = root / "app"
        self.lib_dir = root / "lib"
        self.app_dir.mkdir()
        self.lib_dir.mkdir()
        self.files = ClassifiedFiles()
        self.reader = FakeAssemblyReader()
        self.inspector = inspector or FakeInspector()
        self.loader = AssemblyLoader(
            self.files,
            self.reader,
            AssemblyResolver(),
            DllMapResolver([str(self.lib_dir)], global_config_path=None),
            LinkGraphWalker(self.files, self.inspector),
        )

    def assembly(self, name: str, **kwargs) -> str:
        path = make_file(self.app_dir / name)
        self.reader.add(path, **kwargs)
        return path


class TestLoad:
    """Tests for AssemblyLoader.load."""

    def test_single_assembly(self, tmp_path: Path) -> None:
        scenario = LoaderScenario(tmp_path)
        app = scenario.assembly("App.exe")

        record = scenario.loader.load(app)
        assert record.location == app
        assert scenario.files.managed == [app]
        assert scenario.loader.records == [record]

    def test_load_is_idempotent(self, tmp_path: Path) -> None:
        scenario = LoaderScenario(tmp_path)
        app = scenario.assembly("App.exe")

        first = scenario.loader.load(app)
        second = scenario.loader.load(app)
        assert first is second
        assert len(scenario.loader.records) == 1
        assert scenario.reader.reads == [app]

    def test_references_followed(self, tmp_path: Path) -> None:
        scenario = LoaderScenario(tmp_path)
        core = scenario.assembly("Core.dll")
        util = scenario.assembly("Util.dll", references=[make_identity("Core")])
        app = scenario.assembly("App.exe", references=[make_identity("Util"), make_identity("Core")])

        scenario.loader.load(app)
        assert scenario.files.managed == [app, util, core]

    def test_shared_reference_loaded_once(self, tmp_path: Path) -> None:
        scenario = LoaderScenario(tmp_path)
        core = scenario.assembly("Core.dll")
        a = scenario.assembly("A.dll", references=[make_identity("Core")])
        b = scenario.assembly("B.dll", references=[make_identity("Core")])

        scenario.loader.load(a)
        scenario.loader.load(b)
        assert scenario.files.managed == [a, core, b]
        assert scenario.reader.reads.count(core) == 1

    def test_reference_cycle(self, tmp_path: Path) -> None:
        scenario = LoaderScenario(tmp_path)
        a = scenario.assembly("A.dll", references=[make_identity("B")])
        b = scenario.assembly("B.dll", references=[make_identity("A")])

        scenario.loader.load(a)
        assert scenario.files.managed == [a, b]

    def test_same_identity_other_location(self, tmp_path: Path) -> None:
        scenario = LoaderScenario(tmp_path)
        first = scenario.assembly("Lib.dll")
        copy = make_file(tmp_path / "copy" / "Lib.dll")
        scenario.reader.add(copy, name="Lib")

        record = scenario.loader.load(first)
        assert scenario.loader.load(copy) is record
        assert scenario.files.managed == [first]
        assert scenario.loader.find(location=copy) is record

    def test_signed_reference_from_gac_loaded_once(self, tmp_path: Path) -> None:
        scenario = LoaderScenario(tmp_path)
        token = "0738eb9f132ed756"
        gtk = make_file(tmp_path / "gac" / "gtk-sharp" / "2.12.0.0__0738eb9f132ed756" / "gtk-sharp.dll")
        gtk_identity = make_identity("gtk-sharp", "2.12.0.0", token)
        scenario.reader.add(gtk, identity=gtk_identity)
        scenario.loader.resolver = AssemblyResolver(gac_dir=str(tmp_path / "gac"))
        a = scenario.assembly("A.exe", references=[make_identity("gtk-sharp", "2.12.0.0", token)])
        b = scenario.assembly("B.exe", references=[make_identity("gtk-sharp", "2.12.0.0", token)])

        scenario.loader.load(a)
        scenario.loader.load(b)
        assert scenario.files.managed == [a, gtk, b]
        assert scenario.loader.find(identity=gtk_identity).location == gtk
        assert scenario.reader.reads.count(gtk) == 1

    def test_unresolved_reference(self, tmp_path: Path) -> None:
        scenario = LoaderScenario(tmp_path)
        app = scenario.assembly("App.exe", references=[make_identity("Missing")])

        with pytest.raises(AssemblyResolutionError):
            scenario.loader.load(app)


class TestInterop:
    """Tests for P/Invoke module resolution during loading."""

    def test_pinvoke_library_registered_with_dependencies(self, tmp_path: Path) -> None:
        libfoo = str(tmp_path / "lib" / "libfoo.so")
        libbar = str(tmp_path / "lib" / "libbar.so")
        scenario = LoaderScenario(tmp_path, FakeInspector({libfoo: [libbar], libbar: []}))
        make_file(Path(libfoo))
        make_file(Path(libbar))
        app = scenario.assembly("App.exe", pinvoke=["foo"])

        record = scenario.loader.load(app)
        assert record.native_modules == ["foo"]
        assert scenario.files.native == [libfoo, libbar]

    def test_unlocatable_module_ignored(self, tmp_path: Path) -> None:
        scenario = LoaderScenario(tmp_path)
        app = scenario.assembly("App.exe", pinvoke=["__Internal"])

        scenario.loader.load(app)
        assert scenario.files.native == []

    def test_referenced_assembly_interop(self, tmp_path: Path) -> None:
        libsqlite = str(tmp_path / "lib" / "libsqlite3.so")
        scenario = LoaderScenario(tmp_path, FakeInspector({libsqlite: []}))
        make_file(Path(libsqlite))
        scenario.assembly("Data.dll", pinvoke=["sqlite3"])
        app = scenario.assembly("App.exe", references=[make_identity("Data")])

        scenario.loader.load(app)
        assert scenario.files.native == [libsqlite]


class TestFind:
    """Tests for AssemblyLoader.find."""

    def test_by_identity(self, tmp_path: Path) -> None:
        scenario = LoaderScenario(tmp_path)
        app = scenario.assembly("App.exe")
        record = scenario.loader.load(app)
        assert scenario.loader.find(identity=make_identity("App")) is record

    def test_unknown(self, tmp_path: Path) -> None:
        scenario = LoaderScenario(tmp_path)
        assert scenario.loader.find(identity=make_identity("Nope")) is None
