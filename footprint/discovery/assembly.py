# -*- coding: utf-8 -*-
"""
footprint/discovery/assembly.py
Managed assembly metadata reading and assembly reference resolution.

Interop declarations are read straight from the CLI metadata tables:
every ImplMap row binds a method to an entry point in a ModuleRef, and the
ModuleRef name is the module name as written in the DllImport attribute.
"""

import hashlib
import logging
import os
from typing import Dict, List, Optional, Sequence

import dnfile
import pefile

from footprint.core.exceptions import AssemblyLoadError, AssemblyResolutionError
from .constants import MANAGED_EXTENSIONS, NEUTRAL_CULTURE
from .interfaces import AssemblyReader
from .models import AssemblyIdentity, AssemblyMetadata

logger = logging.getLogger(__name__)


def _text(item) -> str:
    """String heap value of a metadata column."""
    if item is None:
        return ""
    value = getattr(item, 'value', item)
    return value if isinstance(value, str) else str(value)


def _blob(item) -> bytes:
    """Blob heap value of a metadata column."""
    if item is None:
        return b""
    value = getattr(item, 'value', item)
    return bytes(value) if value else b""


def public_key_token(blob: bytes) -> str:
    """Public key token as lowercase hex.

    An 8-byte blob already is a token; a full key is reduced to the last
    8 bytes of its SHA-1 digest, reversed.
    """
    if not blob:
        return ""
    if len(blob) == 8:
        return blob.hex()
    return hashlib.sha1(blob).digest()[-8:][::-1].hex()


def _identity_from_row(row) -> AssemblyIdentity:
    """Identity of an Assembly or AssemblyRef row.

    Both tables name the key column PublicKey; an AssemblyRef usually holds
    the 8-byte token there, an Assembly row the full key.
    """
    version = "{}.{}.{}.{}".format(
        row.MajorVersion, row.MinorVersion, row.BuildNumber, row.RevisionNumber
    )
    culture = _text(row.Culture)
    if culture == NEUTRAL_CULTURE:
        culture = ""
    return AssemblyIdentity(
        name=_text(row.Name),
        version=version,
        culture=culture,
        public_key_token=public_key_token(_blob(row.PublicKey)),
    )


def _rows(table) -> list:
    if table is None:
        return []
    return list(table.rows)


class DnfileAssemblyReader(AssemblyReader):
    """Read assembly metadata with dnfile."""

    def __init__(self):
        self._cache: Dict[str, AssemblyMetadata] = {}

    def is_managed(self, path: str) -> bool:
        try:
            self.read(path)
        except AssemblyLoadError:
            return False
        return True

    def read(self, path: str) -> AssemblyMetadata:
        if path in self._cache:
            return self._cache[path]

        try:
            pe = dnfile.dnPE(path)
        except (pefile.PEFormatError, OSError, ValueError) as e:
            raise AssemblyLoadError(f"Not a PE image: {path} ({e})", file_path=path)

        try:
            metadata = self._read_metadata(pe, path)
        finally:
            pe.close()

        self._cache[path] = metadata
        return metadata

    def _read_metadata(self, pe: dnfile.dnPE, path: str) -> AssemblyMetadata:
        net = getattr(pe, 'net', None)
        if net is None or net.mdtables is None:
            raise AssemblyLoadError(f"No CLI metadata in {path}", file_path=path)

        tables = net.mdtables
        assembly_rows = _rows(tables.Assembly)
        if not assembly_rows:
            raise AssemblyLoadError(f"No assembly manifest in {path}", file_path=path)

        identity = _identity_from_row(assembly_rows[0])
        references = [
            _identity_from_row(row)
            for row in _rows(tables.AssemblyRef)
        ]

        return AssemblyMetadata(
            identity=identity,
            location=path,
            pinvoke_modules=self._pinvoke_modules(tables),
            references=references,
        )

    @staticmethod
    def _pinvoke_modules(tables) -> List[str]:
        """Distinct module names bound by P/Invoke methods, in declaration order."""
        modules = []
        for impl_map in _rows(tables.ImplMap):
            member_table = getattr(impl_map.MemberForwarded, 'table', None)
            if member_table is not None and member_table.name != 'MethodDef':
                continue

            scope = impl_map.ImportScope.row if impl_map.ImportScope is not None else None
            if scope is None:
                continue

            module = _text(scope.Name)
            if module and module not in modules:
                modules.append(module)
        return modules


class AssemblyResolver:
    """
    Locate a referenced assembly identity on disk.

    Probing order: the referencing assembly's directory, the managed path
    list, the global assembly cache, then the framework directories.
    """

    def __init__(self, probe_dirs: Sequence[str] = (), gac_dir: Optional[str] = None,
                 framework_dirs: Sequence[str] = ()):
        self.probe_dirs = [d for d in probe_dirs if d]
        self.gac_dir = gac_dir
        self.framework_dirs = list(framework_dirs)

    def candidates(self, identity: AssemblyIdentity,
                   requesting_path: Optional[str] = None) -> List[str]:
        """Every path probed for identity, in order."""
        directories = []
        if requesting_path:
            directories.append(os.path.dirname(os.path.abspath(requesting_path)))
        directories.extend(self.probe_dirs)

        paths = []
        for directory in directories:
            paths.extend(os.path.join(directory, identity.name + ext) for ext in MANAGED_EXTENSIONS)

        if self.gac_dir and identity.public_key_token:
            version_dir = f"{identity.version}_{identity.culture}_{identity.public_key_token}"
            paths.append(os.path.join(self.gac_dir, identity.name, version_dir, identity.name + '.dll'))

        for directory in self.framework_dirs:
            paths.extend(os.path.join(directory, identity.name + ext) for ext in MANAGED_EXTENSIONS)

        return paths

    def resolve(self, identity: AssemblyIdentity, requesting_path: Optional[str] = None) -> str:
        """
        Returns:
            Absolute path of the first existing candidate

        Raises:
            AssemblyResolutionError: If no candidate exists
        """
        for path in self.candidates(identity, requesting_path):
            if os.path.isfile(path):
                logger.debug(f"Resolved {identity.full_name} -> {path}")
                return os.path.abspath(path)

        raise AssemblyResolutionError(
            f"Could not load assembly '{identity.full_name}'",
            identity=identity.full_name,
            requested_by=requesting_path,
        )
