# -*- coding: utf-8 -*-
"""
footprint/discovery/models.py
Data models shared by the discovery engine and the report layer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Iterator

from .constants import NEUTRAL_CULTURE, NULL_PUBLIC_KEY_TOKEN


class FileCategory(Enum):
    """Manifest categories, in report order."""
    MANAGED = "managed"
    NATIVE = "native"
    DEBUG = "debug"
    MISC = "misc"


@dataclass(frozen=True)
class AssemblyIdentity:
    """Strong identity of a managed assembly."""
    name: str
    version: str = "0.0.0.0"
    culture: str = ""                  # empty means neutral
    public_key_token: str = ""         # lowercase hex, empty when unsigned

    @property
    def full_name(self) -> str:
        culture = self.culture or NEUTRAL_CULTURE
        token = self.public_key_token or NULL_PUBLIC_KEY_TOKEN
        return f"{self.name}, Version={self.version}, Culture={culture}, PublicKeyToken={token}"

    def __str__(self) -> str:
        return self.full_name


@dataclass
class AssemblyMetadata:
    """What the interop extractor reads out of one assembly file."""
    identity: AssemblyIdentity
    location: str
    pinvoke_modules: List[str] = field(default_factory=list)
    references: List[AssemblyIdentity] = field(default_factory=list)


@dataclass
class AssemblyRecord:
    """A loaded assembly. Created once per distinct assembly, never removed."""
    identity: AssemblyIdentity
    location: str
    native_modules: List[str] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        return self.identity.full_name


@dataclass
class InspectionResult:
    """Outcome of one link-inspector invocation."""
    path: str
    returncode: int
    stdout: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ClassifiedFiles:
    """
    Four disjoint, discovery-ordered lists of absolute paths.

    A path lands in exactly one category the first time it is classified;
    later requests for any category are no-ops.
    """

    def __init__(self):
        self._lists: Dict[FileCategory, List[str]] = {c: [] for c in FileCategory}
        self._index: Dict[str, FileCategory] = {}

    def add(self, category: FileCategory, path: str) -> bool:
        """Append path to category. Returns False if path is already classified."""
        if path in self._index:
            return False
        self._index[path] = category
        self._lists[category].append(path)
        return True

    def contains(self, category: FileCategory, path: str) -> bool:
        return self._index.get(path) is category

    def category_of(self, path: str) -> Optional[FileCategory]:
        return self._index.get(path)

    def files(self, category: FileCategory) -> List[str]:
        return list(self._lists[category])

    def count(self, category: FileCategory) -> int:
        return len(self._lists[category])

    def __contains__(self, path: str) -> bool:
        return path in self._index

    def __len__(self) -> int:
        return len(self._index)

    def __iter__(self) -> Iterator[str]:
        for category in FileCategory:
            yield from self._lists[category]

    @property
    def managed(self) -> List[str]:
        return self.files(FileCategory.MANAGED)

    @property
    def native(self) -> List[str]:
        return self.files(FileCategory.NATIVE)

    @property
    def debug(self) -> List[str]:
        return self.files(FileCategory.DEBUG)

    @property
    def misc(self) -> List[str]:
        return self.files(FileCategory.MISC)


__all__ = [
    'FileCategory',
    'AssemblyIdentity',
    'AssemblyMetadata',
    'AssemblyRecord',
    'InspectionResult',
    'ClassifiedFiles',
]
