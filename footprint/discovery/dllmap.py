# -*- coding: utf-8 -*-
"""
footprint/discovery/dllmap.py - Library map resolution

Maps a P/Invoke module name to the shared library the runtime would open:
the per-assembly ``<assembly>.config`` and the system-wide configuration may
redirect the name through ``<dllmap dll=".." target=".." os=".."/>``
entries, and the resulting name is looked up in the native search path.
"""

import logging
import os
import xml.etree.ElementTree as ET
from typing import Dict, List, NamedTuple, Optional, Sequence

from footprint.core.exceptions import DllMapError
from .constants import (
    ASSEMBLY_CONFIG_SUFFIX,
    DLLMAP_ELEMENT,
    DLLMAP_OS_MATCHES,
    DLLMAP_ROOT_TAG,
    NATIVE_NAME_PATTERNS,
)

logger = logging.getLogger(__name__)


class DllMapEntry(NamedTuple):
    """One ``dllmap`` element."""
    dll: str
    target: str
    os: str

    def applies_here(self) -> bool:
        return self.os in DLLMAP_OS_MATCHES


def parse_dllmap(config_path: str) -> List[DllMapEntry]:
    """Read every ``/configuration/dllmap`` element of a configuration file, in document order.

    Raises:
        DllMapError: If the file is not well-formed XML.
    """
    try:
        root = ET.parse(config_path).getroot()
    except ET.ParseError as e:
        raise DllMapError(f"Malformed configuration file {config_path}: {e}", config_path=config_path)

    if root.tag != DLLMAP_ROOT_TAG:
        return []

    return [
        DllMapEntry(
            dll=element.get('dll', ''),
            target=element.get('target', ''),
            os=element.get('os', ''),
        )
        for element in root.findall(DLLMAP_ELEMENT)
    ]


class DllMapResolver:
    """Resolves P/Invoke module names to native library paths."""

    def __init__(self, search_paths: Sequence[str],
                 global_config_path: Optional[str] = "/etc/mono/config"):
        """
        Args:
            search_paths: Ordered native search directories
            global_config_path: System-wide library map (None to skip)
        """
        self.search_paths = list(search_paths)
        self.global_config_path = global_config_path
        self._entries: Dict[str, List[DllMapEntry]] = {}

    def _entries_for(self, config_path: str) -> List[DllMapEntry]:
        if config_path not in self._entries:
            self._entries[config_path] = parse_dllmap(config_path)
        return self._entries[config_path]

    def map_name(self, config_path: str, module: str) -> str:
        """Apply one configuration file. The first applicable entry for module wins."""
        for entry in self._entries_for(config_path):
            if entry.dll != module:
                continue
            if entry.applies_here():
                return entry.target
        return module

    def resolve(self, assembly_path: str, module: str) -> str:
        """
        Resolve module through the library maps.

        The per-assembly map is consulted first; the global map only when the
        per-assembly map left the name unchanged.
        """
        resolved = module

        assembly_config = assembly_path + ASSEMBLY_CONFIG_SUFFIX
        if os.path.isfile(assembly_config):
            resolved = self.map_name(assembly_config, module)

        if resolved == module and self.global_config_path and os.path.isfile(self.global_config_path):
            resolved = self.map_name(self.global_config_path, module)

        if resolved != module:
            logger.debug(f"dllmap: {module} -> {resolved} ({os.path.basename(assembly_path)})")
        return resolved

    def candidates(self, module: str) -> List[str]:
        """File names tried in every search directory, in order."""
        return [pattern.format(module) for pattern in NATIVE_NAME_PATTERNS]

    def locate(self, assembly_path: str, module: str) -> Optional[str]:
        """
        Find the native library an assembly's P/Invoke module name refers to.

        Directories form the outer loop and name variants the inner one; the
        first existing file wins.

        Returns:
            Path of the library, or None if no directory has a match
        """
        name = self.resolve(assembly_path, module)
        names = self.candidates(name)

        for directory in self.search_paths:
            for candidate in names:
                full_name = os.path.join(directory, candidate)
                if os.path.isfile(full_name):
                    return full_name

        logger.debug(f"P/Invoke module not found in search path: {name}")
        return None
