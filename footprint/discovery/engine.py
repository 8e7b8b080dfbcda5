# -*- coding: utf-8 -*-
"""
footprint/discovery/engine.py - Dependency discovery engine

One discovery run: resolves the native search path, walks the input roots
and returns a DiscoveryContext holding every classified file, the loaded
assemblies and the set of files the link inspector has seen.

Usage:
    engine = DiscoveryEngine(FootprintConfig())
    context = engine.discover(["/opt/app"])
    print(context.files.native)
"""

import logging
import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Sequence, Set

from footprint.core.config import FootprintConfig
from .assembly import AssemblyResolver, DnfileAssemblyReader
from .dllmap import DllMapResolver
from .interfaces import AssemblyReader, LinkInspector
from .linker import LddInspector, LinkGraphWalker
from .loader import AssemblyLoader
from .models import AssemblyRecord, ClassifiedFiles, FileCategory
from .search_paths import SearchPathResolver
from .walker import FileSystemWalker

logger = logging.getLogger(__name__)


@dataclass
class DiscoveryContext:
    """State of one discovery run."""
    files: ClassifiedFiles = field(default_factory=ClassifiedFiles)
    visited: Set[str] = field(default_factory=set)
    search_paths: List[str] = field(default_factory=list)
    assemblies: List[AssemblyRecord] = field(default_factory=list)

    @property
    def managed_files(self) -> List[str]:
        return self.files.files(FileCategory.MANAGED)

    @property
    def native_files(self) -> List[str]:
        return self.files.files(FileCategory.NATIVE)

    @property
    def debug_files(self) -> List[str]:
        return self.files.files(FileCategory.DEBUG)

    @property
    def misc_files(self) -> List[str]:
        return self.files.files(FileCategory.MISC)


class DiscoveryEngine:
    """Computes the deployment closure of a set of filesystem roots."""

    def __init__(self, config: FootprintConfig = None,
                 reader: AssemblyReader = None,
                 inspector: LinkInspector = None,
                 environ: Mapping[str, str] = None,
                 search_paths: Optional[Sequence[str]] = None):
        """
        Args:
            config: Configuration (defaults to FootprintConfig())
            reader: Assembly metadata reader (defaults to DnfileAssemblyReader)
            inspector: Link inspector (defaults to LddInspector)
            environ: Environment mapping (defaults to os.environ)
            search_paths: Fixed native search path, bypassing environment and ld config
        """
        self.config = config or FootprintConfig()
        self.reader = reader or DnfileAssemblyReader()
        self.inspector = inspector or LddInspector(self.config.ldd_command)
        self.environ = environ if environ is not None else os.environ
        self._search_paths = list(search_paths) if search_paths is not None else None

    def resolve_search_paths(self) -> List[str]:
        if self._search_paths is not None:
            return list(self._search_paths)
        return SearchPathResolver(
            env_var=self.config.search_path_env,
            ld_config_path=self.config.ld_config_path,
            allow_missing_env=self.config.allow_missing_search_path,
            environ=self.environ,
        ).resolve()

    def assembly_resolver(self) -> AssemblyResolver:
        probe = self.environ.get(self.config.assembly_path_env, "")
        return AssemblyResolver(
            probe_dirs=probe.split(os.pathsep) if probe else [],
            gac_dir=self.config.gac_dir,
            framework_dirs=self.config.assembly_dirs,
        )

    def discover(self, roots: Sequence[str]) -> DiscoveryContext:
        """
        Run discovery over roots.

        The runtime binary is walked as one extra root once any assembly has
        been loaded, so the runtime's own native dependencies are captured.
        """
        context = DiscoveryContext()
        context.search_paths = self.resolve_search_paths()

        if not self.inspector.is_available():
            logger.warning(
                f"Link inspector {self.config.ldd_command} not found; "
                f"every unmanaged file will be reported as misc data"
            )

        link_walker = LinkGraphWalker(context.files, self.inspector, context.visited)
        dllmap = DllMapResolver(context.search_paths, self.config.global_dllmap_path)
        loader = AssemblyLoader(context.files, self.reader, self.assembly_resolver(),
                                dllmap, link_walker)
        walker = FileSystemWalker(context.files, loader, link_walker)
        context.assemblies = loader.records

        for root in roots:
            logger.info(f"Walking {root}")
            walker.walk(root)

        runtime = self.config.runtime_binary
        if loader.records and runtime:
            if os.path.exists(runtime):
                walker.walk(runtime)
            else:
                logger.warning(f"Runtime binary not found: {runtime}")

        logger.info(
            f"Discovered {len(context.managed_files)} managed, {len(context.native_files)} native, "
            f"{len(context.debug_files)} debug, {len(context.misc_files)} misc files"
        )
        return context


def discover(roots: Sequence[str], config: FootprintConfig = None) -> DiscoveryContext:
    """Convenience wrapper around DiscoveryEngine.discover."""
    return DiscoveryEngine(config).discover(roots)
