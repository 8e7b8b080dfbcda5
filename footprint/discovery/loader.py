# -*- coding: utf-8 -*-
"""
footprint/discovery/loader.py
Assembly loading: records every managed assembly of the closure, resolves
the native modules it P/Invokes into and follows its assembly references.
"""

import logging
import os
from typing import Dict, Iterator, List, Optional, Tuple

from .assembly import AssemblyResolver
from .dllmap import DllMapResolver
from .interfaces import AssemblyReader
from .linker import LinkGraphWalker
from .models import AssemblyIdentity, AssemblyRecord, ClassifiedFiles, FileCategory

logger = logging.getLogger(__name__)


class AssemblyLoader:
    """Loads assemblies once each, by location or by identity."""

    def __init__(self, files: ClassifiedFiles, reader: AssemblyReader,
                 resolver: AssemblyResolver, dllmap: DllMapResolver,
                 link_walker: LinkGraphWalker):
        self.files = files
        self.reader = reader
        self.resolver = resolver
        self.dllmap = dllmap
        self.link_walker = link_walker

        self.records: List[AssemblyRecord] = []
        self._by_location: Dict[str, AssemblyRecord] = {}
        self._by_name: Dict[str, AssemblyRecord] = {}

    def find(self, identity: AssemblyIdentity = None, location: str = None) -> Optional[AssemblyRecord]:
        """Return the loaded record matching identity or location, if any."""
        if location is not None:
            record = self._by_location.get(os.path.abspath(location))
            if record is not None:
                return record
        if identity is not None:
            return self._by_name.get(identity.full_name)
        return None

    def load(self, path: str) -> AssemblyRecord:
        """
        Load the assembly at path and, transitively, everything it references.

        Loading an already loaded location or identity returns the existing
        record without reprocessing it.

        Raises:
            AssemblyLoadError: If a file carries no managed metadata
            AssemblyResolutionError: If a reference cannot be located
        """
        path = os.path.abspath(path)
        existing = self._by_location.get(path)
        if existing is not None:
            return existing

        record, references = self._read(path)

        stack: List[Tuple[str, Iterator[AssemblyIdentity]]] = [(record.location, iter(references))]
        while stack:
            requester, pending = stack[-1]
            identity = next(pending, None)
            if identity is None:
                stack.pop()
                continue

            if identity.full_name in self._by_name:
                continue

            ref_path = self.resolver.resolve(identity, requester)
            if ref_path in self._by_location:
                continue

            child, child_references = self._read(ref_path)
            stack.append((child.location, iter(child_references)))

        return record

    def _read(self, path: str) -> Tuple[AssemblyRecord, List[AssemblyIdentity]]:
        metadata = self.reader.read(path)

        known = self._by_name.get(metadata.identity.full_name)
        if known is not None:
            self._by_location[path] = known
            return known, []

        record = AssemblyRecord(identity=metadata.identity, location=path,
                                native_modules=list(metadata.pinvoke_modules))
        self.records.append(record)
        self._by_location[path] = record
        self._by_name[record.full_name] = record
        self.files.add(FileCategory.MANAGED, path)
        logger.debug(f"assembly: {record.full_name} ({path})")

        for module in record.native_modules:
            library = self.dllmap.locate(path, module)
            if library is not None:
                self.link_walker.register(library)

        return record, metadata.references
