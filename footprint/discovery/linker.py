# -*- coding: utf-8 -*-
"""
footprint/discovery/linker.py - Native link graph

Runs the link inspector (``ldd``) on a file, parses the dependency listing
and walks every dependency until the transitive closure is registered in
the native category. Each file is inspected at most once.

ldd output lines look like:
    linux-vdso.so.1 (0x00007ffd...)                       -> virtual, skipped
    libm.so.6 => /lib/x86_64-linux-gnu/libm.so.6 (0x...)  -> /lib/.../libm.so.6
    /lib64/ld-linux-x86-64.so.2 (0x00007f...)             -> /lib64/ld-linux-x86-64.so.2
    libfoo.so => not found                                -> no address, skipped
"""

import logging
import os
import shutil
import subprocess
from typing import Iterator, List, Optional, Set

from footprint.core.exceptions import MissingNativeLibraryError
from .constants import LDD_ADDRESS_MARKER, LDD_MAPPING_MARKER
from .interfaces import LinkInspector
from .models import ClassifiedFiles, FileCategory, InspectionResult

logger = logging.getLogger(__name__)


# =============================================================================
# Link inspector
# =============================================================================

class LddInspector(LinkInspector):
    """List direct and indirect dependencies with the system ``ldd``."""

    def __init__(self, command: str = "ldd"):
        self.command = command
        self._warned = False

    def is_available(self) -> bool:
        return shutil.which(self.command) is not None

    def inspect(self, path: str) -> InspectionResult:
        """Run ``ldd <path>``. A missing tool reads as 'not a linked binary'."""
        logger.debug(f"{self.command} {path}")
        try:
            result = subprocess.run(
                [self.command, path],
                capture_output=True, text=True, errors='replace'
            )
        except OSError as e:
            if not self._warned:
                logger.warning(f"Cannot run {self.command}: {e}; native dependencies will not be found")
                self._warned = True
            return InspectionResult(path=path, returncode=127)

        return InspectionResult(path=path, returncode=result.returncode, stdout=result.stdout)


def parse_ldd_line(line: str) -> Optional[str]:
    """
    Extract the dependency path from one line of ldd output.

    Returns:
        The text before the address, after ``=>`` if present, trimmed; None
        for lines without an address.
    """
    line = line.strip()
    addr = line.find(LDD_ADDRESS_MARKER)
    if addr < 0:
        return None

    line = line[:addr]
    mapping = line.find(LDD_MAPPING_MARKER)
    if mapping > 0:
        line = line[mapping + len(LDD_MAPPING_MARKER):]

    return line.strip()


def parse_ldd_output(output: str) -> List[str]:
    """Dependency entries of a whole ldd report, in output order."""
    entries = []
    for line in output.splitlines():
        entry = parse_ldd_line(line)
        if entry is not None:
            entries.append(entry)
    return entries


# =============================================================================
# Link graph walker
# =============================================================================

class LinkGraphWalker:
    """
    Depth-first walker over the native link graph.

    ``visit`` inspects a file and, when the inspector accepts it, registers it
    as native and walks its dependencies. Dependencies are walked from an
    explicit stack in the order the inspector lists them, each newly
    registered library fully before the next line of its parent.
    """

    def __init__(self, files: ClassifiedFiles, inspector: LinkInspector,
                 visited: Set[str] = None):
        self.files = files
        self.inspector = inspector
        self.visited: Set[str] = visited if visited is not None else set()

    def visit(self, path: str) -> bool:
        """
        Inspect path and walk its dependency closure.

        Returns:
            True if path is a native file, False if the inspector rejected it
        """
        if path in self.visited:
            return self.files.contains(FileCategory.NATIVE, path)

        dependencies = self._expand(path)
        if dependencies is None:
            return False

        stack: List[Iterator[str]] = [iter(dependencies)]
        while stack:
            dependency = next(stack[-1], None)
            if dependency is None:
                stack.pop()
                continue

            if not self._claim(dependency) or dependency in self.visited:
                continue

            children = self._expand(dependency)
            if children:
                stack.append(iter(children))

        return True

    def register(self, path: str) -> bool:
        """
        Register path as a native library and walk its dependencies.

        Returns:
            False for empty or relative paths and for paths already classified

        Raises:
            MissingNativeLibraryError: If path is absolute but does not exist
        """
        if not self._claim(path):
            return False
        self.visit(path)
        return True

    def _claim(self, path: str) -> bool:
        if not path or not os.path.isabs(path):
            return False
        if not os.path.isfile(path):
            raise MissingNativeLibraryError(f"File does not exist: {path}", file_path=path)
        if not self.files.add(FileCategory.NATIVE, path):
            return False

        logger.debug(f"native: {path}")
        return True

    def _expand(self, path: str) -> Optional[List[str]]:
        """Mark path visited and inspect it; None when the inspector rejects it."""
        self.visited.add(path)

        result = self.inspector.inspect(path)
        if not result.ok:
            return None

        self.files.add(FileCategory.NATIVE, path)
        return parse_ldd_output(result.stdout)
