# -*- coding: utf-8 -*-
"""
footprint/discovery/walker.py
Filesystem walker: enumerates the input roots and classifies every file.
"""

import logging
import os

from .constants import DEBUG_EXTENSIONS, IGNORED_EXTENSIONS, MANAGED_EXTENSIONS
from .linker import LinkGraphWalker
from .loader import AssemblyLoader
from .models import ClassifiedFiles, FileCategory

logger = logging.getLogger(__name__)


class FileSystemWalker:
    """Depth-first walk over files and directories."""

    def __init__(self, files: ClassifiedFiles, loader: AssemblyLoader,
                 link_walker: LinkGraphWalker):
        self.files = files
        self.loader = loader
        self.link_walker = link_walker

    def walk(self, root: str) -> None:
        """Walk a root directory, or load a root file directly."""
        if os.path.isdir(root):
            self._walk_dir(root)
        else:
            self.load_file(os.path.abspath(root))

    def _walk_dir(self, directory: str) -> None:
        name = os.path.basename(os.path.normpath(directory))
        if name.startswith('.') and name != '.':
            return

        subdirs = []
        files = []
        with os.scandir(directory) as entries:
            for entry in entries:
                if entry.is_dir():
                    subdirs.append(entry.path)
                elif entry.is_file():
                    files.append(entry.path)

        for subdir in sorted(subdirs):
            self._walk_dir(subdir)

        for path in sorted(files):
            self.load_file(os.path.abspath(path))

    def load_file(self, path: str) -> None:
        """Classify one file by extension."""
        name = os.path.basename(path)
        if name.startswith('.'):
            return

        ext = os.path.splitext(name)[1]

        if ext in MANAGED_EXTENSIONS:
            if self.loader.reader.is_managed(path):
                self.loader.load(path)
                return
            logger.warning(f"{path} is not a managed assembly")
            self._load_native_or_misc(path)
        elif ext in DEBUG_EXTENSIONS:
            self.files.add(FileCategory.DEBUG, path)
        elif ext in IGNORED_EXTENSIONS:
            pass
        else:
            self._load_native_or_misc(path)

    def _load_native_or_misc(self, path: str) -> None:
        if not self.link_walker.visit(path):
            self.files.add(FileCategory.MISC, path)
