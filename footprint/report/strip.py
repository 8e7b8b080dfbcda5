# -*- coding: utf-8 -*-
"""
footprint/report/strip.py
Debug-symbol stripping of native binaries, for size measurement only.

The inspected binaries are never modified: ``strip -g`` writes a copy into
a scratch directory that is removed when the stripper is closed.
"""

import logging
import os
import shutil
import subprocess
import tempfile
from typing import Optional

logger = logging.getLogger(__name__)


class BinaryStripper:
    """
    Produces stripped copies of native files.

    Usage:
        with BinaryStripper() as stripper:
            size = os.path.getsize(stripper.strip("/usr/lib/libfoo.so"))
    """

    def __init__(self, command: str = "strip", output_dir: Optional[str] = None):
        self.command = command
        self._output_dir = output_dir
        self._owns_dir = output_dir is None
        self._warned = False

    @property
    def output_dir(self) -> str:
        if self._output_dir is None:
            self._output_dir = tempfile.mkdtemp(prefix="footprint-strip-")
        return self._output_dir

    def strip(self, path: str) -> str:
        """
        Strip debug symbols from a copy of path.

        Returns:
            Path of the stripped copy, or path itself if stripping failed
        """
        out_path = os.path.join(self.output_dir, os.path.basename(path))
        try:
            result = subprocess.run(
                [self.command, "-g", path, "-o", out_path],
                capture_output=True, text=True, errors='replace'
            )
        except OSError as e:
            if not self._warned:
                logger.warning(f"Cannot run {self.command}: {e}; reporting unstripped sizes")
                self._warned = True
            return path

        if result.returncode != 0:
            logger.debug(f"{self.command} failed on {path}: {result.stderr.strip()}")
            return path
        return out_path

    def close(self) -> None:
        if self._owns_dir and self._output_dir is not None:
            shutil.rmtree(self._output_dir, ignore_errors=True)
            self._output_dir = None

    def __enter__(self) -> 'BinaryStripper':
        return self

    def __exit__(self, *args) -> None:
        self.close()
