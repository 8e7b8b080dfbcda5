# -*- coding: utf-8 -*-
"""
footprint/discovery/search_paths.py - Dynamic linker search path

Builds the ordered list of directories the dynamic linker would consult:
the colon-delimited environment list first, then every directory named by
the linker configuration file and the files it includes.
"""

import glob
import logging
import os
from typing import List, Mapping, Optional

from footprint.core.exceptions import SearchPathEnvironmentError, CyclicIncludeError
from .constants import LD_CONFIG_INCLUDE

logger = logging.getLogger(__name__)


class SearchPathResolver:
    """Resolves the native library search path."""

    def __init__(self, env_var: str = "LD_LIBRARY_PATH",
                 ld_config_path: Optional[str] = "/etc/ld.so.conf",
                 allow_missing_env: bool = False,
                 environ: Mapping[str, str] = None):
        """
        Args:
            env_var: Environment variable holding the colon-delimited list
            ld_config_path: Root linker configuration file (None to skip)
            allow_missing_env: Treat an unset env_var as an empty list
            environ: Environment mapping (defaults to os.environ)
        """
        self.env_var = env_var
        self.ld_config_path = ld_config_path
        self.allow_missing_env = allow_missing_env
        self._environ = environ if environ is not None else os.environ

    def resolve(self) -> List[str]:
        """Return the full ordered search path."""
        paths = self.from_environment()
        if self.ld_config_path:
            if os.path.isfile(self.ld_config_path):
                paths.extend(self.parse_ld_config(self.ld_config_path))
            else:
                logger.warning(f"Linker configuration not found: {self.ld_config_path}")

        logger.info(f"Native search path has {len(paths)} entries")
        return paths

    def from_environment(self) -> List[str]:
        """Split the environment list. Empty components are kept, as the linker keeps them."""
        value = self._environ.get(self.env_var)
        if value is None:
            if self.allow_missing_env:
                logger.warning(f"${self.env_var} is not set, using an empty list")
                return []
            raise SearchPathEnvironmentError(
                f"Environment variable {self.env_var} is not set",
                variable=self.env_var
            )
        return value.split(':')

    def parse_ld_config(self, config_path: str, _chain: List[str] = None) -> List[str]:
        """
        Parse a linker configuration file.

        Each trimmed line is either ``include <dir>/<glob>``, whose matching
        files are parsed recursively in name order, or a directory to append.
        Text after ``#`` is a comment.

        Raises:
            CyclicIncludeError: If a file includes itself, directly or not.
        """
        chain = list(_chain or [])
        real = os.path.realpath(config_path)
        if real in chain:
            raise CyclicIncludeError(
                f"Cyclic include of {config_path}",
                config_path=config_path,
                chain=chain + [real]
            )
        chain.append(real)

        paths = []
        with open(config_path, 'r', encoding='utf-8', errors='replace') as f:
            for raw in f:
                line = raw.split('#', 1)[0].strip()
                if not line:
                    continue

                if line.startswith(LD_CONFIG_INCLUDE):
                    pattern = line[len(LD_CONFIG_INCLUDE):].strip()
                    for included in self._expand_include(config_path, pattern):
                        paths.extend(self.parse_ld_config(included, chain))
                else:
                    paths.append(line)

        return paths

    @staticmethod
    def _expand_include(config_path: str, pattern: str) -> List[str]:
        """Files matching an include pattern. Relative patterns are anchored at the including file."""
        if not os.path.isabs(pattern):
            pattern = os.path.join(os.path.dirname(os.path.abspath(config_path)), pattern)

        directory, expr = os.path.split(pattern)
        matches = sorted(glob.glob(os.path.join(glob.escape(directory), expr)))
        files = [m for m in matches if os.path.isfile(m)]
        if not files:
            logger.debug(f"Include pattern matched nothing: {pattern}")
        return files
