# -*- coding: utf-8 -*-
"""
footprint/report/blacklist.py
Blacklist filtering of the final file lists.

A blacklist file holds one file-name prefix per line; blank lines and
lines starting with ``#`` are ignored.
"""

import os
from pathlib import Path
from typing import Iterable, List, Union


def load_blacklist(path: Union[str, Path]) -> List[str]:
    """Read blacklist entries from a file."""
    entries = []
    with open(path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if line and line[0] != '#':
                entries.append(line)
    return entries


def is_blacklisted(path: str, entries: Iterable[str]) -> bool:
    """True if the file name of path starts with any entry."""
    name = os.path.basename(path)
    return any(name.startswith(entry) for entry in entries)


def apply_blacklist(paths: Iterable[str], entries: List[str]) -> List[str]:
    """Drop blacklisted paths, keeping order."""
    if not entries:
        return list(paths)
    return [p for p in paths if not is_blacklisted(p, entries)]
