# -*- coding: utf-8 -*-
"""
footprint/report - Manifest aggregation and output
"""

from .blacklist import load_blacklist, is_blacklisted, apply_blacklist
from .strip import BinaryStripper
from .manifest import (
    SECTION_LABELS,
    ManifestEntry,
    ManifestSection,
    Manifest,
    build_manifest,
    render_manifest,
    export_csv,
)

__all__ = [
    'load_blacklist', 'is_blacklisted', 'apply_blacklist',
    'BinaryStripper',
    'SECTION_LABELS', 'ManifestEntry', 'ManifestSection', 'Manifest',
    'build_manifest', 'render_manifest', 'export_csv',
]
