# -*- coding: utf-8 -*-
"""
footprint - Deployment footprint inventory for managed applications

Finds every managed assembly an application loads, every native shared
library those assemblies reach through P/Invoke (transitively, via the
dynamic linker), every debug-symbol file and every other file under the
input roots, and reports per-category disk usage.

Modules:
- core: configuration, logging, exceptions
- discovery: the dependency discovery engine
- report: manifest aggregation, stripping, blacklist filtering
"""

__version__ = "1.0.0"

from .core.config import FootprintConfig, load_config
from .core.exceptions import FootprintError
from .discovery import DiscoveryContext, DiscoveryEngine, FileCategory, discover
from .report import build_manifest, render_manifest

__all__ = [
    'FootprintConfig', 'load_config', 'FootprintError',
    'DiscoveryContext', 'DiscoveryEngine', 'FileCategory', 'discover',
    'build_manifest', 'render_manifest',
]
