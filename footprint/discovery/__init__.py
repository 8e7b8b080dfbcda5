# -*- coding: utf-8 -*-
"""
footprint/discovery - Dependency discovery engine

Core functionality:
- SearchPathResolver: dynamic linker search path
- DllMapResolver: P/Invoke module name to native library
- LinkGraphWalker: native dependency closure via ldd
- DnfileAssemblyReader / AssemblyResolver / AssemblyLoader: managed closure
- FileSystemWalker: input root classification
- DiscoveryEngine: one discovery run
"""

# Constants
from .constants import (
    MANAGED_EXTENSIONS, DEBUG_EXTENSIONS, IGNORED_EXTENSIONS,
    NATIVE_NAME_PATTERNS, DLLMAP_OS_MATCHES,
)

# Data models
from .models import (
    FileCategory,
    AssemblyIdentity,
    AssemblyMetadata,
    AssemblyRecord,
    InspectionResult,
    ClassifiedFiles,
)

# Interfaces
from .interfaces import (
    AssemblyReader,
    LinkInspector,
)

# Search path and library map
from .search_paths import SearchPathResolver
from .dllmap import DllMapEntry, DllMapResolver, parse_dllmap

# Native link graph
from .linker import (
    LddInspector,
    LinkGraphWalker,
    parse_ldd_line,
    parse_ldd_output,
)

# Managed assemblies
from .assembly import DnfileAssemblyReader, AssemblyResolver, public_key_token
from .loader import AssemblyLoader

# Walkers
from .walker import FileSystemWalker
from .engine import DiscoveryContext, DiscoveryEngine, discover

__all__ = [
    # Constants
    'MANAGED_EXTENSIONS', 'DEBUG_EXTENSIONS', 'IGNORED_EXTENSIONS',
    'NATIVE_NAME_PATTERNS', 'DLLMAP_OS_MATCHES',
    # Models
    'FileCategory', 'AssemblyIdentity', 'AssemblyMetadata', 'AssemblyRecord',
    'InspectionResult', 'ClassifiedFiles',
    # Interfaces
    'AssemblyReader', 'LinkInspector',
    # Resolvers
    'SearchPathResolver',
    'DllMapEntry', 'DllMapResolver', 'parse_dllmap',
    # Link graph
    'LddInspector', 'LinkGraphWalker', 'parse_ldd_line', 'parse_ldd_output',
    # Assemblies
    'DnfileAssemblyReader', 'AssemblyResolver', 'public_key_token', 'AssemblyLoader',
    # Engine
    'FileSystemWalker', 'DiscoveryContext', 'DiscoveryEngine', 'discover',
]
