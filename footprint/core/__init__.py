# -*- coding: utf-8 -*-
"""
footprint/core - Shared infrastructure

Configuration, logging and the exception hierarchy used by every other
footprint module.
"""

from .config import FootprintConfig, load_config
from .exceptions import (
    FootprintError,
    ConfigError,
    ConfigValidationError,
    ConfigLoadError,
    DllMapError,
    DiscoveryError,
    SearchPathEnvironmentError,
    CyclicIncludeError,
    MissingNativeLibraryError,
    AssemblyLoadError,
    AssemblyResolutionError,
    format_exception,
)
from .logging import (
    FootprintLogger,
    get_logger,
    set_level,
    setup_logging,
    setup_logging_from_config,
)

__all__ = [
    # Configuration
    'FootprintConfig', 'load_config',
    # Exceptions
    'FootprintError', 'ConfigError', 'ConfigValidationError', 'ConfigLoadError',
    'DllMapError', 'DiscoveryError', 'SearchPathEnvironmentError',
    'CyclicIncludeError', 'MissingNativeLibraryError', 'AssemblyLoadError',
    'AssemblyResolutionError', 'format_exception',
    # Logging
    'FootprintLogger', 'get_logger', 'set_level', 'setup_logging', 'setup_logging_from_config',
]
