# -*- coding: utf-8 -*-
"""
footprint/core/exceptions.py - Exception hierarchy

FootprintError
├── ConfigError
│   ├── ConfigValidationError
│   ├── ConfigLoadError
│   └── DllMapError
└── DiscoveryError
    ├── SearchPathEnvironmentError
    ├── CyclicIncludeError
    ├── MissingNativeLibraryError
    ├── AssemblyLoadError
    └── AssemblyResolutionError
"""

from typing import Optional, Dict, Any, List


class FootprintError(Exception):
    """
    Base footprint exception

    Carries a message plus a mapping of context values (paths, names) that
    ``format_exception`` prints one per line.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = {k: v for k, v in (details or {}).items() if v is not None}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({context})"


class _PathError(FootprintError):
    """An error about one file; the path is kept as an attribute and a detail."""

    path_attribute = "file_path"

    def __init__(self, message: str, path: Optional[str] = None, **kwargs) -> None:
        super().__init__(message, {self.path_attribute: path, **kwargs})
        setattr(self, self.path_attribute, path)


# =============================================================================
# Configuration
# =============================================================================

class ConfigError(FootprintError):
    """Configuration error"""


class ConfigValidationError(ConfigError):
    """A configuration value is out of range or inconsistent"""

    def __init__(self, message: str, field: str = None, value: Any = None, **kwargs) -> None:
        super().__init__(message, {"field": field, **kwargs})
        self.field = field
        self.value = value


class ConfigLoadError(ConfigError, _PathError):
    """A configuration file is missing, unreadable or not a mapping"""

    path_attribute = "config_path"

    def __init__(self, message: str, config_path: str = None, **kwargs) -> None:
        _PathError.__init__(self, message, config_path, **kwargs)


class DllMapError(ConfigError, _PathError):
    """A library-map configuration file is not well-formed XML"""

    path_attribute = "config_path"

    def __init__(self, message: str, config_path: str = None, **kwargs) -> None:
        _PathError.__init__(self, message, config_path, **kwargs)


# =============================================================================
# Discovery
# =============================================================================

class DiscoveryError(FootprintError):
    """The dependency closure cannot be computed"""


class SearchPathEnvironmentError(DiscoveryError):
    """The library search-path environment variable is not set"""

    def __init__(self, message: str, variable: str = None, **kwargs) -> None:
        super().__init__(message, {"variable": variable, **kwargs})
        self.variable = variable


class CyclicIncludeError(DiscoveryError, _PathError):
    """A linker configuration file includes itself"""

    path_attribute = "config_path"

    def __init__(self, message: str, config_path: str = None,
                 chain: Optional[List[str]] = None, **kwargs) -> None:
        self.chain = list(chain or [])
        _PathError.__init__(self, message, config_path, chain=" -> ".join(self.chain) or None, **kwargs)


class MissingNativeLibraryError(DiscoveryError, _PathError):
    """
    The link inspector reported a dependency at a path that does not exist.

    The filesystem is out of step with what the dynamic linker resolved, so
    the run cannot produce a trustworthy closure.
    """

    def __init__(self, message: str, file_path: str = None, **kwargs) -> None:
        _PathError.__init__(self, message, file_path, **kwargs)


class AssemblyLoadError(DiscoveryError, _PathError):
    """Managed metadata could not be read from a file"""

    def __init__(self, message: str, file_path: str = None, **kwargs) -> None:
        _PathError.__init__(self, message, file_path, **kwargs)


class AssemblyResolutionError(DiscoveryError):
    """A referenced assembly identity could not be located on disk"""

    def __init__(self, message: str, identity: str = None, **kwargs) -> None:
        super().__init__(message, kwargs)
        self.identity = identity


def format_exception(exc: Exception, include_traceback: bool = False) -> str:
    """
    Render an exception for the log.

    Args:
        exc: Exception object
        include_traceback: Append the active stack trace

    Returns:
        ``[ClassName] message`` followed by one indented line per detail
    """
    lines = [f"[{type(exc).__name__}] {getattr(exc, 'message', exc)}"]
    for key, value in getattr(exc, 'details', {}).items():
        lines.append(f"  {key}: {value}")

    if include_traceback:
        import traceback
        lines.append(traceback.format_exc().rstrip())

    return "\n".join(lines)
