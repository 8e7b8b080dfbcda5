# -*- coding: utf-8 -*-
"""
footprint/core/config.py - Configuration Management

Centralized management of footprint configuration items.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, List, Tuple
from pathlib import Path
import logging
import os

import yaml

from .exceptions import ConfigLoadError, ConfigValidationError

logger = logging.getLogger(__name__)

# Locations searched for a configuration file when none is given
DEFAULT_CONFIG_FILES = [
    "footprint.yaml",
    ".footprint.yaml",
    os.path.join("~", ".footprint.yaml"),
]

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


@dataclass
class FootprintConfig:
    """footprint configuration"""

    # ==========================================================================
    # Discovery Configuration
    # ==========================================================================

    runtime_binary: Optional[str] = "/usr/bin/mono"   # Extra root walked once any assembly loaded

    # Native library search
    search_path_env: str = "LD_LIBRARY_PATH"          # Colon-delimited directory list
    allow_missing_search_path: bool = False           # Absent variable -> empty list instead of error
    ld_config_path: str = "/etc/ld.so.conf"           # Dynamic linker configuration root
    global_dllmap_path: str = "/etc/mono/config"      # System-wide library map

    # Managed assembly probing
    assembly_path_env: str = "MONO_PATH"
    assembly_dirs: List[str] = field(default_factory=lambda: [
        "/usr/lib/mono/4.5",
        "/usr/lib/mono/4.0",
    ])
    gac_dir: str = "/usr/lib/mono/gac"

    # External tools
    ldd_command: str = "ldd"
    strip_command: str = "strip"

    # ==========================================================================
    # Report Configuration
    # ==========================================================================

    strip_binaries: bool = True                       # Measure native files on a stripped copy
    include_debug: bool = False                       # Keep .mdb files in the manifest
    blacklist_file: Optional[Path] = None

    # ==========================================================================
    # Logging Configuration
    # ==========================================================================

    log_level: str = "INFO"
    log_file: Optional[Path] = None

    def __post_init__(self):
        self._apply_env_overrides()

        if self.blacklist_file is not None and not isinstance(self.blacklist_file, Path):
            self.blacklist_file = Path(self.blacklist_file)
        if self.log_file is not None and not isinstance(self.log_file, Path):
            self.log_file = Path(self.log_file)

    def _apply_env_overrides(self):
        """
        Read configuration overrides from environment variables.

        Environment variable naming rule: FOOTPRINT_<FIELD_NAME>
        Example:
            - FOOTPRINT_RUNTIME_BINARY=/opt/mono/bin/mono
            - FOOTPRINT_STRIP_BINARIES=false
            - FOOTPRINT_ASSEMBLY_DIRS=/opt/mono/lib/mono/4.5:/opt/lib
            - FOOTPRINT_LOG_LEVEL=DEBUG
        """
        overridable = {
            'runtime_binary': self._parse_optional_str,
            'search_path_env': str,
            'allow_missing_search_path': self._parse_bool,
            'ld_config_path': str,
            'global_dllmap_path': str,
            'assembly_path_env': str,
            'assembly_dirs': self._parse_list,
            'gac_dir': str,
            'ldd_command': str,
            'strip_command': str,
            'strip_binaries': self._parse_bool,
            'include_debug': self._parse_bool,
            'blacklist_file': self._parse_path,
            'log_level': str,
            'log_file': self._parse_path,
        }

        for name, converter in overridable.items():
            env_name = f"FOOTPRINT_{name.upper()}"
            env_value = os.environ.get(env_name)
            if env_value is not None:
                try:
                    setattr(self, name, converter(env_value))
                except (ValueError, TypeError):
                    logger.debug(f"Ignoring invalid value for {env_name}: {env_value!r}")

    @staticmethod
    def _parse_bool(value: str) -> bool:
        """Parse boolean environment variables"""
        return value.lower() in ('true', '1', 'yes', 'on')

    @staticmethod
    def _parse_path(value: str) -> Optional[Path]:
        """Parse path environment variables"""
        if not value or value.lower() in ('none', 'null', ''):
            return None
        return Path(value)

    @staticmethod
    def _parse_optional_str(value: str) -> Optional[str]:
        if not value or value.lower() in ('none', 'null'):
            return None
        return value

    @staticmethod
    def _parse_list(value: str) -> List[str]:
        """Parse colon-delimited list environment variables"""
        return [item for item in value.split(':') if item]

    @classmethod
    def from_dict(cls, data: dict) -> 'FootprintConfig':
        """Create configuration from dictionary"""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})

    @classmethod
    def from_yaml(cls, path: str) -> 'FootprintConfig':
        """Load configuration from a YAML file"""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            raise ConfigLoadError(f"Configuration file not found: {path}", config_path=str(path))
        except (OSError, yaml.YAMLError) as e:
            raise ConfigLoadError(f"Cannot load configuration file {path}: {e}", config_path=str(path))

        if data is not None and not isinstance(data, dict):
            raise ConfigLoadError(f"Configuration file {path} must contain a mapping",
                                  config_path=str(path))
        return cls.from_dict(data or {})

    def to_dict(self) -> dict:
        """Convert to complete dictionary"""
        return {
            # Discovery Configuration
            'runtime_binary': self.runtime_binary,
            'search_path_env': self.search_path_env,
            'allow_missing_search_path': self.allow_missing_search_path,
            'ld_config_path': self.ld_config_path,
            'global_dllmap_path': self.global_dllmap_path,
            'assembly_path_env': self.assembly_path_env,
            'assembly_dirs': list(self.assembly_dirs),
            'gac_dir': self.gac_dir,
            'ldd_command': self.ldd_command,
            'strip_command': self.strip_command,
            # Report Configuration
            'strip_binaries': self.strip_binaries,
            'include_debug': self.include_debug,
            'blacklist_file': str(self.blacklist_file) if self.blacklist_file else None,
            # Logging
            'log_level': self.log_level,
            'log_file': str(self.log_file) if self.log_file else None,
        }

    def to_yaml(self, path: str) -> None:
        """Save configuration to a YAML file"""
        with open(path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, allow_unicode=True)

    def _problems(self) -> List[Tuple[str, Any, str]]:
        """(field, value, message) for every invalid setting"""
        problems = []

        if not self.ldd_command:
            problems.append(("ldd_command", self.ldd_command, "ldd_command must not be empty"))
        if self.strip_binaries and not self.strip_command:
            problems.append(("strip_command", self.strip_command,
                             "strip_command must not be empty when strip_binaries is enabled"))
        if not self.search_path_env:
            problems.append(("search_path_env", self.search_path_env,
                             "search_path_env must name an environment variable"))

        if self.blacklist_file is not None and not self.blacklist_file.is_file():
            problems.append(("blacklist_file", self.blacklist_file,
                             f"blacklist_file ({self.blacklist_file}) does not exist"))

        if self.log_level.upper() not in VALID_LOG_LEVELS:
            problems.append(("log_level", self.log_level,
                             f"log_level ({self.log_level}) is invalid, should be one of: {VALID_LOG_LEVELS}"))

        return problems

    def validate(self) -> List[str]:
        """
        Validate the configuration for correctness.

        Returns:
            List of error messages (Empty list if valid)
        """
        return [message for _, _, message in self._problems()]

    def check(self) -> None:
        """
        Raise on an invalid configuration.

        Raises:
            ConfigValidationError: Naming the first invalid field; the message
                lists every problem
        """
        problems = self._problems()
        if problems:
            field_name, value, _ = problems[0]
            raise ConfigValidationError(
                "; ".join(message for _, _, message in problems),
                field=field_name,
                value=value,
            )


def _find_default_config() -> Optional[str]:
    """Return the first existing default configuration file"""
    for candidate in DEFAULT_CONFIG_FILES:
        path = os.path.expanduser(candidate)
        if os.path.isfile(path):
            return path
    return None


def load_config(path: Optional[str] = None) -> FootprintConfig:
    """
    Load configuration (supports YAML and environment variables).

    Args:
        path: Configuration file path (optional). When omitted the default
              locations are searched.

    Returns:
        Configuration instance
    """
    if path is None:
        path = _find_default_config()
        if path is None:
            return FootprintConfig()

    config = FootprintConfig.from_yaml(path)
    logger.debug(f"Loaded config from: {path}")
    return config
