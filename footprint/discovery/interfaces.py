# -*- coding: utf-8 -*-
"""
footprint/discovery/interfaces.py
Abstract interfaces for assembly metadata reading and link inspection.
"""

from abc import ABC, abstractmethod

from .models import AssemblyMetadata, InspectionResult


class AssemblyReader(ABC):
    """Abstract interface for reading managed assembly metadata."""

    @abstractmethod
    def read(self, path: str) -> AssemblyMetadata:
        """Read identity, P/Invoke modules and references of the assembly at path.

        Raises:
            AssemblyLoadError: If the file carries no readable managed metadata.
        """
        pass

    @abstractmethod
    def is_managed(self, path: str) -> bool:
        """Check whether the file at path is a managed assembly."""
        pass


class LinkInspector(ABC):
    """Abstract interface for listing the direct native dependencies of a file."""

    @abstractmethod
    def inspect(self, path: str) -> InspectionResult:
        """Run the inspection. A non-zero return code means 'not a linked binary'."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this inspector is available on the system."""
        pass
