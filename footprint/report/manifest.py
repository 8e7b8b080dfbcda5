# -*- coding: utf-8 -*-
"""
footprint/report/manifest.py - Deployment manifest

Aggregates the classified file lists into sized sections and renders the
human-readable report:

    Managed Code
    ------------
    28672              /opt/app/app.exe

    Summary
    -------
    Total Managed Code Size: 28672      (0.027 MB)
                             28672      (0.027 MB)
"""

import csv
import logging
import os
import sys
from dataclasses import dataclass, field
from typing import List, Optional, TextIO

from footprint.discovery.models import ClassifiedFiles, FileCategory
from .blacklist import apply_blacklist
from .strip import BinaryStripper

logger = logging.getLogger(__name__)


SECTION_LABELS = {
    FileCategory.MANAGED: "Managed Code",
    FileCategory.NATIVE: "Native Code",
    FileCategory.DEBUG: "Debugging Symbols",
    FileCategory.MISC: "Misc Data",
}
STRIPPED_SUFFIX = " (stripped)"

SIZE_COLUMN_WIDTH = len(str(2 ** 63 - 1))
TOTAL_COLUMN_WIDTH = 10
SUMMARY_LABEL_PADDING = 15


def megabytes(size: int) -> float:
    return size / 1024.0 / 1024.0


@dataclass
class ManifestEntry:
    """One reported file."""
    path: str
    size: int                  # on-disk size
    measured_size: int         # size counted in the totals (stripped copy for native files)


@dataclass
class ManifestSection:
    """One category of the manifest."""
    category: FileCategory
    label: str
    entries: List[ManifestEntry] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(e.measured_size for e in self.entries)


@dataclass
class Manifest:
    """Sized, filtered and ordered file lists."""
    sections: List[ManifestSection] = field(default_factory=list)
    labels: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(s.total for s in self.sections)

    def section(self, category: FileCategory) -> Optional[ManifestSection]:
        for section in self.sections:
            if section.category is category:
                return section
        return None


def section_labels(strip_binaries: bool) -> List[str]:
    labels = []
    for category in FileCategory:
        label = SECTION_LABELS[category]
        if category is FileCategory.NATIVE and strip_binaries:
            label += STRIPPED_SUFFIX
        labels.append(label)
    return labels


def build_manifest(files: ClassifiedFiles,
                   strip_binaries: bool = False,
                   include_debug: bool = False,
                   blacklist: Optional[List[str]] = None,
                   stripper: Optional[BinaryStripper] = None) -> Manifest:
    """
    Size and order the classified files.

    A section exists only for a non-empty category; debug symbols are
    dropped unless include_debug is set. Entries are ordered by descending
    on-disk size, ties keeping discovery order.

    Args:
        files: Discovery result
        strip_binaries: Measure native files on a stripped copy
        include_debug: Keep the debug category
        blacklist: File-name prefixes to exclude
        stripper: Stripper to use (required when strip_binaries is set)
    """
    if strip_binaries and stripper is None:
        raise ValueError("strip_binaries requires a stripper")

    labels = section_labels(strip_binaries)
    manifest = Manifest(labels=labels)

    for category, label in zip(FileCategory, labels):
        if category is FileCategory.DEBUG and not include_debug:
            continue

        paths = files.files(category)
        if not paths:
            continue

        paths = apply_blacklist(paths, blacklist or [])
        paths = sorted(paths, key=lambda p: os.path.getsize(p), reverse=True)

        section = ManifestSection(category=category, label=label)
        for path in paths:
            size = os.path.getsize(path)
            measured = size
            if category is FileCategory.NATIVE and strip_binaries:
                measured = os.path.getsize(stripper.strip(path))
            section.entries.append(ManifestEntry(path=path, size=size, measured_size=measured))

        manifest.sections.append(section)

    return manifest


def render_manifest(manifest: Manifest, stream: TextIO = None) -> None:
    """Print the categorized listing followed by the summary."""
    out = stream or sys.stdout

    for section in manifest.sections:
        out.write(section.label + "\n")
        out.write("-" * len(section.label) + "\n")
        for entry in section.entries:
            out.write(f"{str(entry.measured_size).ljust(SIZE_COLUMN_WIDTH)}{entry.path}\n")
        out.write("\n")

    width = max((len(label) for label in manifest.labels), default=0) + SUMMARY_LABEL_PADDING

    out.write("Summary\n")
    out.write("-------\n")
    for section in manifest.sections:
        title = f"Total {section.label} Size".rjust(width)
        out.write(f"{title}: {str(section.total).ljust(TOTAL_COLUMN_WIDTH)} "
                  f"({megabytes(section.total):.3f} MB)\n")

    out.write("\n")
    total = manifest.total
    out.write(f"{' ' * width}  {str(total).ljust(TOTAL_COLUMN_WIDTH)} ({megabytes(total):.3f} MB)\n")


def export_csv(manifest: Manifest, output_path: str) -> None:
    """Export one row per reported file."""
    with open(output_path, 'w', newline='', encoding='utf-8-sig') as f:
        writer = csv.writer(f)
        writer.writerow(['category', 'path', 'size', 'measured_size'])
        for section in manifest.sections:
            for entry in section.entries:
                writer.writerow([section.category.value, entry.path, entry.size, entry.measured_size])

    logger.info(f"CSV report exported: {output_path}")
