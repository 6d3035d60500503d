"""Data models for dir-analyzer.

This module defines the immutable dataclasses exchanged between the walker,
the downstream scanners and the presentation layer.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from dir_analyzer.utils.formatting import format_size_mb

if TYPE_CHECKING:
    from dir_analyzer.core.tree import TreeNode


class FileCategory(str, Enum):
    """The seven fixed file-type buckets.

    Declaration order is the lookup order used by the classifier and the
    display order used by the text report.
    """

    IMAGES = "images"
    VIDEOS = "videos"
    DOCUMENTS = "documents"
    AUDIO = "audio"
    CODE = "code"
    ARCHIVES = "archives"
    OTHER = "other"


type ClassificationCounts = Mapping[FileCategory, int]


@dataclass(slots=True, frozen=True)
class FileRecord:
    """A regular file collected by the walker.

    Owned by the walker and shared read-only with every downstream scanner.
    """

    path: str
    size: int


@dataclass(slots=True, frozen=True)
class DirectoryEntry:
    """One entry of a directory listing as returned by the filesystem facade.

    Symlinks report False for both flags so that traversal never follows them.
    """

    name: str
    is_directory: bool
    is_file: bool


@dataclass(slots=True, frozen=True)
class LargeFile:
    """File selected by the large-file or top-N scanners."""

    path: str
    size: int
    size_formatted: str


@dataclass(slots=True, frozen=True)
class EmptyFile:
    """Zero-byte file with its last modification time."""

    path: str
    modified: datetime


@dataclass(slots=True, frozen=True)
class DuplicateGroup:
    """Files sharing the same content hash.

    Invariant: ``members`` always holds at least two paths. ``file_size`` is
    taken from the first member only.
    """

    content_hash: str
    file_size: int
    members: tuple[str, ...]
    size_formatted: str
    wasted_space_formatted: str

    @property
    def wasted_space(self) -> int:
        """Bytes reclaimable by keeping a single member of the group."""
        return self.file_size * (len(self.members) - 1)


@dataclass(slots=True, frozen=True)
class DuplicateStats:
    """Summary over all duplicate groups of one run."""

    total_groups: int
    total_wasted_space: int
    total_wasted_space_formatted: str


@dataclass(slots=True, frozen=True)
class TreeView:
    """Compact tree built from at most ``total_files - omitted_files`` entries."""

    root: "TreeNode"
    total_files: int
    omitted_files: int


@dataclass(slots=True, frozen=True)
class AnalysisResult:
    """Immutable report produced by one ``analyze`` call.

    The mandatory totals are always present. Every optional fragment is only
    materialized when the matching option was enabled.
    """

    path: str
    total_size_bytes: int
    folders: int
    files: int
    types: ClassificationCounts
    scan_id: str
    large_files: tuple[LargeFile, ...] | None = None
    duplicate_groups: tuple[DuplicateGroup, ...] | None = None
    duplicate_stats: DuplicateStats | None = None
    top_largest_files: tuple[LargeFile, ...] | None = None
    empty_files: tuple[EmptyFile, ...] | None = None
    tree_view: TreeView | None = None
    skipped_entries: int = field(default=0, compare=False)

    @property
    def total_size_mb(self) -> float:
        """Total size in MiB rounded to one decimal place."""
        return format_size_mb(self.total_size_bytes)
