"""Type definitions and protocols for dir-analyzer.

This package provides:
- Data models (immutable dataclasses)
- Protocol definitions (structural subtyping interfaces)
"""

from dir_analyzer.types.models import (
    AnalysisResult,
    ClassificationCounts,
    DirectoryEntry,
    DuplicateGroup,
    DuplicateStats,
    EmptyFile,
    FileCategory,
    FileRecord,
    LargeFile,
    TreeView,
)
from dir_analyzer.types.protocols import (
    FileSystem,
    ProgressCallback,
)

__all__ = [
    # Data models
    "AnalysisResult",
    "ClassificationCounts",
    "DirectoryEntry",
    "DuplicateGroup",
    "DuplicateStats",
    "EmptyFile",
    "FileCategory",
    "FileRecord",
    "LargeFile",
    "TreeView",
    # Protocols
    "FileSystem",
    "ProgressCallback",
]
