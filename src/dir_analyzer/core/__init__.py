"""Analysis core: traversal, classification, duplicate detection and scanners."""

from __future__ import annotations

from .analyzer import DirectoryAnalyzer, analyze
from .classifier import FileClassifier, classify
from .duplicates import DuplicateDetector
from .exclusions import ExclusionFilter, should_exclude_directory, should_exclude_file
from .filesystem import LocalFileSystem
from .options import AnalysisOptions
from .tree import TreeNode, build_compact_tree, build_tree

__all__ = [
    "AnalysisOptions",
    "DirectoryAnalyzer",
    "DuplicateDetector",
    "ExclusionFilter",
    "FileClassifier",
    "LocalFileSystem",
    "TreeNode",
    "analyze",
    "build_compact_tree",
    "build_tree",
    "classify",
    "should_exclude_directory",
    "should_exclude_file",
]
