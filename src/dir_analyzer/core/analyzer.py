"""Two-pass directory analysis.

This module implements the analysis engine:
- Pass 1 counts the files that will be processed, giving the progress
  denominator
- Pass 2 re-walks the tree with identical exclusion and depth rules, stats
  every file, classifies it and collects a ``FileRecord``
- The collected records feed the duplicate detector, the size/date filters,
  the large/top-N/empty scanners and the tree builder

Per-entry filesystem failures are logged and absorbed; only an invalid root
raises. All counters of a run live in a ``ScanTotals`` accumulator created by
``analyze`` itself, so one ``DirectoryAnalyzer`` can serve concurrent runs.
"""

import asyncio
import logging
import os
import stat
import time
import uuid
from dataclasses import dataclass, field

from dir_analyzer.core.classifier import FileClassifier
from dir_analyzer.core.duplicates import DuplicateDetector, summarize_duplicates
from dir_analyzer.core.exclusions import ExclusionFilter
from dir_analyzer.core.filesystem import LocalFileSystem
from dir_analyzer.core.options import AnalysisOptions
from dir_analyzer.core.scanners import (
    detect_empty_files,
    detect_large_files,
    filter_by_date,
    filter_by_size,
    top_largest_files,
)
from dir_analyzer.core.tree import build_compact_tree
from dir_analyzer.exceptions import PathError
from dir_analyzer.types.models import AnalysisResult, FileRecord
from dir_analyzer.types.protocols import FileSystem, ProgressCallback
from dir_analyzer.utils.formatting import format_duration
from dir_analyzer.utils.logging import reset_scan_id, set_scan_id

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ScanTotals:
    """Accumulator for one collection pass.

    Only mutated from the event loop thread, so each increment and append
    completes without interleaving.
    """

    expected_files: int
    total_size: int = 0
    folders: int = 0
    files: int = 0
    processed: int = 0
    skipped: int = 0
    records: list[FileRecord] = field(default_factory=list)
    classifier: FileClassifier = field(default_factory=FileClassifier)


@dataclass(slots=True, frozen=True)
class _WalkRules:
    """Traversal rules shared by both passes."""

    exclusions: ExclusionFilter
    recursive: bool
    max_depth: int

    def beyond_depth(self, depth: int) -> bool:
        return self.max_depth >= 0 and depth > self.max_depth


class DirectoryAnalyzer:
    """Walks a directory tree and assembles an ``AnalysisResult``.

    Args:
        filesystem: Filesystem facade (defaults to the local disk)
    """

    def __init__(self, filesystem: FileSystem | None = None) -> None:
        self.filesystem: FileSystem = filesystem if filesystem is not None else LocalFileSystem()

    async def analyze(self, options: AnalysisOptions) -> AnalysisResult:
        """Analyze ``options.root_path``.

        Args:
            options: Analysis options

        Returns:
            The assembled analysis result

        Raises:
            PathError: If the root does not exist or is not a directory
            ValueError: If ``options.hash_algorithm`` is unknown and
                duplicate detection is enabled
        """
        root = options.root_path
        await self._validate_root(root)

        scan_id = uuid.uuid4().hex[:8]
        token = set_scan_id(scan_id)
        try:
            return await self._run(options, scan_id)
        finally:
            reset_scan_id(token)

    async def _validate_root(self, root: str) -> None:
        try:
            stat_result = await self.filesystem.stat(root)
        except OSError as exc:
            msg = f"Unable to access path '{root}': {exc}"
            raise PathError(root, msg) from exc

        if not stat.S_ISDIR(stat_result.st_mode):
            msg = f"Path '{root}' is not a directory"
            raise PathError(root, msg)

    async def _run(self, options: AnalysisOptions, scan_id: str) -> AnalysisResult:
        root = options.root_path
        callback = options.progress_callback
        rules = _WalkRules(
            exclusions=ExclusionFilter(options.exclude_patterns),
            recursive=options.recursive,
            max_depth=options.max_depth,
        )
        detector = None
        if options.enable_duplicate_detection:
            detector = DuplicateDetector(self.filesystem, hash_algorithm=options.hash_algorithm)
        started = time.monotonic()

        logger.info(
            "Analysis started",
            extra={"path": root, "recursive": options.recursive, "max_depth": options.max_depth},
        )

        if callback is not None:
            callback(0, 1, "Scanning directories...")

        expected = await self._count_files(root, rules, depth=0)
        totals = ScanTotals(expected_files=expected)
        await self._collect_directory(root, rules, totals, callback, depth=0)
        _report_pass_complete(totals, callback)

        records = tuple(totals.records)

        large_files = None
        if options.large_size_threshold is not None:
            large_files = tuple(detect_large_files(records, options.large_size_threshold))

        duplicate_groups = None
        duplicate_stats = None
        if detector is not None:
            groups = await detector.detect_duplicates([record.path for record in records], callback)
            duplicate_groups = tuple(groups)
            duplicate_stats = summarize_duplicates(groups)

        filtered: list[FileRecord] = list(records)
        if options.has_size_filter:
            filtered = filter_by_size(filtered, options.min_size, options.max_size)
        if options.has_date_filter:
            filtered = await filter_by_date(filtered, self.filesystem, options.date_from, options.date_to)

        top_files = None
        if options.top_n:
            top_files = tuple(top_largest_files(filtered, options.top_n))

        empty_files = None
        if options.show_empty_files:
            empty_files = tuple(await detect_empty_files(records, self.filesystem))

        tree_view = None
        if len(filtered) <= options.tree_file_limit:
            tree_view = build_compact_tree(filtered, root, options.tree_max_files)

        elapsed = time.monotonic() - started
        logger.info(
            "Analysis complete in %s",
            format_duration(elapsed),
            extra={
                "path": root,
                "files": totals.files,
                "folders": totals.folders,
                "total_bytes": totals.total_size,
                "skipped_entries": totals.skipped,
                "elapsed_seconds": round(elapsed, 3),
            },
        )

        return AnalysisResult(
            path=root,
            total_size_bytes=totals.total_size,
            folders=totals.folders,
            files=totals.files,
            types=totals.classifier.get_classification(),
            scan_id=scan_id,
            large_files=large_files,
            duplicate_groups=duplicate_groups,
            duplicate_stats=duplicate_stats,
            top_largest_files=top_files,
            empty_files=empty_files,
            tree_view=tree_view,
            skipped_entries=totals.skipped,
        )

    async def _count_files(self, path: str, rules: _WalkRules, depth: int) -> int:
        """Pass 1: count non-excluded files within the depth bound."""
        if rules.beyond_depth(depth):
            return 0

        try:
            entries = await self.filesystem.read_directory_entries(path)
        except OSError as exc:
            # Reported as a warning by the collection pass
            logger.debug(
                "Cannot read directory while counting, skipping",
                extra={"path": path, "error": str(exc)},
            )
            return 0

        count = 0
        subdirectories: list[str] = []
        for entry in entries:
            if entry.is_directory:
                if rules.exclusions.excludes_directory(entry.name):
                    continue
                if rules.recursive:
                    subdirectories.append(os.path.join(path, entry.name))
            elif entry.is_file and not rules.exclusions.excludes_file(entry.name):
                count += 1

        if subdirectories:
            counts = await asyncio.gather(
                *(self._count_files(subdirectory, rules, depth + 1) for subdirectory in subdirectories)
            )
            count += sum(counts)
        return count

    async def _collect_directory(
        self,
        path: str,
        rules: _WalkRules,
        totals: ScanTotals,
        callback: ProgressCallback | None,
        depth: int,
    ) -> None:
        """Pass 2: collect records for ``path`` and its subtree."""
        if rules.beyond_depth(depth):
            return

        try:
            entries = await self.filesystem.read_directory_entries(path)
        except OSError as exc:
            logger.warning(
                "Unable to read directory '%s': %s",
                path,
                exc,
                extra={"path": path, "error": str(exc)},
            )
            totals.skipped += 1
            return

        subdirectories: list[str] = []
        files: list[tuple[str, str]] = []
        for entry in entries:
            full_path = os.path.join(path, entry.name)
            if entry.is_directory:
                if rules.exclusions.excludes_directory(entry.name):
                    continue
                totals.folders += 1
                if rules.recursive:
                    subdirectories.append(full_path)
            elif entry.is_file and not rules.exclusions.excludes_file(entry.name):
                files.append((entry.name, full_path))

        if files:
            _ = await asyncio.gather(
                *(self._collect_file(name, full_path, totals, callback) for name, full_path in files)
            )

        for subdirectory in subdirectories:
            await self._collect_directory(subdirectory, rules, totals, callback, depth + 1)

    async def _collect_file(
        self,
        name: str,
        path: str,
        totals: ScanTotals,
        callback: ProgressCallback | None,
    ) -> None:
        try:
            stat_result = await self.filesystem.stat(path)
        except OSError as exc:
            logger.warning(
                "Unable to access file '%s': %s",
                path,
                exc,
                extra={"path": path, "error": str(exc)},
            )
            totals.skipped += 1
            totals.processed += 1
            if callback is not None:
                callback(totals.processed, max(totals.expected_files, totals.processed), None)
            return

        size = stat_result.st_size
        totals.total_size += size
        totals.files += 1
        totals.classifier.classify_file(name)
        totals.records.append(FileRecord(path=path, size=size))
        totals.processed += 1

        if callback is not None:
            callback(totals.processed, max(totals.expected_files, totals.processed), path)


def _report_pass_complete(totals: ScanTotals, callback: ProgressCallback | None) -> None:
    """Emit the closing ``current == total`` call unless the last file did."""
    if callback is None:
        return
    final = max(totals.expected_files, totals.processed)
    if totals.processed == final and final > 0:
        return
    callback(final, final, None)


async def analyze(options: AnalysisOptions, filesystem: FileSystem | None = None) -> AnalysisResult:
    """Run one analysis with a fresh ``DirectoryAnalyzer``."""
    return await DirectoryAnalyzer(filesystem).analyze(options)
