"""Polling watch mode.

The tree is summarized as a cheap snapshot (path to size and mtime for every
non-excluded entry) once per interval. A change starts a quiet window; each
further change restarts it, and once the window passes without changes the
full analysis is run again.
"""

import asyncio
import logging
import os
from collections.abc import AsyncGenerator, Callable
from contextlib import aclosing

from dir_analyzer.core.analyzer import DirectoryAnalyzer
from dir_analyzer.core.exclusions import ExclusionFilter
from dir_analyzer.core.options import AnalysisOptions
from dir_analyzer.exceptions import PathError
from dir_analyzer.types.models import AnalysisResult

logger = logging.getLogger(__name__)

type Snapshot = dict[str, tuple[int, int]]
type ResultHandler = Callable[[AnalysisResult, AnalysisResult | None], None]

CHECK_INTERVAL_SECONDS = 1.0
DEBOUNCE_SECONDS = 2.0


def take_snapshot(
    root: str,
    exclusions: ExclusionFilter,
    *,
    recursive: bool = True,
    max_depth: int = -1,
) -> Snapshot:
    """Map every visible entry under ``root`` to ``(size, mtime_ns)``.

    Follows the same exclusion and depth rules as the analyzer. Directories
    are recorded with size 0 so that creating or removing an empty folder
    is noticed. Unreadable directories are left out.
    """
    snapshot: Snapshot = {}

    def visit(path: str, depth: int) -> None:
        if max_depth >= 0 and depth > max_depth:
            return
        try:
            with os.scandir(path) as entries:
                children = list(entries)
        except OSError as exc:
            logger.debug("Cannot read directory for snapshot", extra={"path": path, "error": str(exc)})
            return

        for entry in children:
            try:
                if entry.is_dir(follow_symlinks=False):
                    if exclusions.excludes_directory(entry.name):
                        continue
                    snapshot[entry.path] = (0, entry.stat(follow_symlinks=False).st_mtime_ns)
                    if recursive:
                        visit(entry.path, depth + 1)
                elif entry.is_file(follow_symlinks=False) and not exclusions.excludes_file(entry.name):
                    stat_result = entry.stat(follow_symlinks=False)
                    snapshot[entry.path] = (stat_result.st_size, stat_result.st_mtime_ns)
            except OSError:
                # Entry vanished between listing and stat
                continue

    visit(root, 0)
    return snapshot


async def watch_for_changes(
    options: AnalysisOptions,
    *,
    check_interval: float = CHECK_INTERVAL_SECONDS,
    debounce: float = DEBOUNCE_SECONDS,
) -> AsyncGenerator[None, None]:
    """Yield once per settled burst of changes below ``options.root_path``.

    Runs until cancelled or closed.
    """
    exclusions = ExclusionFilter(options.exclude_patterns)
    loop = asyncio.get_running_loop()

    async def snapshot() -> Snapshot:
        return await asyncio.to_thread(
            take_snapshot,
            options.root_path,
            exclusions,
            recursive=options.recursive,
            max_depth=options.max_depth,
        )

    logger.info(
        "Starting directory watcher",
        extra={"path": options.root_path, "check_interval": check_interval, "debounce": debounce},
    )

    previous = await snapshot()
    try:
        while True:
            await asyncio.sleep(check_interval)
            current = await snapshot()
            if current == previous:
                continue

            previous = current
            quiet_since = loop.time()
            while loop.time() - quiet_since < debounce:
                await asyncio.sleep(check_interval)
                current = await snapshot()
                if current != previous:
                    previous = current
                    quiet_since = loop.time()

            logger.debug("Changes settled", extra={"path": options.root_path, "entries": len(current)})
            yield
    except asyncio.CancelledError:
        logger.info("Directory watcher cancelled", extra={"path": options.root_path})
        raise


async def run_watch(
    options: AnalysisOptions,
    on_result: ResultHandler,
    *,
    analyzer: DirectoryAnalyzer | None = None,
    check_interval: float = CHECK_INTERVAL_SECONDS,
    debounce: float = DEBOUNCE_SECONDS,
    max_runs: int | None = None,
) -> None:
    """Analyze once, then re-analyze after every settled change.

    ``on_result`` receives each new result together with the previous one
    (None for the first run). A root that disappears between runs is logged
    and watching continues.

    Args:
        options: Analysis options reused for every run
        on_result: Called after every completed analysis
        analyzer: Analyzer to use (defaults to a local-disk analyzer)
        check_interval: Seconds between snapshots
        debounce: Quiet window in seconds before a rerun
        max_runs: Stop after this many analyses; None watches forever

    Raises:
        PathError: If the first analysis fails
    """
    analyzer = analyzer if analyzer is not None else DirectoryAnalyzer()

    previous = await analyzer.analyze(options)
    on_result(previous, None)
    runs = 1
    if max_runs is not None and runs >= max_runs:
        return

    async with aclosing(watch_for_changes(options, check_interval=check_interval, debounce=debounce)) as changes:
        async for _ in changes:
            try:
                current = await analyzer.analyze(options)
            except PathError as exc:
                logger.warning(
                    "Re-analysis failed: %s",
                    exc,
                    extra={"path": options.root_path, "error": str(exc)},
                )
                continue

            on_result(current, previous)
            previous = current
            runs += 1
            if max_runs is not None and runs >= max_runs:
                return
