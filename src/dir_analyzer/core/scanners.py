"""Post-walk selection and ranking over the collected file records.

Every function works on the in-memory record list produced by the walker and
never re-walks the tree. Functions that need modification times re-stat
only the candidates; a file that can no longer be stat'd is dropped
silently.
"""

import logging
from collections.abc import Sequence
from datetime import datetime

from dir_analyzer.types.models import EmptyFile, FileRecord, LargeFile
from dir_analyzer.types.protocols import FileSystem
from dir_analyzer.utils.formatting import format_size

logger = logging.getLogger(__name__)


def _to_large_file(record: FileRecord) -> LargeFile:
    return LargeFile(
        path=record.path,
        size=record.size,
        size_formatted=format_size(record.size),
    )


def detect_large_files(files: Sequence[FileRecord], threshold: int) -> list[LargeFile]:
    """Return files of at least ``threshold`` bytes, largest first.

    Examples:
        >>> files = [FileRecord("a", 10), FileRecord("b", 2000), FileRecord("c", 500000)]
        >>> [f.path for f in detect_large_files(files, 1000)]
        ['c', 'b']
    """
    selected = [record for record in files if record.size >= threshold]
    selected.sort(key=lambda record: record.size, reverse=True)
    return [_to_large_file(record) for record in selected]


def top_largest_files(files: Sequence[FileRecord], count: int) -> list[LargeFile]:
    """Return the ``count`` largest files, largest first.

    The input sequence is left untouched.
    """
    if count <= 0:
        return []
    ranked = sorted(files, key=lambda record: record.size, reverse=True)
    return [_to_large_file(record) for record in ranked[:count]]


def filter_by_size(
    files: Sequence[FileRecord],
    min_size: int | None = None,
    max_size: int | None = None,
) -> list[FileRecord]:
    """Keep files whose size lies within the inclusive ``[min_size, max_size]``."""
    return [
        record
        for record in files
        if (min_size is None or record.size >= min_size)
        and (max_size is None or record.size <= max_size)
    ]


def _as_local_naive(moment: datetime | None) -> datetime | None:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if moment is None or moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


async def filter_by_date(
    files: Sequence[FileRecord],
    filesystem: FileSystem,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
) -> list[FileRecord]:
    """Keep files modified within the inclusive ``[date_from, date_to]`` range.

    Args:
        files: Candidate records
        filesystem: Facade used to re-stat each candidate
        date_from: Earliest accepted modification time; aware values are
            converted to local time
        date_to: Latest accepted modification time, converted the same way

    Returns:
        Surviving records in input order
    """
    if date_from is None and date_to is None:
        return list(files)

    # Modification times are compared as naive local time
    date_from = _as_local_naive(date_from)
    date_to = _as_local_naive(date_to)

    filtered: list[FileRecord] = []
    for record in files:
        try:
            stat_result = await filesystem.stat(record.path)
        except OSError as exc:
            logger.debug(
                "Cannot stat file during date filtering, dropping",
                extra={"path": record.path, "error": str(exc)},
            )
            continue

        modified = datetime.fromtimestamp(stat_result.st_mtime)
        if date_from is not None and modified < date_from:
            continue
        if date_to is not None and modified > date_to:
            continue
        filtered.append(record)

    return filtered


async def detect_empty_files(files: Sequence[FileRecord], filesystem: FileSystem) -> list[EmptyFile]:
    """Return zero-byte files, most recently modified first.

    Args:
        files: Collected records
        filesystem: Facade used to fetch each empty file's modification time

    Returns:
        Empty files sorted by modification time descending
    """
    empty_files: list[EmptyFile] = []
    for record in files:
        if record.size != 0:
            continue
        try:
            stat_result = await filesystem.stat(record.path)
        except OSError as exc:
            logger.debug(
                "Cannot stat empty file, dropping",
                extra={"path": record.path, "error": str(exc)},
            )
            continue
        empty_files.append(
            EmptyFile(
                path=record.path,
                modified=datetime.fromtimestamp(stat_result.st_mtime),
            )
        )

    empty_files.sort(key=lambda empty: empty.modified, reverse=True)
    return empty_files
