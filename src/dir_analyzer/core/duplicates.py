"""Content-based duplicate file detection.

Files are hashed over their entire contents in fixed-size batches. Every file
of a batch is read concurrently, and the next batch only starts once the
current one has finished, which bounds the number of open files and the
memory held by in-flight reads.

The default digest is MD5. Whole-file hash equality is treated as content
equality; a collision would group two different files together. Pass a
stronger ``hash_algorithm`` (e.g. ``sha256``) when that risk matters.
"""

import asyncio
import hashlib
import logging
from collections.abc import Sequence
from typing import Final

from dir_analyzer.core.filesystem import LocalFileSystem
from dir_analyzer.core.options import DEFAULT_HASH_ALGORITHM
from dir_analyzer.types.models import DuplicateGroup, DuplicateStats
from dir_analyzer.types.protocols import FileSystem, ProgressCallback
from dir_analyzer.utils.formatting import format_size

logger = logging.getLogger(__name__)

BATCH_SIZE: Final[int] = 50


def validate_hash_algorithm(name: str) -> str:
    """Return ``name`` normalized, raising ValueError if hashlib lacks it.

    Examples:
        >>> validate_hash_algorithm("SHA256")
        'sha256'
    """
    normalized = name.strip().lower()
    if normalized not in hashlib.algorithms_available:
        msg = (
            f"Unsupported hash algorithm '{name}'. "
            f"Available: {', '.join(sorted(hashlib.algorithms_guaranteed))}"
        )
        raise ValueError(msg)
    return normalized


class _DetectionRun:
    """Mutable state of one ``detect_duplicates`` call."""

    def __init__(self, total: int, progress_callback: ProgressCallback | None) -> None:
        self.total: int = total
        self.processed: int = 0
        self.hashes: dict[str, list[str]] = {}
        self.progress_callback: ProgressCallback | None = progress_callback

    def record(self, path: str, digest: str | None) -> None:
        # Runs on the event loop between suspension points, never concurrently
        if digest is not None:
            self.hashes.setdefault(digest, []).append(path)
        self.processed += 1
        if self.progress_callback is not None:
            self.progress_callback(self.processed, self.total, path if digest is not None else None)


class DuplicateDetector:
    """Groups files with identical content.

    Args:
        filesystem: Filesystem facade (defaults to the local disk)
        hash_algorithm: Any algorithm name accepted by ``hashlib.new``
        batch_size: Number of files hashed concurrently

    Raises:
        ValueError: If the hash algorithm is unknown or the batch size < 1
    """

    def __init__(
        self,
        filesystem: FileSystem | None = None,
        *,
        hash_algorithm: str = DEFAULT_HASH_ALGORITHM,
        batch_size: int = BATCH_SIZE,
    ) -> None:
        if batch_size < 1:
            msg = "batch_size must be at least 1"
            raise ValueError(msg)
        self.filesystem: FileSystem = filesystem if filesystem is not None else LocalFileSystem()
        self.hash_algorithm: str = validate_hash_algorithm(hash_algorithm)
        self.batch_size: int = batch_size

    async def detect_duplicates(
        self,
        paths: Sequence[str],
        progress_callback: ProgressCallback | None = None,
    ) -> list[DuplicateGroup]:
        """Hash ``paths`` and return the groups of identical files.

        Unreadable files count towards progress but never join a group.

        Args:
            paths: Files to compare
            progress_callback: Called with ``(0, total)`` at start and once per
                completed file

        Returns:
            Groups of two or more members, largest wasted space first
        """
        run = _DetectionRun(len(paths), progress_callback)

        if progress_callback is not None:
            progress_callback(0, run.total, "Starting duplicate detection...")

        for start in range(0, len(paths), self.batch_size):
            batch = paths[start : start + self.batch_size]
            _ = await asyncio.gather(*(self._process_file(path, run) for path in batch))

        groups = await self._build_groups(run.hashes)

        logger.info(
            "Duplicate detection complete",
            extra={
                "files": run.total,
                "groups": len(groups),
                "algorithm": self.hash_algorithm,
            },
        )
        return groups

    async def hash_file(self, path: str) -> str:
        """Return the hex digest of the entire contents of ``path``."""
        content = await self.filesystem.read_entire_file(path)
        digest = hashlib.new(self.hash_algorithm)
        digest.update(content)
        return digest.hexdigest()

    async def _process_file(self, path: str, run: _DetectionRun) -> None:
        try:
            digest = await self.hash_file(path)
        except OSError as exc:
            logger.debug(
                "Cannot hash file, skipping",
                extra={"path": path, "error": str(exc)},
            )
            run.record(path, None)
            return
        run.record(path, digest)

    async def _build_groups(self, hashes: dict[str, list[str]]) -> list[DuplicateGroup]:
        groups: list[DuplicateGroup] = []

        for digest, members in hashes.items():
            if len(members) < 2:
                continue
            # Size comes from the first member only; the others are not re-verified
            try:
                stat_result = await self.filesystem.stat(members[0])
            except OSError as exc:
                logger.debug(
                    "Cannot stat duplicate group representative, dropping group",
                    extra={"path": members[0], "error": str(exc)},
                )
                continue

            size = stat_result.st_size
            wasted = size * (len(members) - 1)
            groups.append(
                DuplicateGroup(
                    content_hash=digest,
                    file_size=size,
                    members=tuple(members),
                    size_formatted=format_size(size),
                    wasted_space_formatted=format_size(wasted),
                )
            )

        groups.sort(key=lambda group: group.wasted_space, reverse=True)
        return groups


def summarize_duplicates(groups: Sequence[DuplicateGroup]) -> DuplicateStats | None:
    """Summarize duplicate groups, or return None when there are none."""
    if not groups:
        return None
    total_wasted = sum(group.wasted_space for group in groups)
    return DuplicateStats(
        total_groups=len(groups),
        total_wasted_space=total_wasted,
        total_wasted_space_formatted=format_size(total_wasted),
    )
