"""Protocol definitions for component interfaces.

This module defines structural subtyping protocols for the collaborators the
analysis core consumes: the progress sink and the filesystem facade.
"""

import os
from typing import Protocol, runtime_checkable

from dir_analyzer.types.models import DirectoryEntry


class ProgressCallback(Protocol):
    """Progress sink invoked synchronously by the core.

    Called at pass start with ``current=0``, once per processed file, and at
    pass completion with ``current == total``. Implementations must return
    quickly since they run between the core's I/O suspension points.
    """

    def __call__(self, current: int, total: int, label: str | None = None) -> None:
        """Report progress.

        Args:
            current: Number of items processed so far
            total: Number of items expected in this pass
            label: Optional phase description or path of the current item
        """
        ...


@runtime_checkable
class FileSystem(Protocol):
    """Asynchronous filesystem facade used by the walker and scanners.

    Every method is a suspension point. Failures surface as ``OSError``.
    """

    async def stat(self, path: str) -> os.stat_result:
        """Return the stat result of ``path``, following symlinks.

        Args:
            path: Filesystem path

        Returns:
            Stat result for the path
        """
        ...

    async def read_directory_entries(self, path: str) -> list[DirectoryEntry]:
        """List the entries of directory ``path``.

        Args:
            path: Directory path

        Returns:
            Entries in the order the operating system returns them
        """
        ...

    async def read_entire_file(self, path: str) -> bytes:
        """Read the whole contents of ``path``.

        Args:
            path: File path

        Returns:
            File contents
        """
        ...
