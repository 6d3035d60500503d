"""In-memory FileSystem implementation for analyzer tests.

Paths are POSIX strings. Directories are created implicitly for every parent
of an added file. Failures are injected per path through the ``*_errors``
sets, each raising ``PermissionError`` from the matching operation.
"""

from __future__ import annotations

import os
import posixpath
import stat
from datetime import datetime

from dir_analyzer.types.models import DirectoryEntry

DEFAULT_MTIME = datetime(2024, 1, 15, 12, 0, 0).timestamp()


class FakeFileSystem:
    """Scriptable ``FileSystem`` double."""

    def __init__(self, root: str = "/data") -> None:
        self.root: str = root
        self.files: dict[str, bytes] = {}
        self.mtimes: dict[str, float] = {}
        self.directories: dict[str, list[str]] = {root: []}
        self.stat_errors: set[str] = set()
        self.list_errors: set[str] = set()
        self.read_errors: set[str] = set()
        self.symlinks: set[str] = set()
        self.stat_calls: list[str] = []
        self.read_calls: list[str] = []

    def _link(self, path: str) -> None:
        parent = posixpath.dirname(path)
        if parent not in self.directories:
            self.add_directory(parent)
        name = posixpath.basename(path)
        if name not in self.directories[parent]:
            self.directories[parent].append(name)

    def add_directory(self, path: str) -> str:
        if path not in self.directories:
            self.directories[path] = []
            if path != self.root:
                self._link(path)
        return path

    def add_file(self, path: str, content: bytes = b"", mtime: float = DEFAULT_MTIME) -> str:
        self.files[path] = content
        self.mtimes[path] = mtime
        self._link(path)
        return path

    def add_symlink(self, path: str) -> str:
        """Add an entry reported as neither file nor directory."""
        self.symlinks.add(path)
        self._link(path)
        return path

    def remove(self, path: str) -> None:
        """Remove a file behind the walker's back."""
        _ = self.files.pop(path, None)
        _ = self.mtimes.pop(path, None)

    async def stat(self, path: str) -> os.stat_result:
        self.stat_calls.append(path)
        if path in self.stat_errors:
            msg = "Permission denied"
            raise PermissionError(13, msg, path)
        if path in self.directories:
            return os.stat_result((stat.S_IFDIR | 0o755, 0, 0, 1, 0, 0, 4096, DEFAULT_MTIME, DEFAULT_MTIME, DEFAULT_MTIME))
        if path in self.files:
            mtime = self.mtimes[path]
            size = len(self.files[path])
            return os.stat_result((stat.S_IFREG | 0o644, 0, 0, 1, 0, 0, size, mtime, mtime, mtime))
        msg = "No such file or directory"
        raise FileNotFoundError(2, msg, path)

    async def read_directory_entries(self, path: str) -> list[DirectoryEntry]:
        if path in self.list_errors:
            msg = "Permission denied"
            raise PermissionError(13, msg, path)
        if path not in self.directories:
            msg = "No such file or directory"
            raise FileNotFoundError(2, msg, path)

        entries: list[DirectoryEntry] = []
        for name in self.directories[path]:
            full_path = posixpath.join(path, name)
            entries.append(
                DirectoryEntry(
                    name=name,
                    is_directory=full_path in self.directories,
                    is_file=full_path in self.files,
                )
            )
        return entries

    async def read_entire_file(self, path: str) -> bytes:
        self.read_calls.append(path)
        if path in self.read_errors:
            msg = "Permission denied"
            raise PermissionError(13, msg, path)
        if path not in self.files:
            msg = "No such file or directory"
            raise FileNotFoundError(2, msg, path)
        return self.files[path]
